# stack_mermaid/diagnostics.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional, Tuple

from .catalog import StackKnowledge
from .mermaid_fmt import MERMAID_ID_RE

Severity = Literal["error", "warning"]


@dataclass(frozen=True)
class TraceIssue:
    """Structured issue about a processed trace."""

    severity: Severity
    code: str
    message: str
    line_no: Optional[int] = None
    hint: Optional[str] = None


@dataclass(frozen=True)
class DiagnosticsConfig:
    # Rule controls
    ignore: set[str] = field(default_factory=set)
    escalate: set[str] = field(default_factory=set)


def collect_issues(
    knowledge: StackKnowledge, cfg: Optional[DiagnosticsConfig] = None
) -> list[TraceIssue]:
    """Return issues for unmatched lines and unsafe or colliding node ids.

    Collisions do not break processing, but Mermaid merges nodes that share an
    id, so the rendered chain can silently lose a hop.
    """

    cfg = cfg or DiagnosticsConfig()
    issues: list[TraceIssue] = []

    def emit(
        severity: Severity,
        code: str,
        message: str,
        line_no: Optional[int] = None,
        hint: Optional[str] = None,
    ) -> None:
        if code in cfg.ignore:
            return
        final_severity: Severity = (
            "error" if (severity == "warning" and code in cfg.escalate) else severity
        )
        issues.append(
            TraceIssue(
                severity=final_severity,
                code=code,
                message=message,
                line_no=line_no,
                hint=hint,
            )
        )

    for unmatched in knowledge.unmatched:
        emit(
            "warning",
            "W_LINE_UNMATCHED",
            f"line {unmatched.line_no} is not a recognized stack frame: {unmatched.text.strip()!r}",
            line_no=unmatched.line_no,
            hint="add an `ignore` pattern if this line is expected noise",
        )

    class_ids: dict[str, str] = {}
    for cls in knowledge.classes:
        class_id = cls.mermaid_id()
        if not MERMAID_ID_RE.match(class_id):
            emit(
                "warning",
                "W_NODE_ID_NOT_MERMAID_SAFE",
                f"class {cls.name!r} abbreviates to {class_id!r}, which is not Mermaid-safe",
                hint="Mermaid ids use [A-Za-z0-9_] and cannot start with a digit",
            )
        if class_id in class_ids:
            emit(
                "warning",
                "W_CLASS_ID_COLLISION",
                f"classes {class_ids[class_id]!r} and {cls.name!r} share node id {class_id!r}",
            )
        else:
            class_ids[class_id] = cls.name

        method_ids: dict[str, str] = {}
        for method in cls.methods:
            method_id = method.mermaid_id()
            if not MERMAID_ID_RE.match(method_id):
                emit(
                    "warning",
                    "W_NODE_ID_NOT_MERMAID_SAFE",
                    f"method {cls.name}.{method.name} abbreviates to {method_id!r}, "
                    "which is not Mermaid-safe",
                    hint="Mermaid ids use [A-Za-z0-9_] and cannot start with a digit",
                )
            if method_id in method_ids:
                emit(
                    "warning",
                    "W_METHOD_ID_COLLISION",
                    f"methods {method_ids[method_id]!r} and {method.name!r} of "
                    f"{cls.name!r} share node id {class_id}.{method_id}",
                )
            else:
                method_ids[method_id] = method.name

    return issues


def split_issues(issues: list[TraceIssue]) -> Tuple[list[str], list[str]]:
    """Return `(errors, warnings)` as message strings, for the CLI."""
    errors: list[str] = []
    warnings: list[str] = []
    for issue in issues:
        target = errors if issue.severity == "error" else warnings
        target.append(f"{issue.code}: {issue.message}")
    return errors, warnings
