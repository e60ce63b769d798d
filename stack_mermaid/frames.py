# stack_mermaid/frames.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from .constants import ASYNC_FRAME_MARKER, DEFAULT_IGNORE_RULES

# Namespace, class and method segments are separated by `.` or `:`.
_PART_SPLIT_RE = re.compile(r"[.:]")


@dataclass(frozen=True)
class IgnoreRule:
    pattern: str
    intent: str = ""


DEFAULT_IGNORES: tuple[IgnoreRule, ...] = tuple(
    IgnoreRule(pattern, intent) for pattern, intent in DEFAULT_IGNORE_RULES
)


class IgnoreFilter:
    """Matches runtime/infrastructure frames that should be dropped.

    Each rule is compiled on its own so patterns with inline flags such as
    `(?i)` keep working. An empty rule set ignores nothing.
    """

    def __init__(self, rules: Iterable[IgnoreRule] = DEFAULT_IGNORES):
        self.rules: tuple[IgnoreRule, ...] = tuple(rules)
        self._regexes: tuple[re.Pattern[str], ...] = tuple(re.compile(r.pattern) for r in self.rules)

    def matches(self, line: str) -> bool:
        return any(regex.search(line) for regex in self._regexes)


def _split_parts(qualified: str) -> list[str]:
    return _PART_SPLIT_RE.split(qualified)


def _extract_async(line: str) -> Optional[Tuple[str, str]]:
    angle_start = line.find("<")
    if angle_start < 0:
        return None
    angle_end = line.find(">", angle_start)
    if angle_end < 0:
        return None

    method_name = line[angle_start + 1 : angle_end]
    # Drop the separator (`+`, `/`) between owner type and generated type.
    parts = _split_parts(line[: max(angle_start - 1, 0)])
    if len(parts) < 2:
        return None

    return parts[-1].strip(), method_name


def _extract_sync(line: str, paren: int) -> Optional[Tuple[str, str]]:
    parts = _split_parts(line[:paren])
    if len(parts) < 2:
        return None

    return parts[-2].strip(), parts[-1].strip()


def extract_class_and_method(line: str) -> Optional[Tuple[str, str]]:
    """Extract ``(class_name, method_name)`` from one stack frame line.

    Synchronous frames look like::

        ns.model.CoOperationLevelDefinition.getStartingPositionForPlayer (System.Int32 playerNum) (at X.cs:226)

    Async state-machine frames carry the original method name in angle
    brackets and the owning class just before the generated type::

        ns.multiturn.GameManager+<addPlayersAsync>d__26.MoveNext () (at Y.cs:316)

    Returns None when the line does not look like a frame, including frames
    that would yield an empty class or method name.
    """
    paren = line.find("(")
    if paren < 0:
        return None

    if ASYNC_FRAME_MARKER in line:
        result = _extract_async(line)
    else:
        result = _extract_sync(line, paren)

    if result is None:
        return None
    class_name, method_name = result
    if not class_name or not method_name:
        return None
    return class_name, method_name
