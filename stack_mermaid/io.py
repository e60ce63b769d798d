# stack_mermaid/io.py
from __future__ import annotations

import re
import sys
from pathlib import Path
from typing import Any, Optional, TextIO

import yaml

from .config import StackConfig, build_config


def _sanitize_yaml_for_pyyaml(raw: str) -> tuple[str, list[tuple[int, str, str]]]:
    """Return (sanitized_yaml, changes).

    Each change is (line_number_1_based, original_line, new_line).
    """
    changes: list[tuple[int, str, str]] = []
    out_lines: list[str] = []

    for i, line in enumerate(raw.splitlines(), start=1):
        match = re.match(r"^(\s*(?:-\s*)?(?:intent|title):\s*)(.+)$", line)
        if not match:
            out_lines.append(line)
            continue

        prefix, value = match.group(1), match.group(2)

        # Already quoted or a block scalar.
        if value.startswith(("'", '"', "|", ">")):
            out_lines.append(line)
            continue

        # PyYAML rejects plain scalars containing ":" followed by whitespace or
        # EOL, e.g. "title: Crash: lobby join".
        body, comment = value, ""
        m = re.match(r"^(.*?)(\s+#.*)$", value)
        if m:
            body, comment = m.group(1), m.group(2)

        if re.search(r":(?=\s|$)", body):
            escaped = body.replace("\\", "\\\\").replace('"', '\\"')
            new_line = f'{prefix}"{escaped}"{comment}'
            out_lines.append(new_line)
            if new_line != line:
                changes.append((i, line, new_line))
        else:
            out_lines.append(line)

    sanitized = "\n".join(out_lines) + ("\n" if raw.endswith("\n") else "")
    return sanitized, changes


def _load_yaml_mapping(path: Path) -> dict[str, Any]:
    raw = path.read_text(encoding="utf-8")

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError:
        sanitized, changes = _sanitize_yaml_for_pyyaml(raw)
        try:
            data = yaml.safe_load(sanitized)
        except yaml.YAMLError as e2:
            raise ValueError(f"Failed to parse YAML {path}: {e2}") from e2

        if changes:
            print(
                f"warning: parsed {path} after quoting {len(changes)} line(s); "
                "consider quoting values containing ':' followed by whitespace",
                file=sys.stderr,
            )
            for (ln, old, new) in changes[:10]:
                print(f"warning: {path}:{ln}: {old}", file=sys.stderr)
                print(f"warning: {path}:{ln}: {new}", file=sys.stderr)
            if len(changes) > 10:
                print(f"warning: (and {len(changes) - 10} more)", file=sys.stderr)

    # An empty file means "all defaults".
    if data is None:
        return {}

    if not isinstance(data, dict):
        raise TypeError(
            f"Top-level YAML must be a mapping in {path}, got {type(data).__name__}"
        )

    return data


def load_config(path: Optional[Path]) -> StackConfig:
    """Load a YAML config file, or the defaults when `path` is None."""
    if path is None:
        return StackConfig()
    if not path.exists():
        raise FileNotFoundError(str(path))
    return build_config(_load_yaml_mapping(path), source=str(path))


def read_stack_text(path: Optional[Path], stdin: Optional[TextIO] = None) -> str:
    """Read trace text from `path`, or from stdin when `path` is None or `-`."""
    if path is None or str(path) == "-":
        return (stdin or sys.stdin).read()
    # Traces pasted from consoles are not always clean UTF-8.
    return path.read_text(encoding="utf-8", errors="replace")
