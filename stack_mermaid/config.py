# stack_mermaid/config.py
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from .constants import DIRECTION_DEFAULT, TITLE_DEFAULT
from .frames import DEFAULT_IGNORES, IgnoreRule
from .mermaid_fmt import FLOW_DIRECTIONS


@dataclass(frozen=True)
class StackConfig:
    ignore_rules: tuple[IgnoreRule, ...] = field(default=DEFAULT_IGNORES)
    direction: str = DIRECTION_DEFAULT
    title: str = TITLE_DEFAULT


def _parse_ignore_rules(items: Any, source: str) -> list[IgnoreRule]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValueError(f"{source}: `ignore` must be a list")

    rules: list[IgnoreRule] = []
    for i, item in enumerate(items):
        # Bare strings are accepted as patterns without an intent.
        if isinstance(item, str):
            pattern, intent = item, ""
        elif isinstance(item, dict) and isinstance(item.get("pattern"), str):
            pattern, intent = item["pattern"], str(item.get("intent") or "")
        else:
            raise ValueError(f"{source}: ignore[{i}] must be a string or a mapping with `pattern`")

        try:
            re.compile(pattern)
        except re.error as e:
            raise ValueError(f"{source}: ignore[{i}] is not a valid regex {pattern!r}: {e}") from e
        rules.append(IgnoreRule(pattern, intent))
    return rules


def build_config(data: dict[str, Any], *, source: str = "<config>") -> StackConfig:
    """Build a StackConfig from a parsed config mapping.

    Recognized keys: `direction`, `title`, `ignore` (list) and
    `include_default_ignores` (bool, default true). Unknown keys are ignored.
    """
    direction = str(data.get("direction") or DIRECTION_DEFAULT).strip().upper()
    if direction not in FLOW_DIRECTIONS:
        raise ValueError(
            f"{source}: unknown direction {direction!r} (expected one of {', '.join(FLOW_DIRECTIONS)})"
        )

    title = data.get("title")
    if title is not None and not isinstance(title, str):
        raise ValueError(f"{source}: `title` must be a string")

    include_defaults = data.get("include_default_ignores", True)
    if not isinstance(include_defaults, bool):
        raise ValueError(f"{source}: `include_default_ignores` must be true or false")

    rules = _parse_ignore_rules(data.get("ignore"), source)
    if include_defaults:
        rules = list(DEFAULT_IGNORES) + rules

    return StackConfig(
        ignore_rules=tuple(rules),
        direction=direction,
        title=title or TITLE_DEFAULT,
    )
