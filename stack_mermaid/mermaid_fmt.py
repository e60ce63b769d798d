# stack_mermaid/mermaid_fmt.py
from __future__ import annotations

import html
import re

# Mermaid node/subgraph IDs must be alphanumeric/underscore and must not start
# with a digit.
MERMAID_ID_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

FLOW_DIRECTIONS: tuple[str, ...] = ("LR", "RL", "TB", "TD", "BT")


class EmptyNameError(ValueError):
    """Raised when a class or method name to abbreviate is empty."""


def mermaid_block(code: str) -> str:
    """Wrap Mermaid source in a Markdown Mermaid code fence."""
    return "```mermaid\n" + code.rstrip() + "\n```\n"


def mm_text(text: str) -> str:
    """Escape text for Mermaid labels."""
    normalized = re.sub(r"\s+", " ", html.unescape(str(text))).strip()
    out = (
        normalized.replace("&", "#amp;")
        .replace("<", "#lt;")
        .replace(">", "#gt;")
        .replace('"', "#quot;")
        .replace("|", "#124;")
    )
    return out


def abbreviate(name: str) -> str:
    """Shorten a class or method name into a Mermaid node identifier.

    Keeps the first character plus every later character that is not a space
    and is unchanged by ``str.upper()``, so ``getStartingPositionForPlayer``
    becomes ``gSPFP`` and ``CoOperationLevelDefinition`` becomes ``COLD``.

    Different names can produce the same id (``addPlayerAsync`` and
    ``addPlayersAsync`` are both ``aPA``); see ``diagnostics`` for reporting.
    """
    if not name:
        raise EmptyNameError("abbreviate(): name is empty")

    out = [name[0]]
    for ch in name[1:]:
        if ch != " " and ch == ch.upper():
            out.append(ch)
    return "".join(out)


def mm_flow_direction(direction: str) -> str:
    d = str(direction).strip().upper()
    if d not in FLOW_DIRECTIONS:
        raise ValueError(f"unknown flowchart direction: {direction!r}")
    return f"flowchart {d}"


def mm_round_node(node_id: str, label: str) -> str:
    return f'    {node_id}("{mm_text(label)}")'


def mm_subgraph_open(title: str) -> str:
    return f"  subgraph {title}"


def mm_subgraph_close() -> str:
    return "  end"


def mm_chain_link(node_id: str, *, last: bool = False) -> str:
    """One line of a vertical edge chain.

    Every link but the last ends in a dangling arrow; Mermaid joins it to the
    node on the following line.
    """
    if last:
        return f"  {node_id}"
    return f"  {node_id} -->"

