# stack_mermaid/render.py
from __future__ import annotations

from typing import TYPE_CHECKING

from .constants import DIRECTION_DEFAULT
from .mermaid_fmt import (
    mermaid_block,
    mm_chain_link,
    mm_flow_direction,
    mm_round_node,
    mm_subgraph_close,
    mm_subgraph_open,
)

if TYPE_CHECKING:
    from .catalog import StackKnowledge


def gen_flowchart_code(knowledge: StackKnowledge, direction: str = DIRECTION_DEFAULT) -> str:
    """Generate the (unfenced) flowchart for a catalog.

    One subgraph per class holds its methods; the call chain follows, newest
    entry first, because traces list the innermost frame first and the
    diagram reads caller -> callee.
    """
    lines: list[str] = [mm_flow_direction(direction)]

    for cls in knowledge.classes:
        class_id = cls.mermaid_id()
        lines.append(mm_subgraph_open(cls.name))
        for method in cls.methods:
            lines.append(mm_round_node(f"{class_id}.{method.mermaid_id()}", f"{method.name}()"))
        lines.append(mm_subgraph_close())

    entries = knowledge.stack_entries
    for i in range(len(entries) - 1, -1, -1):
        lines.append(mm_chain_link(knowledge.node_id(entries[i]), last=(i == 0)))

    return "\n".join(lines)


def gen_call_flowchart(knowledge: StackKnowledge, direction: str = DIRECTION_DEFAULT) -> str:
    """Generate the flowchart wrapped in a ```mermaid fence, without a trailing newline."""
    return mermaid_block(gen_flowchart_code(knowledge, direction)).rstrip("\n")
