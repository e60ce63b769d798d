# stack_mermaid/writer.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from .mermaid_fmt import mermaid_block


def format_md(title: str, diagram_code: str, source: Optional[str] = None) -> str:
    """Titled Markdown page with the call flow as a Mermaid block."""
    note = f"Generated from `{source}`.\n\n" if source else ""
    return f"# {title}\n\n{note}{mermaid_block(diagram_code)}"


def write_md(path: Path, title: str, diagram_code: str, source: Optional[str] = None) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_md(title, diagram_code, source), encoding="utf-8")
