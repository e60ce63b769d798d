# stack_mermaid/cli.py
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .catalog import StackKnowledge
from .config import StackConfig
from .diagnostics import collect_issues, split_issues
from .io import load_config, read_stack_text
from .mermaid_fmt import FLOW_DIRECTIONS
from .render import gen_flowchart_code
from .writer import write_md


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stack-mermaid",
        description="Turn a managed-runtime stack trace into a Mermaid call-flow diagram.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        default=None,
        help="File containing the stack trace (default: stdin, also `-`).",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Write a Markdown page here instead of printing the diagram to stdout.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with `direction`, `title` and extra `ignore` patterns.",
    )
    parser.add_argument(
        "--title",
        type=str,
        default=None,
        help="Markdown page title used with --out (overrides the config file).",
    )
    parser.add_argument(
        "--direction",
        type=str.upper,
        choices=FLOW_DIRECTIONS,
        default=None,
        help="Flowchart direction (overrides the config file; default LR).",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on warnings (unmatched lines, node id collisions). Errors always fail.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every unmatched line to stderr.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    """CLI entrypoint."""
    args = _build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        cfg = load_config(args.config)
    except (OSError, TypeError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        raise SystemExit(2)

    if args.direction or args.title:
        cfg = StackConfig(
            ignore_rules=cfg.ignore_rules,
            direction=args.direction or cfg.direction,
            title=args.title or cfg.title,
        )

    try:
        text = read_stack_text(args.input)
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        raise SystemExit(2)

    knowledge = StackKnowledge(cfg)
    knowledge.process_stack(text)

    errors, warnings = split_issues(collect_issues(knowledge))
    for warning in warnings:
        print(f"warning: {warning}", file=sys.stderr)

    if errors or (args.strict and warnings):
        for error in errors:
            print(f"error: {error}", file=sys.stderr)
        raise SystemExit(2)

    if args.out is None:
        print(knowledge.render())
        return

    source = None if args.input is None or str(args.input) == "-" else args.input.name
    write_md(args.out, cfg.title, gen_flowchart_code(knowledge, cfg.direction), source=source)


if __name__ == "__main__":
    main()
