"""Mermaid call-flow diagrams from managed-runtime stack traces."""
from __future__ import annotations

from .catalog import CallEntry, ClassDefinition, MethodDefinition, StackKnowledge
from .config import StackConfig
from .frames import IgnoreFilter, IgnoreRule, extract_class_and_method
from .mermaid_fmt import EmptyNameError, abbreviate

__all__ = [
    "CallEntry",
    "ClassDefinition",
    "EmptyNameError",
    "IgnoreFilter",
    "IgnoreRule",
    "MethodDefinition",
    "StackConfig",
    "StackKnowledge",
    "abbreviate",
    "extract_class_and_method",
]
