# stack_mermaid/catalog.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from .config import StackConfig
from .frames import IgnoreFilter, extract_class_and_method
from .mermaid_fmt import abbreviate
from .render import gen_call_flowchart

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MethodDefinition:
    name: str

    def mermaid_id(self) -> str:
        return abbreviate(self.name)


@dataclass
class ClassDefinition:
    """A type seen in the trace and the methods observed on it, in first-seen order."""

    name: str
    methods: list[MethodDefinition] = field(default_factory=list)

    def mermaid_id(self) -> str:
        return abbreviate(self.name)

    def find_method(self, name: str) -> Optional[MethodDefinition]:
        for method in self.methods:
            if method.name == name:
                return method
        return None

    def ensure_method(self, name: str) -> MethodDefinition:
        method = self.find_method(name)
        if method is None:
            method = MethodDefinition(name)
            self.methods.append(method)
        return method


@dataclass(frozen=True)
class CallEntry:
    """One parsed frame. Holds catalog keys, not the definitions themselves."""

    class_name: str
    method_name: str


@dataclass(frozen=True)
class UnmatchedLine:
    line_no: int  # 1-based within the text passed to process_stack()
    text: str


class StackKnowledge:
    """Accumulates classes, methods and the call chain from stack trace text.

    Repeated `process_stack()` calls add to the same catalog; nothing is
    reset between calls. Not thread-safe.
    """

    def __init__(self, config: Optional[StackConfig] = None):
        self.config = config or StackConfig()
        self._ignore = IgnoreFilter(self.config.ignore_rules)

        self._classes: dict[str, ClassDefinition] = {}
        self.stack_entries: list[CallEntry] = []

        self.ignored_count = 0
        self.unmatched: list[UnmatchedLine] = []

    @property
    def classes(self) -> list[ClassDefinition]:
        return list(self._classes.values())

    def get_class(self, name: str) -> Optional[ClassDefinition]:
        return self._classes.get(name)

    def resolve(self, entry: CallEntry) -> tuple[ClassDefinition, MethodDefinition]:
        cls = self._classes[entry.class_name]
        method = cls.find_method(entry.method_name)
        if method is None:
            raise KeyError(f"{entry.class_name}.{entry.method_name} is not in the catalog")
        return cls, method

    def node_id(self, entry: CallEntry) -> str:
        cls, method = self.resolve(entry)
        return f"{cls.mermaid_id()}.{method.mermaid_id()}"

    def process_stack(self, stack_text: str) -> None:
        """Parse every frame line in `stack_text` into the catalog.

        Noise frames (see `IgnoreFilter`) are counted and skipped. Lines that
        are neither noise nor frames are logged at DEBUG and kept in
        `unmatched`; they never raise.
        """
        for line_no, line in enumerate(stack_text.splitlines(), start=1):
            if not line.strip():
                log.debug("skipping blank line %d", line_no)
                continue

            if self._ignore.matches(line):
                self.ignored_count += 1
                continue

            result = extract_class_and_method(line)
            if result is None:
                log.debug("no stack frame matched on line %d: %s", line_no, line)
                self.unmatched.append(UnmatchedLine(line_no, line))
                continue

            class_name, method_name = result
            self.add_stack_entry(class_name, method_name)

    def add_stack_entry(self, class_name: str, method_name: str) -> CallEntry:
        cls = self._classes.get(class_name)
        if cls is None:
            cls = ClassDefinition(class_name)
            self._classes[class_name] = cls
        cls.ensure_method(method_name)

        entry = CallEntry(class_name, method_name)
        self.stack_entries.append(entry)
        return entry

    def render(self) -> str:
        """Render the catalog as a fenced Mermaid flowchart."""
        return gen_call_flowchart(self, direction=self.config.direction)
