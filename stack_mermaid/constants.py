# stack_mermaid/constants.py
from __future__ import annotations

# Marker present on every compiler-generated async state-machine frame.
ASYNC_FRAME_MARKER = "MoveNext"

DIRECTION_DEFAULT = "LR"
TITLE_DEFAULT = "Call flow"

# (pattern, intent) pairs. Patterns are `re.search`ed against the raw line,
# so `^` anchors apply before any indentation.
DEFAULT_IGNORE_RULES: tuple[tuple[str, str], ...] = (
    (r"location", "throw-location markers"),
    (r"ExceptionServices", "exception dispatch plumbing"),
    (r"CompilerServices", "compiler-generated helpers"),
    (r"NUnit\.Framework\.Internal", "test runner internals"),
    (r"^ExecutionContext.", "execution context"),
    (r"^AsyncMethodBuilderCore.", "async method builder"),
    (r"^AwaitTaskContinuation.", "task continuation"),
    (r"^Task.", "task internals"),
    (r"^AsyncTaskMethodBuilder<", "async method builder"),
    (r"^AsyncTaskMethodBuilder.SetResult", "async method builder"),
    (r"^TimerQueue", "timer internals"),
    (r"^\[", "bracketed frames"),
    (r"^System\.Threading\.[^ ]*\(FinishStageThree", "threading internals"),
    (r"FinishContinuations", "task continuation"),
    (r"SynchronizationContextAwaitTaskContinuation", "synchronization context"),
    (r"AwaitTaskContinuation", "task continuation"),
    (r"ExecutionContext\)", "execution context"),
    (r"UnitySynchronizationContext", "synchronization context"),
)
