"""
trace.py

Shared diagnostics for both evaluators.

Every evaluator owns a Tracer. Each transition is recorded as a TraceEvent
(step index, morphism glyph, what happened and the facts behind it) so a
caller can inspect the run after ``evaluate`` returns. When debugging is on
the same events are written to stderr as they happen.

Debugging is enabled per instance (``debug=True``) or process-wide with
LAMBDA7_DEBUG=1. Text formatting is informational only; the recorded
fields are what callers should rely on.
"""

import os
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Disable debug output by leaving LAMBDA7_DEBUG unset (default)
_DEBUG_ENABLED = os.getenv("LAMBDA7_DEBUG", "0") == "1"


def debug_enabled(flag: Optional[bool] = None) -> bool:
    """An explicit per-instance flag wins over the environment."""
    if flag is not None:
        return bool(flag)
    return _DEBUG_ENABLED


@dataclass(frozen=True)
class TraceEvent:
    """
    One evaluator transition.

    kind is one of:
        literal, apply, cond, passthrough   (stack evaluator)
        collapse, accumulate                (field evaluator)
        warning                             (either)
    """
    step: int
    kind: str
    morphism: Optional[str] = None
    detail: Dict[str, Any] = field(default_factory=dict)

    def describe(self) -> str:
        head = f"Step {self.step}: {self.kind}"
        if self.morphism is not None:
            head += f" {self.morphism}"
        if not self.detail:
            return head
        facts = ", ".join(f"{k}={v!r}" for k, v in self.detail.items())
        return f"{head} ({facts})"


class Tracer:
    """Collects TraceEvents for one evaluator instance."""

    def __init__(self, source: str, debug: Optional[bool] = None):
        self.source = source
        self.debug = debug_enabled(debug)
        self.events: List[TraceEvent] = []

    def clear(self) -> None:
        self.events = []

    def record(self, step: int, kind: str, morphism: Optional[str] = None, **detail: Any) -> TraceEvent:
        event = TraceEvent(step=step, kind=kind, morphism=morphism, detail=detail)
        self.events.append(event)
        if self.debug:
            sys.stderr.write(f"[{self.source}] {event.describe()}\n")
        return event

    def note(self, message: str) -> None:
        """Free-form debug line; not recorded as an event."""
        if self.debug:
            sys.stderr.write(f"[{self.source}] {message}\n")
