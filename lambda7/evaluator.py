"""
evaluator.py

Common evaluate(Derivation) capability shared by the two strategies:

    StackEvaluator  (stack_runtime.py) -> single opaque value
    FieldEvaluator  (field_runtime.py) -> 7-length field vector

The strategies share only this shell: the per-call step counter, warning
list, tracer and the single-call-in-flight guard. Their state and
operational rules are kept apart.
"""

import threading
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from .derivation import Derivation, make_derivation
from .errors import ConcurrentEvaluationError
from .trace import TraceEvent, Tracer, debug_enabled


@dataclass
class EvaluationResult:
    """
    Result of ``evaluate_traced``.

    value: what ``evaluate`` returned (stack value or field copy)
    steps: steps executed, nested sub-derivation steps included
    warnings: non-fatal diagnostics (e.g. non-singleton terminal stack)
    trace: recorded transitions, in order
    """
    value: Any
    steps: int
    warnings: List[str] = field(default_factory=list)
    trace: List[TraceEvent] = field(default_factory=list)


class Evaluator:
    """
    Base shell for an evaluation strategy.

    One call in flight per instance: a second concurrent (or re-entrant)
    ``evaluate`` raises ConcurrentEvaluationError instead of corrupting the
    instance's state. Give each concurrent caller its own instance.
    """

    NAME = "Evaluator"

    def __init__(self, *, debug: Optional[bool] = None):
        self.debug = debug_enabled(debug)
        self.eval_steps = 0
        self.warnings: List[str] = []
        self.tracer = Tracer(self.NAME, self.debug)
        self._in_flight = threading.Lock()

    def evaluate(self, derivation: Iterable[Any]) -> Any:
        if not self._in_flight.acquire(blocking=False):
            raise ConcurrentEvaluationError(
                f"{self.NAME} already has an evaluation in flight"
            )
        try:
            self.eval_steps = 0
            self.warnings = []
            self.tracer.clear()
            return self._evaluate(make_derivation(derivation))
        finally:
            self._in_flight.release()

    def evaluate_traced(self, derivation: Iterable[Any]) -> EvaluationResult:
        value = self.evaluate(derivation)
        return EvaluationResult(
            value=value,
            steps=self.eval_steps,
            warnings=list(self.warnings),
            trace=list(self.tracer.events),
        )

    @property
    def trace(self) -> List[TraceEvent]:
        return self.tracer.events

    def _evaluate(self, derivation: Derivation) -> Any:
        raise NotImplementedError

    def _warn(self, message: str) -> None:
        self.warnings.append(message)
        self.tracer.record(self.eval_steps, "warning", message=message)
