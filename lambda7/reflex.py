"""
reflex.py

Lambda7 Reflex Loop
-------------------

Drives the field evaluator from observed events:

    observe   -> Observation (kind, derivation, data)
    evaluate  -> decide whether the observation carries work
    act       -> run the derivation through the loop's FieldEvaluator
    learn     -> record the outcome into the agent's state

Glyph/config loading and pain-signal persistence are external; they plug
in as the ``observer`` and ``on_event`` callables. The agent state is a
plain dict the caller owns.
"""

import random
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from .basis import MORPHISM_NAMES, Morphism
from .canonical import derivation_hash, render_derivation
from .derivation import Derivation, make_derivation
from .errors import Lambda7Error
from .field_runtime import Field, FieldEvaluator, dominant_morphism
from .trace import Tracer

ACTION_PROCESS = "process_derivation"
ACTION_IDLE = "idle"

# Demo derivations: a pain event resolves towards a conditional record,
# an idle tick is pure Identity.
PAIN_DERIVATION: Derivation = make_derivation([Morphism.APPLY, Morphism.NOT, Morphism.COND])
IDLE_DERIVATION: Derivation = make_derivation([Morphism.IDENTITY])


@dataclass(frozen=True)
class Observation:
    kind: str
    derivation: Derivation = ()
    data: Optional[Dict[str, Any]] = None


@dataclass
class ReflexOutcome:
    """What one iteration saw, decided and produced."""
    observation: Observation
    action: str
    field: Optional[Field] = None
    dominant: Optional[Morphism] = None


Observer = Callable[[], Observation]
EventHandler = Callable[[Observation, Field], Any]


def default_observer(rng: Optional[random.Random] = None) -> Observer:
    """
    Demo observer: a simulated error half of the time, otherwise idle.
    Pass a seeded ``random.Random`` for reproducible runs.
    """
    rng = rng or random.Random()

    def observe() -> Observation:
        if rng.random() < 0.5:
            return Observation(
                kind="potential_pain",
                derivation=PAIN_DERIVATION,
                data={"id": "simulated-error", "description": "A random simulated error occurred."},
            )
        return Observation(kind="no_event", derivation=IDLE_DERIVATION)

    return observe


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReflexLoop:
    """
    One agent's observe/evaluate/act/learn cycle.

    The loop owns one FieldEvaluator, so field and history carry over from
    one iteration to the next. If an evaluation fails the evaluator is
    rebuilt (its state is no longer reliable) and the error propagates.
    """

    def __init__(
        self,
        agent_id: str,
        observer: Optional[Observer] = None,
        *,
        agent_state: Optional[Dict[str, Any]] = None,
        on_event: Optional[EventHandler] = None,
        clock: Callable[[], datetime] = _utcnow,
        debug: Optional[bool] = None,
    ):
        self.agent_id = agent_id
        self.observer = observer or default_observer()
        self.agent_state = agent_state if agent_state is not None else {}
        self.on_event = on_event
        self.clock = clock
        self.debug = debug
        self.processor = FieldEvaluator(debug=debug)
        self.tracer = Tracer("ReflexLoop", debug)
        self.iterations = 0

    def observe(self) -> Observation:
        self.tracer.note("Observing...")
        return self.observer()

    def evaluate(self, observation: Observation) -> str:
        self.tracer.note("Evaluating...")
        if observation.derivation:
            return ACTION_PROCESS
        return ACTION_IDLE

    def act(self, observation: Observation, action: str) -> Optional[Field]:
        self.tracer.note("Acting...")
        if action != ACTION_PROCESS:
            return None

        self.tracer.note(f"Processing Derivation: {render_derivation(observation.derivation)}")
        try:
            field = self.processor.evaluate(observation.derivation)
        except Lambda7Error:
            self.processor = FieldEvaluator(debug=self.debug)
            raise

        if self.on_event is not None and observation.data is not None:
            self.on_event(observation, field)
        return field

    def learn(self, observation: Observation, field: Optional[Field]) -> Optional[Morphism]:
        self.tracer.note("Learning...")
        # Everything is computed before the agent state is touched
        updates: Dict[str, Any] = {"last_reflex_time": self.clock().isoformat()}
        dominant = None
        if field is not None:
            dominant = dominant_morphism(field)
            updates["last_dominant_morphism"] = MORPHISM_NAMES[dominant]
            updates["tensor_field_state"] = list(field)
            updates["derivation_hash"] = derivation_hash(observation.derivation)

        self.agent_state.update(updates)
        if dominant is not None:
            self.tracer.note(f"Agent {self.agent_id} state updated: {self.agent_state}")
        return dominant

    def run_one_iteration(self) -> ReflexOutcome:
        observation = self.observe()
        action = self.evaluate(observation)
        field = self.act(observation, action)
        dominant = self.learn(observation, field)
        self.iterations += 1
        self.tracer.note("Iteration complete.")
        return ReflexOutcome(observation=observation, action=action, field=field, dominant=dominant)
