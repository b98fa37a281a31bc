"""
field_runtime.py

Lambda7 Field Evaluator
-----------------------

State-machine interpreter over bare morphisms. The instance owns:

    field    7 floats, one slot per morphism ordinal (initially one-hot I)
    history  the last two applied morphisms (initially [I, I])

For each incoming morphism m:

    result = T_3D[history[0]][history[1]][m]
    rule found -> field collapses to one_hot(result)
    NO_RULE    -> field[m] += 1   (unreduced input accumulates as weight)
    history    <- [history[1], m]

The field is never renormalised; it is not a probability distribution.
Field and history persist across successive ``evaluate`` calls on the same
instance (use ``reset`` to return to the initial state).
"""

from typing import Any, List, Mapping, Optional, Sequence, Union

from .basis import BASIS_SIZE, Morphism, morphism_name, to_index, to_morphism
from .derivation import Derivation
from .errors import InvalidDerivationStepError
from .evaluator import Evaluator
from .tensor import NO_RULE, Tensor3D, get_tensor_3d

Field = List[float]
FieldSeed = Union[Sequence[float], Mapping[Any, float]]


def one_hot(m: Any) -> Field:
    """Field with weight 1 at ``m`` and 0 elsewhere."""
    field = [0.0] * BASIS_SIZE
    field[to_index(m)] = 1.0
    return field


def dominant_morphism(field: Sequence[float]) -> Morphism:
    """Lowest-ordinal morphism achieving the maximum weight."""
    if len(field) != BASIS_SIZE:
        raise ValueError(f"Field must have {BASIS_SIZE} entries, got {len(field)}")
    best = max(field)
    for i, weight in enumerate(field):
        if weight == best:
            return Morphism(i)
    raise ValueError("Field has no comparable maximum (NaN weights?)")


def _seed_field(seed: Optional[FieldSeed]) -> Field:
    if seed is None:
        return one_hot(Morphism.IDENTITY)
    if isinstance(seed, Mapping):
        field = [0.0] * BASIS_SIZE
        for key, weight in seed.items():
            field[to_index(key)] = float(weight)
        return field
    field = [float(w) for w in seed]
    if len(field) != BASIS_SIZE:
        raise ValueError(f"Field must have {BASIS_SIZE} entries, got {len(field)}")
    return field


def _seed_history(seed: Optional[Sequence[Any]]) -> List[Morphism]:
    if seed is None:
        return [Morphism.IDENTITY, Morphism.IDENTITY]
    history = [to_morphism(m) for m in seed]
    if len(history) != 2:
        raise ValueError(f"History must hold exactly 2 morphisms, got {len(history)}")
    return history


def _format_field(field: Sequence[float]) -> str:
    return "[" + ", ".join(f"{w:g}" for w in field) + "]"


class FieldEvaluator(Evaluator):
    """
    Tensor-driven evaluator: ``evaluate(derivation) -> field``.

    Args:
        field: optional seed, either 7 weights or {morphism: weight}.
        history: optional seed of two morphisms [previous-previous, previous].
        tensor: 3D interaction table (defaults to the shared T_3D).
        debug: write each transition to stderr (defaults to LAMBDA7_DEBUG).
    """

    NAME = "FieldEvaluator"

    def __init__(
        self,
        *,
        field: Optional[FieldSeed] = None,
        history: Optional[Sequence[Any]] = None,
        tensor: Optional[Tensor3D] = None,
        debug: Optional[bool] = None,
    ):
        super().__init__(debug=debug)
        if tensor is not None and not isinstance(tensor, Tensor3D):
            raise TypeError(f"tensor must be a Tensor3D, got {type(tensor).__name__}")
        self.tensor = tensor if tensor is not None else get_tensor_3d()
        self.field: Field = _seed_field(field)
        self.history: List[Morphism] = _seed_history(history)

    @property
    def dominant(self) -> Morphism:
        return dominant_morphism(self.field)

    def reset(self) -> None:
        self.field = one_hot(Morphism.IDENTITY)
        self.history = [Morphism.IDENTITY, Morphism.IDENTITY]

    def _evaluate(self, derivation: Derivation) -> Field:
        # Reject the whole derivation before touching field or history
        morphisms = [self._coerce(i, step) for i, step in enumerate(derivation, start=1)]

        self.tracer.note(f"Evaluating derivation ({len(morphisms)} steps)...")
        self.tracer.note(f"Initial Field: {_format_field(self.field)}")
        self.tracer.note(
            "Initial History: [" + ", ".join(morphism_name(m) for m in self.history) + "]"
        )

        for m in morphisms:
            self.eval_steps += 1
            self._apply_tensor(m)

        self.tracer.note(f"Evaluation finished in {self.eval_steps} steps.")
        return list(self.field)

    @staticmethod
    def _coerce(index: int, step: Any) -> Morphism:
        if isinstance(step, Morphism):
            return step
        # Plain ordinals are accepted; Literal/SubDerivation belong to the stack language
        if isinstance(step, int) and not isinstance(step, bool):
            return to_morphism(step)
        raise InvalidDerivationStepError(
            f"Invalid item in derivation at step {index}: {step!r}. Expected a Morphism."
        )

    def _apply_tensor(self, incoming: Morphism) -> None:
        first, second = self.history
        cell = tuple(morphism_name(m) for m in (first, second, incoming))
        result = self.tensor.lookup(first, second, incoming)

        if result is NO_RULE:
            self.field[incoming] += 1.0
            self.tracer.record(
                self.eval_steps, "accumulate", morphism_name(incoming),
                cell=cell, field=list(self.field),
            )
        else:
            self.field = one_hot(result)
            self.tracer.record(
                self.eval_steps, "collapse", morphism_name(incoming),
                cell=cell, result=morphism_name(result), field=list(self.field),
            )

        self.history = [second, incoming]
