"""
derivation.py

Step language shared by the evaluators.

A Derivation is an immutable tuple of Steps. A Step is one of:

    Morphism        bare basis morphism (e.g. Morphism.APPLY)
    Literal         pushes an arbitrary host value
    SubDerivation   a nested Derivation, executed only as a Cond branch

The stack evaluator accepts all three variants. The field evaluator accepts
bare morphisms only; the two input languages are not interchangeable.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Tuple, Union

from .basis import Morphism


@dataclass(frozen=True)
class Literal:
    value: Any


@dataclass(frozen=True)
class SubDerivation:
    derivation: Tuple["Step", ...]

    def __post_init__(self):
        # Freeze caller-supplied lists
        object.__setattr__(self, "derivation", make_derivation(self.derivation))


Step = Union[Morphism, Literal, SubDerivation]
Derivation = Tuple[Step, ...]


def make_derivation(steps: Iterable[Any]) -> Derivation:
    """
    Freeze an iterable of steps into a Derivation.

    Steps are not validated here; each evaluator rejects what its own
    language does not allow, at evaluation time.
    """
    return tuple(steps)
