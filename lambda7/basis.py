"""
Lambda7 Morphism Basis (Single Source of Truth)

Defines the 7 fundamental morphisms of the calculus. Every tensor, field
and history slot is addressed by a morphism's ordinal, so the tensor
builder, both evaluators and the diagnostics MUST import from this module.
"""

from enum import IntEnum
from typing import Any

from .errors import MalformedBasisIndexError


class Morphism(IntEnum):
    IDENTITY = 0  # I - neutral element, data or no-op
    APPLY = 1     # @ - application of a function to arguments
    LAMBDA = 2    # λ - abstraction
    AND = 3       # ∧ - conjunction
    NOT = 4       # ¬ - negation
    COND = 5      # ? - ternary conditional
    PAIR = 6      # ⊗ - pairing / tuple construction


BASIS_SIZE = len(Morphism)

# For debugging and visualization
MORPHISM_NAMES = {
    Morphism.IDENTITY: "I",
    Morphism.APPLY: "@",
    Morphism.LAMBDA: "λ",
    Morphism.AND: "∧",
    Morphism.NOT: "¬",
    Morphism.COND: "?",
    Morphism.PAIR: "⊗",
}

# Ordinal-ordered glyphs, used for table headers
GLYPHS = tuple(MORPHISM_NAMES[m] for m in Morphism)


def to_index(value: Any) -> int:
    """
    Validate a basis address and return it as a plain ordinal.

    Accepts a Morphism or a plain int in 0..6. Bools are rejected even
    though they are ints: ``True`` is never a morphism.

    Raises:
        MalformedBasisIndexError: for anything else.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedBasisIndexError(f"Not a basis index: {value!r}")
    if value < 0 or value >= BASIS_SIZE:
        raise MalformedBasisIndexError(
            f"Basis index {value} outside 0..{BASIS_SIZE - 1}"
        )
    return int(value)


def to_morphism(value: Any) -> Morphism:
    """Validate a basis address and return the Morphism it names."""
    return Morphism(to_index(value))


def morphism_name(value: Any) -> str:
    """Diagnostic glyph for a morphism (or a valid ordinal)."""
    return MORPHISM_NAMES[to_morphism(value)]
