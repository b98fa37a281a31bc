"""
compiler.py

Derivation compiler for bounded recursion.

The calculus has no fixpoint primitive, so a recursive definition such as

    factorial(n) = 1 if isZero(n) else multiply(n, factorial(subtract(n, 1)))

has to be unrolled to a fixed n before evaluation. The unrolled form is a
flat reverse-Polish left fold, ``((1 x 2) x 3) x ... x n``:

    1  2 "multiply" @  3 "multiply" @  ...  n "multiply" @
"""

from .basis import Morphism
from .derivation import Derivation, Literal, make_derivation


def generate_factorial_derivation(n: int) -> Derivation:
    """Compile n! into a flat stack-evaluator derivation."""
    if n < 1:
        return make_derivation([Literal(1)])

    steps = [Literal(1)]
    for i in range(2, n + 1):
        steps.append(Literal(i))
        steps.append(Literal("multiply"))
        steps.append(Morphism.APPLY)
    return make_derivation(steps)


# Hand-unrolled forms: name the primitive once, then let each bare Apply
# re-apply it to the running product and the next factor.

# multiply(3, multiply(2, multiply(1, 1)))
FACTORIAL_OF_3: Derivation = make_derivation([
    Literal(1),
    Literal(1),
    Literal("multiply"),
    Morphism.APPLY,
    Literal(2),
    Morphism.APPLY,
    Literal(3),
    Morphism.APPLY,
])

FACTORIAL_OF_4: Derivation = FACTORIAL_OF_3 + make_derivation([
    Literal(4),
    Morphism.APPLY,
])
