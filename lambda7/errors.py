"""
errors.py

Lambda7 Error Hierarchy
-----------------------

All evaluation failures are synchronous and local to the failing
``evaluate`` call. Every exception carries a stable ``ERR_*`` code so
callers can branch on the kind of failure without parsing messages.

    StackUnderflowError        ERR_STACK_UNDERFLOW
    UnknownPrimitiveError      ERR_UNKNOWN_PRIMITIVE
    InvalidDerivationStepError ERR_INVALID_STEP / ERR_RECURSION_LIMIT
    MalformedBasisIndexError   ERR_BASIS_INDEX
    EmptyResultError           ERR_EMPTY_RESULT
    PrimitiveInvocationError   ERR_PRIMITIVE_FAILED
    ConcurrentEvaluationError  ERR_CONCURRENT_EVAL

After any failure the evaluator instance that raised it must be rebuilt
before it is used again.
"""

from typing import Optional


# -------------------------------------------------------------------------
# Exceptions
# -------------------------------------------------------------------------


class Lambda7Error(Exception):
    """Base class for all lambda7 evaluation errors."""

    code = "ERR_LAMBDA7"

    def __init__(self, message: str, *, code: Optional[str] = None):
        super().__init__(message)
        if code is not None:
            self.code = code

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class StackUnderflowError(Lambda7Error):
    """Raised when Apply needs more operands than the stack holds."""

    code = "ERR_STACK_UNDERFLOW"


class UnknownPrimitiveError(Lambda7Error):
    """Raised when Apply's target is not a string naming a registered primitive."""

    code = "ERR_UNKNOWN_PRIMITIVE"


class InvalidDerivationStepError(Lambda7Error):
    """
    Raised when a step cannot be executed in its position.

    Covers Cond with fewer than three stack values, a non-morphism step
    handed to the field evaluator, objects that are not steps at all, and
    sub-derivations nested beyond the evaluator's depth limit.
    """

    code = "ERR_INVALID_STEP"


class MalformedBasisIndexError(Lambda7Error):
    """Raised when a value outside 0..6 addresses a tensor or field slot."""

    code = "ERR_BASIS_INDEX"


class EmptyResultError(Lambda7Error):
    """Raised when the stack evaluator finishes with nothing on the stack."""

    code = "ERR_EMPTY_RESULT"


class PrimitiveInvocationError(Lambda7Error):
    """Raised when a host primitive function itself fails."""

    code = "ERR_PRIMITIVE_FAILED"


class ConcurrentEvaluationError(Lambda7Error):
    """
    Raised when ``evaluate`` is entered on an instance that already has a
    call in flight. Use one evaluator instance per concurrent caller.
    """

    code = "ERR_CONCURRENT_EVAL"
