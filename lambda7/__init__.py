"""
Lambda7 - a 7-morphism symbolic computation engine.

Public API:
- Morphism, MORPHISM_NAMES: the fixed basis
- Literal, SubDerivation, make_derivation: the step language
- StackEvaluator: stack interpreter (primitives + conditional branching)
- FieldEvaluator: tensor-driven field state machine
- get_tensor_2d / get_tensor_3d: shared interaction tables
- generate_factorial_derivation: bounded-recursion unroller
- ReflexLoop: observe/evaluate/act/learn driver for the field evaluator
"""

from .basis import BASIS_SIZE, MORPHISM_NAMES, Morphism, morphism_name
from .compiler import FACTORIAL_OF_3, FACTORIAL_OF_4, generate_factorial_derivation
from .derivation import Derivation, Literal, Step, SubDerivation, make_derivation
from .errors import (
    ConcurrentEvaluationError,
    EmptyResultError,
    InvalidDerivationStepError,
    Lambda7Error,
    MalformedBasisIndexError,
    PrimitiveInvocationError,
    StackUnderflowError,
    UnknownPrimitiveError,
)
from .evaluator import EvaluationResult
from .field_runtime import FieldEvaluator, dominant_morphism, one_hot
from .primitives import PRIMITIVE_FNS, PrimitiveFunction
from .reflex import Observation, ReflexLoop
from .stack_runtime import StackEvaluator
from .tensor import NO_RULE, Tensor2D, Tensor3D, get_tensor_2d, get_tensor_3d

# Derive version from package metadata
try:
    from importlib.metadata import version
    __version__ = version("lambda7-runtime")
except Exception:
    __version__ = "0.1.0"

__all__ = [
    "BASIS_SIZE",
    "MORPHISM_NAMES",
    "Morphism",
    "morphism_name",
    "Derivation",
    "Literal",
    "Step",
    "SubDerivation",
    "make_derivation",
    "StackEvaluator",
    "FieldEvaluator",
    "EvaluationResult",
    "one_hot",
    "dominant_morphism",
    "NO_RULE",
    "Tensor2D",
    "Tensor3D",
    "get_tensor_2d",
    "get_tensor_3d",
    "PRIMITIVE_FNS",
    "PrimitiveFunction",
    "generate_factorial_derivation",
    "FACTORIAL_OF_3",
    "FACTORIAL_OF_4",
    "Observation",
    "ReflexLoop",
    "Lambda7Error",
    "StackUnderflowError",
    "UnknownPrimitiveError",
    "InvalidDerivationStepError",
    "MalformedBasisIndexError",
    "EmptyResultError",
    "PrimitiveInvocationError",
    "ConcurrentEvaluationError",
]
