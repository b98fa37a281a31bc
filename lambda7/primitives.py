"""
primitives.py

Primitive functions recognised by the stack evaluator.

These are the "CPU instructions" of the machine: Apply pops a primitive's
name and exactly ``arity`` operands. Arity is derived once, at
registration, from the callable's declared positional parameters and is
authoritative for how many stack values Apply consumes.

The registry is a fixed, read-only table; it is built at import time and
never changes afterwards.
"""

import inspect
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional


@dataclass(frozen=True)
class PrimitiveFunction:
    """A named host callable with a fixed arity."""
    name: str
    fn: Callable[..., Any]
    arity: int

    def __call__(self, *args: Any) -> Any:
        if len(args) != self.arity:
            raise TypeError(
                f"Primitive '{self.name}' takes {self.arity} argument(s), got {len(args)}"
            )
        return self.fn(*args)


def _declared_arity(fn: Callable[..., Any]) -> int:
    """Count required positional parameters (defaulted ones are not counted)."""
    count = 0
    for param in inspect.signature(fn).parameters.values():
        if param.kind not in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            break
        if param.default is not param.empty:
            break
        count += 1
    return count


def _register(name: str, fn: Callable[..., Any]) -> PrimitiveFunction:
    return PrimitiveFunction(name=name, fn=fn, arity=_declared_arity(fn))


# -------------------------------------------------------------------------
# Host functions
# -------------------------------------------------------------------------

def is_zero(n):
    return n == 0


def subtract(a, b):
    return a - b


def multiply(a, b):
    return a * b


PRIMITIVE_FNS: Mapping[str, PrimitiveFunction] = MappingProxyType({
    "isZero": _register("isZero", is_zero),
    "subtract": _register("subtract", subtract),
    "multiply": _register("multiply", multiply),
})


def is_primitive(name: Any) -> bool:
    """True if ``name`` is a string naming a registered primitive."""
    return isinstance(name, str) and name in PRIMITIVE_FNS


def get_primitive(name: Any) -> Optional[PrimitiveFunction]:
    """Look up a primitive by name; None for unknown names or non-strings."""
    if not isinstance(name, str):
        return None
    return PRIMITIVE_FNS.get(name)
