"""
stack_runtime.py

Lambda7 Stack Evaluator
-----------------------

Operational interpreter for the full step language. Each (sub-)derivation
runs against its own LIFO operand stack:

    Literal(v)        push v
    @ (Apply)         pop a primitive name, pop its N operands (push
                      order), call it, push the result
    ? (Cond)          pop else, then, condition; push the chosen branch,
                      evaluating it first if it is a SubDerivation
    anything else     pushed as an opaque token

Apply continuation: when the value on top of the stack is not a string,
Apply re-applies the primitive most recently applied in the same
derivation, treating the top N values as its operands. This is what lets
``1 1 "multiply" @ 2 @ 3 @`` fold to 6. With no earlier primitive the
step fails with ERR_UNKNOWN_PRIMITIVE.

A derivation must leave exactly one value. More than one is a warning (the
bottom value is returned); none is ERR_EMPTY_RESULT.
"""

from typing import Any, List, Optional

from .basis import Morphism, morphism_name
from .derivation import Derivation, Literal, SubDerivation
from .errors import (
    EmptyResultError,
    InvalidDerivationStepError,
    PrimitiveInvocationError,
    StackUnderflowError,
    UnknownPrimitiveError,
)
from .evaluator import Evaluator
from .primitives import PrimitiveFunction, get_primitive

_APPLY = morphism_name(Morphism.APPLY)
_COND = morphism_name(Morphism.COND)


class StackEvaluator(Evaluator):
    """
    Stack-based interpreter: ``evaluate(derivation) -> value``.

    Args:
        debug: write each transition to stderr (defaults to LAMBDA7_DEBUG).
        max_depth: deepest allowed Cond sub-derivation nesting.
    """

    NAME = "StackEvaluator"

    # -------------------------------------------------------------------------
    # MAX RECURSION DEPTH (Safety)
    # -------------------------------------------------------------------------
    MAX_DEPTH = 100

    def __init__(self, *, debug: Optional[bool] = None, max_depth: Optional[int] = None):
        super().__init__(debug=debug)
        self.max_depth = self.MAX_DEPTH if max_depth is None else max_depth

    def _evaluate(self, derivation: Derivation) -> Any:
        self.tracer.note(f"Evaluating derivation ({len(derivation)} steps)...")
        result = self._run(derivation, depth=0)
        self.tracer.note(f"Evaluation finished in {self.eval_steps} steps.")
        return result

    def _run(self, derivation: Derivation, depth: int) -> Any:
        if depth > self.max_depth:
            raise InvalidDerivationStepError(
                f"Sub-derivation depth exceeded: {depth} > {self.max_depth}",
                code="ERR_RECURSION_LIMIT",
            )

        stack: List[Any] = []
        last_primitive: Optional[PrimitiveFunction] = None

        for step in derivation:
            self.eval_steps += 1

            if isinstance(step, Literal):
                stack.append(step.value)
                self.tracer.record(self.eval_steps, "literal", value=step.value, depth=depth)

            elif isinstance(step, Morphism):
                if step == Morphism.APPLY:
                    last_primitive = self._apply(stack, last_primitive, depth)
                elif step == Morphism.COND:
                    self._cond(stack, depth)
                else:
                    stack.append(step)
                    self.tracer.record(self.eval_steps, "passthrough", morphism_name(step), depth=depth)

            elif isinstance(step, SubDerivation):
                stack.append(step)
                self.tracer.record(self.eval_steps, "passthrough", depth=depth, steps=len(step.derivation))

            else:
                raise InvalidDerivationStepError(
                    f"Step {self.eval_steps} is not a Morphism, Literal or SubDerivation: {step!r}"
                )

        return self._finish(stack)

    def _apply(
        self,
        stack: List[Any],
        last_primitive: Optional[PrimitiveFunction],
        depth: int,
    ) -> PrimitiveFunction:
        if not stack:
            raise StackUnderflowError("Apply (@) on an empty stack")

        top = stack[-1]
        if isinstance(top, str):
            prim = get_primitive(top)
            if prim is None:
                raise UnknownPrimitiveError(f"No primitive named {top!r}")
            available = len(stack) - 1
            implicit = False
        elif last_primitive is not None:
            prim = last_primitive
            available = len(stack)
            implicit = True
        else:
            raise UnknownPrimitiveError(
                f"Expected a primitive function identifier on the stack for Apply, but got {top!r}"
            )

        if available < prim.arity:
            raise StackUnderflowError(
                f"Apply (@) for '{prim.name}' requires {prim.arity} arguments on the stack, "
                f"but found {available}."
            )

        if not implicit:
            stack.pop()
        split = len(stack) - prim.arity
        args = stack[split:]
        del stack[split:]

        try:
            result = prim(*args)
        except Exception as e:
            raise PrimitiveInvocationError(f"Primitive '{prim.name}' failed on {args!r}: {e}") from e

        stack.append(result)
        self.tracer.record(
            self.eval_steps, "apply", _APPLY,
            primitive=prim.name, args=args, result=result, implicit=implicit, depth=depth,
        )
        return prim

    def _cond(self, stack: List[Any], depth: int) -> None:
        if len(stack) < 3:
            raise InvalidDerivationStepError(
                f"Cond (?) requires 3 arguments on the stack, but found {len(stack)}."
            )

        else_branch = stack.pop()
        then_branch = stack.pop()
        condition = stack.pop()
        chosen = then_branch if condition else else_branch

        if isinstance(chosen, SubDerivation):
            value = self._run(chosen.derivation, depth + 1)
        else:
            value = chosen

        stack.append(value)
        self.tracer.record(
            self.eval_steps, "cond", _COND,
            condition=bool(condition),
            branch="then" if condition else "else",
            nested=isinstance(chosen, SubDerivation),
            result=value,
            depth=depth,
        )

    def _finish(self, stack: List[Any]) -> Any:
        if not stack:
            raise EmptyResultError("Stack is empty after evaluation; no result")
        if len(stack) != 1:
            self._warn(f"Stack did not end with a single value. Final stack: {stack!r}")
        return stack[0]
