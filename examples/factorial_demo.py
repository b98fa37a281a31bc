#!/usr/bin/env python3
"""
Factorial Demo

Builds unrolled factorial derivations, evaluates them on the stack
evaluator and prints the trace of the hand-unrolled 3! program.

Run with LAMBDA7_DEBUG=1 to see every step on stderr as well.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from lambda7.canonical import derivation_hash, render_derivation
from lambda7.compiler import FACTORIAL_OF_3, generate_factorial_derivation
from lambda7.stack_runtime import StackEvaluator


def main():
    print("=" * 70)
    print("LAMBDA7 FACTORIAL DEMO")
    print("=" * 70)
    print()

    evaluator = StackEvaluator()

    print("Hand-unrolled 3!:")
    print(f"  {render_derivation(FACTORIAL_OF_3)}")
    result = evaluator.evaluate_traced(FACTORIAL_OF_3)
    for event in result.trace:
        print(f"    {event.describe()}")
    print(f"  -> {result.value} in {result.steps} steps")
    print()

    print("Compiled factorials:")
    for n in (0, 1, 4, 5, 10):
        derivation = generate_factorial_derivation(n)
        value = evaluator.evaluate(derivation)
        print(f"  {n:>2}! = {value:<8} ({len(derivation)} steps, hash {derivation_hash(derivation)[:12]})")
    print()

    print("=" * 70)


if __name__ == "__main__":
    main()
