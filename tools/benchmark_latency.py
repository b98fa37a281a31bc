#!/usr/bin/env python3
"""
Lambda7 Latency Benchmark

Measures evaluator time ONLY.

INCLUDED:
  - Step dispatch and primitive calls (stack evaluator)
  - Tensor lookups and field updates (field evaluator)
  - Trace event recording

EXCLUDED:
  - Derivation construction
  - Tensor construction (tables are built once before timing)
  - Debug output (LAMBDA7_DEBUG must be unset)
"""

import time
import statistics
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from lambda7.basis import Morphism
from lambda7.compiler import generate_factorial_derivation
from lambda7.derivation import Literal, SubDerivation
from lambda7.field_runtime import FieldEvaluator
from lambda7.stack_runtime import StackEvaluator
from lambda7.tensor import get_tensor_3d


def benchmark(make_evaluator, derivation, iterations: int = 1000) -> dict:
    """Benchmark one evaluator factory / derivation pair."""
    times_us = []

    for _ in range(iterations):
        evaluator = make_evaluator()
        start = time.perf_counter_ns()
        evaluator.evaluate(derivation)
        end = time.perf_counter_ns()
        times_us.append((end - start) / 1000)  # ns → µs

    ordered = sorted(times_us)
    return {
        "iterations": iterations,
        "mean_us": statistics.mean(times_us),
        "median_us": statistics.median(times_us),
        "p95_us": ordered[int(iterations * 0.95)],
        "p99_us": ordered[int(iterations * 0.99)],
        "max_us": ordered[-1],
    }


def main():
    print("=" * 70)
    print("LAMBDA7 LATENCY BENCHMARK")
    print("=" * 70)
    print()

    # Warm the shared tables so construction is not timed
    get_tensor_3d()

    cond_branch = SubDerivation(list(generate_factorial_derivation(5)))
    cases = [
        ("Stack: 4! (compiled)", StackEvaluator, generate_factorial_derivation(4)),
        ("Stack: 20! (compiled)", StackEvaluator, generate_factorial_derivation(20)),
        ("Stack: Cond -> 5! branch", StackEvaluator,
         (Literal(0), Literal("isZero"), Morphism.APPLY, cond_branch, Literal(1), Morphism.COND)),
        ("Field: beta reduction (λ I @)", FieldEvaluator,
         (Morphism.LAMBDA, Morphism.IDENTITY, Morphism.APPLY)),
        ("Field: 64 mixed morphisms", FieldEvaluator, tuple(Morphism(i % 7) for i in range(64))),
    ]

    iterations = 1000
    print(f"Iterations per case: {iterations}")
    print()

    for name, factory, derivation in cases:
        stats = benchmark(factory, derivation, iterations)
        print(f"  {name} ({len(derivation)} steps)")
        print(f"  Mean:   {stats['mean_us']:>7.1f} µs")
        print(f"  Median: {stats['median_us']:>7.1f} µs")
        print(f"  P95:    {stats['p95_us']:>7.1f} µs")
        print(f"  P99:    {stats['p99_us']:>7.1f} µs")
        print(f"  Max:    {stats['max_us']:>7.1f} µs")
        print()

    print("Note: evaluation time is linear in derivation length.")


if __name__ == "__main__":
    main()
