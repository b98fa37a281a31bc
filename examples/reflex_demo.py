#!/usr/bin/env python3
"""
Reflex Loop Demo

Runs a handful of observe/evaluate/act/learn iterations with the demo
observer. The seed keeps the run reproducible.

Usage:
    python examples/reflex_demo.py [iterations] [seed]
"""

import random
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from lambda7.basis import MORPHISM_NAMES
from lambda7.reflex import ReflexLoop, default_observer


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    iterations = int(argv[0]) if argv else 5
    seed = int(argv[1]) if len(argv) > 1 else 7

    print("=" * 70)
    print("LAMBDA7 REFLEX LOOP DEMO")
    print("=" * 70)
    print()

    events = []
    loop = ReflexLoop(
        "agent://demo",
        default_observer(random.Random(seed)),
        on_event=lambda obs, field: events.append(obs.data["id"]),
    )

    for i in range(iterations):
        outcome = loop.run_one_iteration()
        dominant = MORPHISM_NAMES[outcome.dominant] if outcome.dominant is not None else "-"
        print(f"  [{i + 1}] {outcome.observation.kind:<15} {outcome.action:<20} dominant={dominant}")
        if outcome.field is not None:
            print(f"      field={outcome.field}")

    print()
    print(f"Events recorded: {len(events)}")
    print(f"Final agent state: {loop.agent_state}")
    print("=" * 70)


if __name__ == "__main__":
    main()
