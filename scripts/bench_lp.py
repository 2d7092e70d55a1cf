#!/usr/bin/env python3
import json
import time
from pathlib import Path

from exactlp.errors import LPError
from exactlp.model import format_rational
from exactlp.schemas import ProblemSpec, SolveOptions
from exactlp.solver import solve
from scripts.generate_instances import generate_random_lp


def load_example(name: str) -> ProblemSpec:
    path = Path(__file__).resolve().parent.parent / "examples" / name
    return ProblemSpec.model_validate(json.loads(path.read_text()))


def main() -> None:
    opts = SolveOptions()
    cases = [
        ("examples/small_lp.json", load_example("small_lp.json")),
        ("examples/coin_change.json", load_example("coin_change.json")),
    ]
    for seed in range(3):
        cases.append((f"random-{seed}", generate_random_lp(3, 3, seed)))
        cases.append((f"random-int-{seed}", generate_random_lp(3, 3, seed, integral=True)))

    print("name,status,objective,iterations,nodes,time_ms")
    for name, spec in cases:
        start = time.perf_counter()
        try:
            solved = solve(spec.to_model(), opts)
            row = f"{solved.status},{format_rational(solved.objective_value)},{solved.iterations},{solved.nodes}"
        except LPError as exc:
            row = f"{type(exc).__name__},,,"
        elapsed_ms = (time.perf_counter() - start) * 1000
        print(f"{name},{row},{elapsed_ms:.2f}")


if __name__ == "__main__":
    main()
