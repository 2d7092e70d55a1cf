#!/usr/bin/env python3
import argparse
import json
import random
from pathlib import Path
from typing import List, Optional

from exactlp.schemas import ConstraintSpec, LinearTerm, ProblemSpec


def _rational(rng: random.Random, low: int, high: int, denominator: int = 10) -> str:
    return f"{rng.randint(low * denominator, high * denominator)}/{denominator}"


def generate_random_lp(
    num_vars: int, num_constraints: int, seed: Optional[int] = None, integral: bool = False
) -> ProblemSpec:
    """Random packing LP: positive <= rows and a positive maximisation objective, always feasible and bounded."""
    rng = random.Random(seed)
    names = [f"x{i}" for i in range(num_vars)]
    constraints: List[ConstraintSpec] = []
    for j in range(num_constraints):
        terms = [LinearTerm(var=name, coef=_rational(rng, 1, 5)) for name in names]
        constraints.append(
            ConstraintSpec(
                name=f"c{j}",
                terms=terms,
                cmp="<=",
                rhs=_rational(rng, num_vars * 2, num_vars * 6),
            )
        )
    objective = [LinearTerm(var=name, coef=_rational(rng, 1, 4)) for name in names]
    return ProblemSpec(
        name="random-lp",
        sense="max",
        objective=objective,
        constraints=constraints,
        integral=list(names) if integral else [],
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate random feasible LP instances with rational data.")
    parser.add_argument("--vars", type=int, default=3, help="Number of variables")
    parser.add_argument("--constraints", type=int, default=3, help="Number of constraints")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--count", type=int, default=1, help="Number of instances")
    parser.add_argument("--integral", action="store_true", help="Flag every variable as integral")
    parser.add_argument("--out", type=Path, default=None, help="Optional output file")
    args = parser.parse_args()

    instances = [
        generate_random_lp(args.vars, args.constraints, (args.seed or 0) + idx, integral=args.integral)
        for idx in range(args.count)
    ]
    payload = [instance.model_dump() for instance in instances]

    if args.out:
        Path(args.out).write_text(json.dumps(payload, indent=2))
    else:
        print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
