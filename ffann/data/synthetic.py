"""Pure in-memory synthetic datasets."""

from __future__ import annotations

from typing import Callable, List

import numpy as np

from ..core.types import Sample
from .registry import DatasetSpec, register_dataset


def _boolean_samples(
    rule: Callable[[int, int], int], low: float, high: float
) -> List[Sample]:
    samples: List[Sample] = []
    for lhs in (0, 1):
        for rhs in (0, 1):
            out = rule(lhs, rhs)
            samples.append(
                Sample(
                    inputs=(float(lhs), float(rhs)),
                    targets=(high if out else low,),
                )
            )
    return samples


def _boolean_factory(name: str, rule: Callable[[int, int], int]):
    def _factory(low: float = 0.0, high: float = 1.0, **_: object) -> DatasetSpec:
        return DatasetSpec(
            name=name,
            samples=_boolean_samples(rule, float(low), float(high)),
            d_in=2,
            d_out=1,
            provenance={"type": "boolean", "rule": name, "low": low, "high": high},
        )

    return _factory


register_dataset("xor", _boolean_factory("xor", lambda a, b: a ^ b))
register_dataset("and", _boolean_factory("and", lambda a, b: a & b))
register_dataset("or", _boolean_factory("or", lambda a, b: a | b))


@register_dataset("sine")
def _sine(
    n_points: int = 32,
    freq: float = 1.0,
    noise: float = 0.0,
    seed: int = 0,
    unit_range: bool = True,
    **_: object,
) -> DatasetSpec:
    rng = np.random.default_rng(seed)
    x = np.linspace(-1.0, 1.0, int(n_points))
    y = np.sin(freq * np.pi * x)
    if noise:
        y = y + noise * rng.standard_normal(size=y.shape)
    if unit_range:
        # squash into (0, 1) so sigmoid outputs can reach the targets
        y = 0.5 + 0.4 * y
    samples = [Sample(inputs=(float(xi),), targets=(float(yi),)) for xi, yi in zip(x, y)]
    return DatasetSpec(
        name="sine",
        samples=samples,
        d_in=1,
        d_out=1,
        provenance={
            "type": "sine",
            "n_points": int(n_points),
            "freq": freq,
            "noise": noise,
            "seed": seed,
            "unit_range": unit_range,
        },
    )
