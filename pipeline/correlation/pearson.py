"""Pearson product-moment correlation with a NaN sentinel.

``pearson`` never raises on degenerate input. It returns NaN when:
  - the samples have different lengths
  - fewer than two paired values are available
  - either sample has zero variance
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

MIN_SAMPLES = 2


def pearson(a: Sequence[float], b: Sequence[float]) -> float:
    """Return r for paired samples ``(a[i], b[i])``, clipped to [-1, 1]."""
    if len(a) != len(b) or len(a) < MIN_SAMPLES:
        return math.nan

    x = np.asarray(a, dtype=np.float64)
    y = np.asarray(b, dtype=np.float64)

    # Zero variance, tested on the raw values: x - x.mean() is not exactly 0
    # for a constant sample like [0.1, 0.1, 0.1].
    if np.all(x == x[0]) or np.all(y == y[0]):
        return math.nan

    dx = x - x.mean()
    dy = y - y.mean()
    sxx = float(np.dot(dx, dx))
    syy = float(np.dot(dy, dy))
    if sxx == 0.0 or syy == 0.0:
        return math.nan

    denom = math.sqrt(sxx * syy)
    if denom == 0.0 or not math.isfinite(denom):
        # sxx * syy under- or overflowed
        denom = math.sqrt(sxx) * math.sqrt(syy)

    r = float(np.dot(dx, dy)) / denom
    return max(-1.0, min(1.0, r))


__all__ = ["MIN_SAMPLES", "pearson"]
