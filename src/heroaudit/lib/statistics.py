"""
CONTRACT: inline
ROLE: Log-normal scoring curve shared by metric audits.

INPUTS:
  - median, falloff (podr) in ms
OUTPUTS:
  - complementary percentile in [0, 1]

CONFIG KEYS:
  - audits.<id>.options.score_podr / score_median

PERF / TIMING:
  - vectorised over numpy arrays

FAILURE MODES:
  - invalid calibration points or measurements -> ValueError

LOG EVENTS:
  - n/a

TESTS:
  - tests/test_statistics.py

CONTRACT DETAILS:
# Log-normal distribution

- The falloff value is the smaller positive root of the third derivative of
  the log-normal CDF; shape is derived from it and the median.
- erf uses the Abramowitz & Stegun 7.1.26 approximation (max error 1.5e-7)
  so scores are reproducible across platforms.
"""

from __future__ import annotations

import math
from typing import Union

import numpy as np


ArrayLike = Union[float, int, np.ndarray]

# Abramowitz & Stegun 7.1.26 coefficients.
_A1 = 0.254829592
_A2 = -0.284496736
_A3 = 1.421413741
_A4 = -1.453152027
_A5 = 1.061405429
_P = 0.3275911


def erf(x: ArrayLike) -> ArrayLike:
    """Approximate error function; accepts scalars or arrays (+/-inf allowed)."""
    values = np.asarray(x, dtype=np.float64)
    sign = np.where(values < 0, -1.0, 1.0)
    ax = np.abs(values)
    t = 1.0 / (1.0 + _P * ax)
    y = t * (_A1 + t * (_A2 + t * (_A3 + t * (_A4 + t * _A5))))
    out = sign * (1.0 - y * np.exp(-ax * ax))
    if out.ndim == 0:
        return float(out)
    return out


class LogNormalDistribution:
    """Log-normal distribution parameterised by median and falloff point."""

    def __init__(self, median: float, falloff: float) -> None:
        median = float(median)
        falloff = float(falloff)
        if not (math.isfinite(median) and median > 0):
            raise ValueError(f"median must be a positive number, got {median}")
        if not (math.isfinite(falloff) and 0 < falloff < median):
            raise ValueError(f"falloff must be in (0, median={median:g}), got {falloff}")
        self.median = median
        self.falloff = falloff
        self.location = math.log(median)
        log_ratio = math.log(falloff / median)
        self.shape = math.sqrt(1 - 3 * log_ratio - math.sqrt((log_ratio - 3) ** 2 - 8)) / 2

    def compute_complementary_percentile(self, x: ArrayLike) -> ArrayLike:
        """Probability that a sample exceeds `x`; 1.0 at x=0."""
        values = np.asarray(x, dtype=np.float64)
        if not np.all(np.isfinite(values)):
            raise ValueError("measured values must be finite")
        if np.any(values < 0):
            raise ValueError("measured values must be >= 0")
        with np.errstate(divide="ignore"):
            log_x = np.log(values)
        standardized = (log_x - self.location) / (math.sqrt(2) * self.shape)
        out = (1.0 - np.asarray(erf(standardized))) / 2.0
        if out.ndim == 0:
            return float(out)
        return out


def get_log_normal_distribution(median: float, falloff: float) -> LogNormalDistribution:
    return LogNormalDistribution(median, falloff)


def clamp_to_2_decimals(value: ArrayLike) -> ArrayLike:
    """Round half-up to two decimals."""
    out = np.floor(np.asarray(value, dtype=np.float64) * 100 + 0.5) / 100
    if out.ndim == 0:
        return float(out)
    return out
