"""Trailing-window moving averages for weight tracking.

Both functions expect entries in chronological order (oldest first) and
average the most recent ``window`` of them. When fewer entries exist the
window simply shrinks; there is no padding. An empty input returns 0.0,
which callers treat as "no data yet" rather than as a weight.

The robust variant discards weights more than two population standard
deviations away from the window mean before averaging, which damps the
effect of a single mis-typed or water-heavy reading.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from bodytrack.tracking.models import WeightEntry

# Weights further than this many standard deviations from the mean are dropped
OUTLIER_STD_DEVS = 2.0


def _check_window(window: int) -> None:
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")


def _shifted_mean(weights: np.ndarray) -> float:
    # Averaging offsets from the first weight keeps a flat series exact
    base = float(weights[0])
    return base + float((weights - base).mean())


def moving_average(valid_entries: Sequence[WeightEntry], window: int) -> float:
    """
    Mean weight of the last ``window`` entries.

    The caller is responsible for filtering out cheat-meal and retention
    entries first.

    Args:
        valid_entries: Entries sorted by date ascending
        window: Number of trailing entries to average

    Returns:
        Mean weight, or 0.0 if there are no entries

    Example:
        >>> moving_average([], 7)
        0.0
    """
    _check_window(window)
    if not valid_entries:
        return 0.0

    recent = np.array([e.weight for e in valid_entries[-window:]], dtype=float)
    return _shifted_mean(recent)


def robust_moving_average(entries: Sequence[WeightEntry], window: int) -> float:
    """
    Outlier-resistant moving average.

    Cheat-meal and retention entries are removed, the last ``window`` valid
    entries are taken, and any weight outside mean ± 2σ (population σ) is
    dropped before averaging. If nothing survives the filter the plain
    window mean is returned. A single entry has σ = 0 and is kept as is.

    Args:
        entries: Entries sorted by date ascending, flagged or not
        window: Number of trailing valid entries to consider

    Returns:
        Filtered mean weight, or 0.0 if there are no valid entries
    """
    _check_window(window)
    valid = [e for e in entries if e.is_valid]
    if not valid:
        return 0.0

    weights = np.array([e.weight for e in valid[-window:]], dtype=float)
    mean = _shifted_mean(weights)
    std = float(weights.std())  # ddof=0

    kept = weights[np.abs(weights - mean) <= OUTLIER_STD_DEVS * std]
    if kept.size == 0:
        return mean

    return _shifted_mean(kept)
