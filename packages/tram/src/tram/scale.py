"""
Robust fluctuation scale per feature.

Median of adjacent absolute differences |v[i+1] - v[i]|, pooled over
every series of a feature across a corpus of tracks. Rare large jumps
(the thing TrAM looks for) barely move a median, unlike a variance.
"""

import numpy as np
from typing import Dict, Iterable, List, Mapping, Sequence

from tram.errors import InvalidParameterError


def median_absolute_difference(series_list: Iterable[Sequence[float]]) -> float:
    """
    Median absolute difference between adjacent values, pooled over series.

    Parameters
    ----------
    series_list : iterable of 1D sequences
        Independent time series of one feature (ragged lengths allowed).

    Returns
    -------
    float - NaN if no series has two or more points.
    """
    series_list = list(series_list)
    if len(series_list) < 1:
        raise InvalidParameterError("must have at least one data vector")

    diffs = [
        np.abs(np.diff(np.asarray(vals, dtype=np.float64).flatten()))
        for vals in series_list
    ]
    pooled = np.concatenate(diffs) if diffs else np.array([])

    if len(pooled) == 0:
        return np.nan

    return float(np.median(pooled))


def median_absolute_differences(
    corpus: Iterable[Mapping[str, Sequence[float]]],
) -> Dict[str, float]:
    """
    Median absolute difference for every feature across all tracks.

    Parameters
    ----------
    corpus : iterable of dict
        One {feature: series} mapping per track. A feature absent from
        some tracks is estimated from the tracks that have it.

    Returns
    -------
    dict {feature: scale factor}, ready for TrAM(...).
    """
    by_feature: Dict[str, List[Sequence[float]]] = {}
    for track in corpus:
        for feature, values in track.items():
            by_feature.setdefault(feature, []).append(values)

    return {
        feature: median_absolute_difference(series)
        for feature, series in by_feature.items()
    }
