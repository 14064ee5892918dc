"""
Tracking Aberration Measure (TrAM).

Patsch et al. (2016), Single cell dynamic phenotyping. Sci. Rep. 6, 34785.

Per track, per feature f and timepoint t:
    r_f(t)  = |x_f(t) - spline_f(t)| / scale_f          normalized residual
Features in a Euclidean group G collapse into one channel:
    r_G(t)  = sqrt(mean_{f in G} r_f(t)^2)              weight |G| / n_features
Remaining features keep weight 1 / n_features.
    stat(t) = (Σ_c w_c r_c(t)^p)^(1/p)                  weighted power mean
    TrAM    = max_t stat(t)

Stages are plain functions mapping dicts to new dicts:
    normalized_residuals → combine_groups → check_consistency → power_mean
"""

import logging
import numpy as np
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, Mapping, Optional, Sequence, Tuple

from tram.config import CONFIG
from tram.errors import InvalidParameterError, InternalInconsistencyError
from tram.smoother import Smoother

logger = logging.getLogger(__name__)

Groups = Optional[Mapping[str, Sequence[str]]]


# =================================================================
# Pipeline stages
# =================================================================

def normalized_residuals(
    series_by_feature: Mapping[str, Sequence[float]],
    scale_factors: Mapping[str, float],
    num_knots: int,
) -> Dict[str, np.ndarray]:
    """
    |raw - smoothed| / scale for every feature, at every timepoint.

    Every feature must have a scale factor; callers filter beforehand
    (TrAM.select_features). All series must share one length.
    """
    residuals = {}
    n = None
    for feature, values in series_by_feature.items():
        if feature not in scale_factors:
            raise InternalInconsistencyError(f"No scale factor for feature: {feature}")

        values = np.asarray(values, dtype=np.float64).flatten()
        if n is None:
            n = len(values)
        elif len(values) != n:
            raise InvalidParameterError(
                f"all series must have the same length: {feature!r} has {len(values)}, expected {n}"
            )
        times = np.arange(len(values), dtype=np.float64)
        smoothed = Smoother(times, values, num_knots).value(times)

        residuals[feature] = np.abs(values - smoothed) / scale_factors[feature]
    return residuals


def combine_groups(
    residuals: Mapping[str, np.ndarray],
    groups: Groups = None,
) -> Tuple[Dict[str, np.ndarray], Dict[str, float]]:
    """
    Collapse grouped features into RMS channels and weight every channel.

    Parameters
    ----------
    residuals : dict
        {feature: normalized residual series}.
    groups : dict, optional
        {group name: member features}. Members missing from residuals are
        skipped; a group with no members present yields no channel.

    Returns
    -------
    (channels, weights) - fresh dicts with identical keys, weights sum to 1.
    """
    n_features = len(residuals)
    if n_features == 0:
        return {}, {}

    if not groups:
        return dict(residuals), {f: 1.0 / n_features for f in residuals}

    channels: Dict[str, np.ndarray] = {}
    weights: Dict[str, float] = {}
    claimed: Dict[str, str] = {}

    for name, members in groups.items():
        if isinstance(members, str):
            raise InvalidParameterError(f"Group {name!r} members must be a sequence of names, got a string")
        members = list(members)
        if not members:
            raise InvalidParameterError(f"Group {name!r} has no members")

        present = []
        for feature in members:
            if feature in claimed:
                raise InvalidParameterError(
                    f"Feature {feature!r} claimed by groups {claimed[feature]!r} and {name!r}"
                )
            claimed[feature] = name
            if feature in residuals:
                present.append(feature)

        if not present:
            logger.debug("Group %s has no features in this track, skipped", name)
            continue

        stacked = np.vstack([residuals[f] for f in present])
        channels[name] = np.sqrt(np.mean(stacked ** 2, axis=0))
        weights[name] = len(present) / n_features

    for feature, series in residuals.items():
        if feature in claimed:
            continue
        if feature in channels:
            raise InvalidParameterError(f"Group name {feature!r} collides with an ungrouped feature")
        channels[feature] = series
        weights[feature] = 1.0 / n_features

    return channels, weights


def check_consistency(channels: Mapping[str, Any], weights: Mapping[str, float]) -> None:
    """Every channel has exactly one weight and vice versa."""
    if set(channels) != set(weights):
        raise InternalInconsistencyError(
            f"weight/data key mismatch: weights={sorted(weights)}, data={sorted(channels)}"
        )


def power_mean(
    channels: Mapping[str, np.ndarray],
    weights: Mapping[str, float],
    p: float,
) -> np.ndarray:
    """Weighted power mean over channels at each timepoint."""
    names = sorted(channels)
    w = np.array([weights[name] for name in names], dtype=np.float64)
    r = np.vstack([channels[name] for name in names])
    return np.sum(w[:, np.newaxis] * r ** p, axis=0) ** (1.0 / p)


# =================================================================
# Aggregator
# =================================================================

class TrAM:
    """
    TrAM calculator bound to a fixed set of feature scale factors.

    Parameters
    ----------
    scale_factors : dict
        {feature: median absolute difference}, see
        tram.scale.median_absolute_differences. Features with a zero
        (or non-finite) scale cannot be normalized and are dropped.
    num_knots : int
        Knots per smoothing spline. Default: CONFIG['tram']['num_knots']
    p : float
        Power-mean exponent, > 0. Default: CONFIG['tram']['p']
    groups : dict, optional
        Default Euclidean groups, used when compute() gets no groups.
    selected : iterable of str, optional
        Features to score. None keeps every available feature.
    """

    def __init__(
        self,
        scale_factors: Mapping[str, float],
        num_knots: Optional[int] = None,
        p: Optional[float] = None,
        groups: Groups = None,
        selected: Optional[Iterable[str]] = None,
    ):
        if num_knots is None:
            num_knots = CONFIG['tram']['num_knots']
        if p is None:
            p = CONFIG['tram']['p']

        min_knots = CONFIG['smoother']['min_knots']
        if num_knots < min_knots:
            raise InvalidParameterError(f"must have at least {min_knots} knots")
        if not p > 0:
            raise InvalidParameterError(f"exponent p must be positive, got {p}")

        kept = {}
        dropped = []
        for feature, scale in scale_factors.items():
            scale = float(scale)
            if scale == 0 or not np.isfinite(scale):
                dropped.append(feature)
            elif scale < 0:
                raise InvalidParameterError(f"Negative scale factor for feature {feature!r}: {scale}")
            else:
                kept[feature] = scale

        if dropped:
            logger.debug("Dropping features with no fluctuation scale: %s", sorted(dropped))

        self._scale_factors = MappingProxyType(kept)
        self._num_knots = int(num_knots)
        self._p = float(p)
        self._groups = MappingProxyType({
            name: members if isinstance(members, str) else tuple(members)
            for name, members in (groups or {}).items()
        })
        self._selected = None if selected is None else frozenset(selected)

    @classmethod
    def from_config(
        cls,
        scale_factors: Mapping[str, float],
        config: Optional[Dict[str, Any]] = None,
    ) -> 'TrAM':
        """
        Build from a config dict (see tram.config.load_config).

        Reads tram.num_knots, tram.p, features.euclidean_groups and
        features.default_selected.
        """
        config = config or CONFIG
        cfg = config.get('tram', {})
        features = config.get('features') or {}
        return cls(
            scale_factors,
            num_knots=cfg.get('num_knots'),
            p=cfg.get('p'),
            groups=features.get('euclidean_groups'),
            selected=features.get('default_selected'),
        )

    @property
    def available_features(self) -> FrozenSet[str]:
        """Features with a usable scale factor."""
        return frozenset(self._scale_factors)

    @property
    def scale_factors(self) -> Mapping[str, float]:
        return self._scale_factors

    @property
    def num_knots(self) -> int:
        return self._num_knots

    @property
    def p(self) -> float:
        return self._p

    @property
    def groups(self) -> Mapping[str, Sequence[str]]:
        return self._groups

    @property
    def selected(self) -> Optional[FrozenSet[str]]:
        return self._selected

    def select_features(
        self,
        series_by_feature: Mapping[str, Sequence[float]],
    ) -> Dict[str, Sequence[float]]:
        """Keep only selected features this calculator can normalize."""
        return {
            f: v for f, v in series_by_feature.items()
            if f in self._scale_factors and (self._selected is None or f in self._selected)
        }

    def profile(
        self,
        series_by_feature: Mapping[str, Sequence[float]],
        groups: Groups = None,
    ) -> Dict[str, Any]:
        """
        TrAM for one track, with the per-timepoint detail behind it.

        Parameters
        ----------
        series_by_feature : dict
            {feature: 1D series}, all the same length.
        groups : dict, optional
            {group name: member features} combined as Euclidean channels.
            None uses the calculator's default groups; {} disables grouping.

        Returns
        -------
        dict with:
            tram : float - max over time, NaN if not computable
            peak_index : int or None - timepoint of the max
            stat : np.ndarray - per-timepoint power mean
            residuals : dict - per-channel normalized residuals
            weights : dict - per-channel weights (sum to 1)
            n_timepoints : int
        """
        if not series_by_feature:
            return _empty_profile(0)

        first = next(iter(series_by_feature.values()))
        n = len(first)
        if n < self._num_knots:
            logger.debug("Track too short for %d knots: %d timepoints", self._num_knots, n)
            return _empty_profile(n)

        if groups is None:
            groups = self._groups

        residuals = normalized_residuals(series_by_feature, self._scale_factors, self._num_knots)
        channels, weights = combine_groups(residuals, groups)
        check_consistency(channels, weights)

        stat = power_mean(channels, weights, self._p)
        tram = float(np.max(stat))

        return {
            'tram': tram,
            'peak_index': int(np.argmax(stat)) if np.isfinite(tram) else None,
            'stat': stat,
            'residuals': channels,
            'weights': weights,
            'n_timepoints': n,
        }

    def compute(
        self,
        series_by_feature: Mapping[str, Sequence[float]],
        groups: Groups = None,
    ) -> float:
        """TrAM for one track. NaN if the track is shorter than num_knots."""
        return self.profile(series_by_feature, groups)['tram']

    def __repr__(self) -> str:
        return (
            f"TrAM(features={sorted(self._scale_factors)}, "
            f"num_knots={self._num_knots}, p={self._p}, groups={sorted(self._groups)})"
        )


def _empty_profile(n: int) -> Dict[str, Any]:
    return {
        'tram': np.nan,
        'peak_index': None,
        'stat': np.array([]),
        'residuals': {},
        'weights': {},
        'n_timepoints': n,
    }
