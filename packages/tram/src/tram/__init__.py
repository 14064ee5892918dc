"""
tram - Tracking Aberration Measure
==================================

One number per track: how far its features stray from a smooth path.

    1. Scale factors: median adjacent absolute difference per feature,
       estimated once from a corpus of tracks.
    2. Per track: spline-smooth each feature, normalize residuals by the
       scale, optionally merge Euclidean groups (e.g. X/Y), take a
       weighted power mean across channels, then the max over time.

Usage:
    import tram

    scales = tram.median_absolute_differences(corpus)
    calc = tram.TrAM(scales, num_knots=7, p=0.5)

    for track in corpus:
        value = calc.compute(calc.select_features(track),
                             groups={'XY': ['POSITION_X', 'POSITION_Y']})
        # NaN when the track is shorter than num_knots
"""

__version__ = '0.1.0'

from tram.config import CONFIG, get as get_config, load_config
from tram.errors import InvalidParameterError, InternalInconsistencyError
from tram.scale import median_absolute_difference, median_absolute_differences
from tram.smoother import Smoother, select_knots
from tram.statistic import (
    TrAM,
    check_consistency,
    combine_groups,
    normalized_residuals,
    power_mean,
)

__all__ = [
    'CONFIG',
    'get_config',
    'load_config',
    'InvalidParameterError',
    'InternalInconsistencyError',
    'median_absolute_difference',
    'median_absolute_differences',
    'Smoother',
    'select_knots',
    'TrAM',
    'check_consistency',
    'combine_groups',
    'normalized_residuals',
    'power_mean',
]
