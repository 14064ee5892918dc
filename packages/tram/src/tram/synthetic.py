"""
Synthetic track corpus for exercising TrAM.

Every feature is white Gaussian noise at its own fluctuation scale.
The first n_discontinuous tracks get one jump, in every feature, at a
random timepoint kept away from the ends:

    x_f(t_jump) += discontinuity_scale * scale_f * N(0, 1)
"""

import numpy as np
from typing import Dict, List, Optional, Sequence, Tuple


DEFAULT_FEATURES = ('x', 'y', 'f1', 'f2', 'f3')
DEFAULT_SCALES = (1.0, 1.0, 5.0, 10.0, 0.1)


def make_corpus(
    n_tracks: int = 500,
    n_discontinuous: int = 10,
    n_timepoints: int = 50,
    features: Sequence[str] = DEFAULT_FEATURES,
    scales: Sequence[float] = DEFAULT_SCALES,
    discontinuity_scale: float = 9.0,
    safe_zone: int = 5,
    seed: Optional[int] = None,
) -> Tuple[List[Dict[str, np.ndarray]], List[Optional[int]]]:
    """
    Generate a list of tracks, the first n_discontinuous with a jump.

    Args:
        n_tracks: Number of tracks.
        n_discontinuous: How many leading tracks carry a discontinuity.
        n_timepoints: Length of every series.
        features: Feature names.
        scales: Noise standard deviation per feature.
        discontinuity_scale: Jump size relative to the feature scale.
        safe_zone: Timepoints at each end where no jump is placed.
        seed: Seed for numpy's default_rng.

    Returns:
        (corpus, jump_indices) - jump_indices[i] is None for continuous tracks.
    """
    if len(features) != len(scales):
        raise ValueError("features and scales must have the same length")
    if n_timepoints - 2 * safe_zone < 1:
        raise ValueError("n_timepoints too short for the safe zone")

    rng = np.random.default_rng(seed)
    scales = np.asarray(scales, dtype=np.float64)

    corpus = []
    jumps = []
    for i in range(n_tracks):
        discontinuous = i < n_discontinuous
        t_jump = int(safe_zone + rng.integers(n_timepoints - 2 * safe_zone))

        track = {}
        for name, scale in zip(features, scales):
            data = scale * rng.standard_normal(n_timepoints)
            if discontinuous:
                data[t_jump] += discontinuity_scale * scale * rng.standard_normal()
            track[name] = data

        corpus.append(track)
        jumps.append(t_jump if discontinuous else None)

    return corpus, jumps
