"""
TrAM Configuration
==================
Defaults for smoothing, aggregation and feature selection.
Single source of truth for every tunable in the package.

Usage:
    from tram.config import CONFIG, get
    num_knots = CONFIG['tram']['num_knots']
    p = get('tram.p')

    # Per-run overrides from YAML, passed explicitly
    cfg = load_config('tram.yaml')
    tram = TrAM.from_config(scale_factors, cfg)
"""

import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml


CONFIG = {

    # =================================================================
    # Spline smoothing
    # =================================================================
    'smoother': {
        'min_knots': 4,                 # cubic basis needs at least 4
    },

    # =================================================================
    # Statistic
    # =================================================================
    'tram': {
        'num_knots': 7,
        'p': 0.5,                       # power-mean exponent, (0, 1] typical
    },

    # =================================================================
    # Feature selection (spot features of a tracking model)
    # =================================================================
    'features': {
        'default_selected': [
            'POSITION_X',
            'POSITION_Y',
            'POSITION_Z',
            'RADIUS',
            'MEDIAN_INTENSITY',
            'SNR',
        ],
        'euclidean_groups': {
            'XY': ['POSITION_X', 'POSITION_Y'],
        },
    },
}


def get(path: str, default=None, config: Optional[Dict[str, Any]] = None):
    """
    Get a config value by dot-separated path.

    Usage:
        get('tram.num_knots')          → 7
        get('smoother.min_knots')      → 4
    """
    keys = path.split('.')
    val = CONFIG if config is None else config
    for key in keys:
        if isinstance(val, dict) and key in val:
            val = val[key]
        else:
            return default
    return val


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Return a copy of CONFIG overlaid with values from a YAML file.

    Nested dicts are merged key by key; any other value in the file
    replaces the default. Keys unknown to CONFIG are kept.

    Args:
        path: YAML file. None returns a plain copy of the defaults.

    Returns:
        Fresh config dict, safe to mutate.
    """
    cfg = copy.deepcopy(CONFIG)
    if path is None:
        return cfg

    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding='utf-8') as f:
        overrides = yaml.safe_load(f) or {}

    if not isinstance(overrides, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")

    return _merge(cfg, overrides)


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(base[key], value)
        else:
            base[key] = value
    return base
