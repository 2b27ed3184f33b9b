"""
Helper Functions for AGG-PBM.

General-purpose utility functions: reproducibility and field statistics
used by the runner and the evaluation logger.
"""

from typing import Dict, Tuple, Union

import numpy as np
import tensorflow as tf


def set_random_seed(seed: int = 42) -> None:
    """Set random seed for reproducibility across all libraries.

    Sets seeds for:
    - Python's random module
    - NumPy
    - TensorFlow

    Args:
        seed: Random seed value (default: 42)
    """
    import os
    import random

    os.environ['PYTHONHASHSEED'] = str(seed)
    random.seed(seed)
    np.random.seed(seed)
    tf.random.set_seed(seed)


def log_uniform_field(
    rng: np.random.Generator,
    low: float,
    high: float,
    shape: Union[int, Tuple[int, ...]]
) -> np.ndarray:
    """Sample strictly positive values spread evenly in log space.

    Example:
        >>> rng = np.random.default_rng(0)
        >>> r = log_uniform_field(rng, 1e-6, 1e-4, 100)
        >>> bool(r.min() >= 1e-6 and r.max() <= 1e-4)
        True
    """
    if low <= 0 or high <= low:
        raise ValueError(f"Need 0 < low < high, got low={low}, high={high}")
    return np.exp(rng.uniform(np.log(low), np.log(high), shape))


def field_statistics(values: Union[np.ndarray, tf.Tensor]) -> Dict[str, float]:
    """Summarize a field (or stack of fields) for logging.

    Returns:
        Dictionary with min, mean, max and the fraction of exact zeros
    """
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return {'min': 0.0, 'mean': 0.0, 'max': 0.0, 'zero_fraction': 0.0}
    return {
        'min': float(arr.min()),
        'mean': float(arr.mean()),
        'max': float(arr.max()),
        'zero_fraction': float(np.mean(arr == 0.0))
    }


__all__ = [
    'set_random_seed',
    'log_uniform_field',
    'field_statistics'
]
