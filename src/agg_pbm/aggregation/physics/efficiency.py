"""
Pointwise Aggregation Efficiency Closures.

For a collision between particles of sizes r_i and r_j the efficiency is

    ψ = m1 / (1 + m1)

where m1 compares the growth rate with the turbulent collision time:

    BULK_DIFFUSION, MONOSURFACE:  m1 = L * G / (d_max * ρ * (r_i + r_j)² * ε)
    CONSTANT, KINETIC:            m1 = L * G / (ρ * (r_i + r_j)² * ε)

with d_max = max(r_i, r_j). Points with ρ <= 0 or ε <= 0 get m1 = 0,
and negative or undefined (0/0, ∞/∞) ratios are clamped to zero.

A zero denominator at a physical point with L * G > 0 (both abscissae
zero, or the product underflowing) gives m1 = +∞, and m1 = +∞ maps to
its limit ψ = 1. In float64 ψ also rounds to exactly 1.0 once m1
exceeds about 1e16, so outputs are always finite and lie in [0, 1].
"""

from typing import Callable, Dict, Union

import tensorflow as tf

from .growth_models import GrowthModel, parse_growth_model


def _guard_and_clamp(
    ratio: tf.Tensor,
    eps: tf.Tensor,
    rho: tf.Tensor
) -> tf.Tensor:
    """Zero the ratio where ρ <= 0 or ε <= 0, then clamp negatives and NaN."""
    zeros = tf.zeros_like(ratio)
    physical = tf.logical_and(rho > 0.0, eps > 0.0)
    m1 = tf.where(physical, ratio, zeros)
    return tf.where(m1 > 0.0, m1, zeros)


@tf.function(reduce_retracing=True)
def growth_ratio_size_dependent(
    ri: tf.Tensor,
    rj: tf.Tensor,
    g0: tf.Tensor,
    eps: tf.Tensor,
    rho: tf.Tensor,
    length_param: tf.Tensor
) -> tf.Tensor:
    """Growth ratio m1 for BULK_DIFFUSION and MONOSURFACE.

    Uses d_max = r_i if r_i > r_j else r_j, so equal sizes take r_j.

    Args:
        ri, rj: Abscissa fields of the colliding classes
        g0: Growth-rate coefficient field
        eps: Energy dissipation rate field
        rho: Density field
        length_param: Scalar tensor L

    Returns:
        Ratio field m1 in [0, ∞]
    """
    d_max = tf.where(ri > rj, ri, rj)
    r_sum = ri + rj
    denominator = d_max * rho * r_sum * r_sum * eps
    ratio = length_param * g0 / denominator
    return _guard_and_clamp(ratio, eps, rho)


@tf.function(reduce_retracing=True)
def growth_ratio_size_independent(
    ri: tf.Tensor,
    rj: tf.Tensor,
    g0: tf.Tensor,
    eps: tf.Tensor,
    rho: tf.Tensor,
    length_param: tf.Tensor
) -> tf.Tensor:
    """Growth ratio m1 for CONSTANT and KINETIC growth."""
    r_sum = ri + rj
    denominator = rho * r_sum * r_sum * eps
    ratio = length_param * g0 / denominator
    return _guard_and_clamp(ratio, eps, rho)


@tf.function(reduce_retracing=True)
def efficiency_from_ratio(m1: tf.Tensor) -> tf.Tensor:
    """Map m1 in [0, ∞] monotonically onto ψ = m1 / (1 + m1), with ψ(∞) = 1."""
    return tf.where(tf.math.is_inf(m1), tf.ones_like(m1), m1 / (1.0 + m1))


_RATIO_FUNCTIONS: Dict[GrowthModel, Callable[..., tf.Tensor]] = {
    GrowthModel.BULK_DIFFUSION: growth_ratio_size_dependent,
    GrowthModel.MONOSURFACE: growth_ratio_size_dependent,
    GrowthModel.CONSTANT: growth_ratio_size_independent,
    GrowthModel.KINETIC: growth_ratio_size_independent,
}


def get_growth_ratio_function(
    growth_model: Union[str, GrowthModel]
) -> Callable[..., tf.Tensor]:
    """Get the m1 function for a growth model.

    Raises:
        ConfigurationError: If growth_model is not recognized
    """
    return _RATIO_FUNCTIONS[parse_growth_model(growth_model)]


def pair_efficiency(
    ri: tf.Tensor,
    rj: tf.Tensor,
    g0: tf.Tensor,
    eps: tf.Tensor,
    rho: tf.Tensor,
    length_param: float,
    growth_model: Union[str, GrowthModel]
) -> tf.Tensor:
    """Aggregation efficiency field for one ordered pair of abscissae.

    All field arguments must share dtype and shape.

    Example:
        >>> r = tf.constant([1.0, 3.0], dtype=tf.float64)
        >>> one = tf.ones([1], dtype=tf.float64)
        >>> psi = pair_efficiency(r[0:1], r[1:2], 2 * one, one, one, 1.0, 'CONSTANT')
        >>> # m1 = 2 / 16 = 0.125, psi = 0.125 / 1.125 ≈ 0.1111
    """
    ratio_fn = get_growth_ratio_function(growth_model)
    l_tensor = tf.constant(length_param, dtype=ri.dtype)
    return efficiency_from_ratio(ratio_fn(ri, rj, g0, eps, rho, l_tensor))


def validate_efficiency(efficiency: tf.Tensor) -> dict:
    """Validate efficiency field properties.

    Checks:
    - Finite values: No NaN or Inf
    - Range: 0 <= ψ <= 1

    Values of exactly 1 are counted under 'saturated' rather than
    reported as errors: they are the rounded limit of a very large m1.

    Returns:
        Dictionary with validation results

    Example:
        >>> result = validate_efficiency(tf.constant([0.0, 0.5]))
        >>> result['valid']
        True
    """
    results = {
        'valid': True,
        'errors': [],
        'saturated': 0
    }

    psi = tf.convert_to_tensor(efficiency)
    results['saturated'] = int(tf.reduce_sum(tf.cast(tf.equal(psi, 1), tf.int64)))

    if not tf.reduce_all(tf.math.is_finite(psi)):
        results['valid'] = False
        results['errors'].append('Non-finite values (NaN or Inf) detected')

    if tf.reduce_any(psi < 0):
        results['valid'] = False
        results['errors'].append('Negative values detected')

    if tf.reduce_any(psi > 1):
        results['valid'] = False
        results['errors'].append('Values > 1 detected')

    return results


__all__ = [
    'growth_ratio_size_dependent',
    'growth_ratio_size_independent',
    'efficiency_from_ratio',
    'get_growth_ratio_function',
    'pair_efficiency',
    'validate_efficiency'
]
