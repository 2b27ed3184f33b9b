"""
Reference Solutions for Aggregation Efficiency.

Plain NumPy evaluation of the efficiency closures, used to validate the
TensorFlow kernel. The guard order matches the kernel:

1. m1 = 0 wherever ρ <= 0 or ε <= 0
2. otherwise m1 = L * G / (d * ρ * (r_i + r_j)² * ε), d = max(r_i, r_j)
   for BULK_DIFFUSION/MONOSURFACE and d = 1 for CONSTANT/KINETIC
3. m1 = 0 wherever the ratio is negative or NaN; a zero denominator with
   L * G > 0 gives m1 = inf
4. ψ = m1 / (1 + m1), with ψ = 1 where m1 = inf

Also provides the benchmark scenarios with hand-computed values.
"""

from dataclasses import dataclass
from typing import Dict, Sequence, Tuple, Union

import numpy as np

from agg_pbm.aggregation.physics.growth_models import GrowthModel, parse_growth_model

ArrayLike = Union[float, Sequence[float], np.ndarray]


def reference_efficiency(
    ri: ArrayLike,
    rj: ArrayLike,
    g0: ArrayLike,
    eps: ArrayLike,
    rho: ArrayLike,
    length_param: float,
    growth_model: Union[str, GrowthModel]
) -> np.ndarray:
    """Efficiency for one ordered pair of abscissae.

    Args:
        ri, rj: Abscissa values of the two colliding classes
        g0: Growth-rate coefficient
        eps: Energy dissipation rate
        rho: Density
        length_param: Scale factor L
        growth_model: Growth model name or member

    Returns:
        Efficiency values in [0, 1], broadcast over the inputs

    Example:
        >>> float(reference_efficiency(1.0, 3.0, 2.0, 1.0, 1.0, 1.0, 'CONSTANT'))
        0.1111111111111111
    """
    model = parse_growth_model(growth_model)
    ri, rj, g0, eps, rho = (np.asarray(x, dtype=np.float64) for x in (ri, rj, g0, eps, rho))

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        r_sum = ri + rj
        if model.uses_size_dependent_denominator:
            d_max = np.where(ri > rj, ri, rj)
            denominator = d_max * rho * r_sum * r_sum * eps
        else:
            denominator = rho * r_sum * r_sum * eps

        ratio = length_param * g0 / denominator

        physical = (rho > 0.0) & (eps > 0.0)
        m1 = np.where(physical, ratio, 0.0)
        m1 = np.where(m1 > 0.0, m1, 0.0)
        return np.where(np.isinf(m1), 1.0, m1 / (1.0 + m1))


def reference_efficiency_matrix(
    abscissae: Sequence[ArrayLike],
    g0: ArrayLike,
    eps: ArrayLike,
    rho: ArrayLike,
    length_param: float,
    growth_model: Union[str, GrowthModel]
) -> np.ndarray:
    """Efficiencies for every ordered pair, shape (nEnv, nEnv, *field_shape)."""
    n_env = len(abscissae)
    rows = []
    for i in range(n_env):
        rows.append([
            reference_efficiency(abscissae[i], abscissae[j], g0, eps, rho,
                                 length_param, growth_model)
            for j in range(n_env)
        ])
    return np.asarray(rows, dtype=np.float64)


@dataclass(frozen=True)
class Scenario:
    """Benchmark input set with the expected efficiency of selected pairs."""

    name: str
    growth_model: GrowthModel
    length_param: float
    abscissae: Tuple[float, ...]
    g0: float
    eps: float
    rho: float
    expected: Dict[Tuple[int, int], float]


SCENARIOS: Dict[str, Scenario] = {
    # m1(0,1) = 1 * 2 / (1 * 4² * 1) = 0.125
    'scenario1': Scenario(
        name='scenario1',
        growth_model=GrowthModel.CONSTANT,
        length_param=1.0,
        abscissae=(1.0, 3.0),
        g0=2.0,
        eps=1.0,
        rho=1.0,
        expected={(0, 1): 0.125 / 1.125, (1, 0): 0.125 / 1.125,
                  (0, 0): 0.5 / 1.5, (1, 1): (2.0 / 36.0) / (1.0 + 2.0 / 36.0)}
    ),
    'scenario2': Scenario(
        name='scenario2',
        growth_model=GrowthModel.CONSTANT,
        length_param=1.0,
        abscissae=(1.0, 3.0),
        g0=2.0,
        eps=1.0,
        rho=0.0,
        expected={(0, 0): 0.0, (0, 1): 0.0, (1, 0): 0.0, (1, 1): 0.0}
    ),
    # Self pair: d_max = r_j = 2, m1 = 1 / (2 * 4²) = 0.03125
    'scenario3': Scenario(
        name='scenario3',
        growth_model=GrowthModel.BULK_DIFFUSION,
        length_param=1.0,
        abscissae=(2.0,),
        g0=1.0,
        eps=1.0,
        rho=1.0,
        expected={(0, 0): 0.03125 / 1.03125}
    ),
    'scenario4': Scenario(
        name='scenario4',
        growth_model=GrowthModel.CONSTANT,
        length_param=1.0,
        abscissae=(1.0, 3.0),
        g0=-2.0,
        eps=1.0,
        rho=1.0,
        expected={(0, 0): 0.0, (0, 1): 0.0, (1, 0): 0.0, (1, 1): 0.0}
    ),
}


def get_scenario(name: str) -> Scenario:
    """Get a benchmark scenario by name.

    Raises:
        ValueError: If the scenario is not defined
    """
    if name not in SCENARIOS:
        raise ValueError(
            f"Unsupported scenario: {name}. "
            f"Must be one of: {list(SCENARIOS.keys())}"
        )
    return SCENARIOS[name]


__all__ = [
    'reference_efficiency',
    'reference_efficiency_matrix',
    'Scenario',
    'SCENARIOS',
    'get_scenario'
]
