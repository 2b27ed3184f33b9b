"""
Physics closures for aggregation efficiency.

Includes:
- Growth model selector: GrowthModel
- Growth-rate ratios m1 for each closure
- Efficiency mapping ψ = m1 / (1 + m1)
"""

from .growth_models import GrowthModel, parse_growth_model
from .efficiency import (
    growth_ratio_size_dependent,
    growth_ratio_size_independent,
    efficiency_from_ratio,
    get_growth_ratio_function,
    pair_efficiency,
    validate_efficiency
)

__all__ = [
    'GrowthModel',
    'parse_growth_model',
    'growth_ratio_size_dependent',
    'growth_ratio_size_independent',
    'efficiency_from_ratio',
    'get_growth_ratio_function',
    'pair_efficiency',
    'validate_efficiency'
]
