"""
Reference solutions for aggregation efficiency.

Provides NumPy evaluations of the closures and benchmark scenarios:
- Scenario 1: CONSTANT growth, two classes
- Scenario 2: Scenario 1 with zero density
- Scenario 3: BULK_DIFFUSION, single class self-pair
- Scenario 4: Negative growth coefficient
"""

from .reference import (
    reference_efficiency,
    reference_efficiency_matrix,
    Scenario,
    SCENARIOS,
    get_scenario
)

__all__ = [
    'reference_efficiency',
    'reference_efficiency_matrix',
    'Scenario',
    'SCENARIOS',
    'get_scenario'
]
