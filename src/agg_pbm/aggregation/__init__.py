"""
Aggregation module for AGG-PBM.

Pairwise aggregation efficiency for liquid-particulate systems, with
four growth-rate closures and reference solutions for validation.
"""

from .physics import GrowthModel
from .models import AggregationEfficiency

__all__ = ['GrowthModel', 'AggregationEfficiency']
