"""
AGG-PBM: Aggregation efficiency closures for Population Balance Modeling

Computes pairwise aggregation efficiency fields for quadrature-based
population balance methods.
"""

__version__ = "0.1.0"
__author__ = "AGG-PBM Contributors"

# Core infrastructure:
# from agg_pbm.core import ...

# Aggregation efficiency kernel:
# from agg_pbm.aggregation import AggregationEfficiency
