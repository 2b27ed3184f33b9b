"""
Aggregation efficiency kernel.

Contains the AggregationEfficiency class that inherits from BaseExpression.
"""

from .aggregation_efficiency import (
    AggregationEfficiency,
    BoundFields,
    efficiency_tag,
    default_result_tags,
    DEFAULT_RESULT_PREFIX
)

__all__ = [
    'AggregationEfficiency',
    'BoundFields',
    'efficiency_tag',
    'default_result_tags',
    'DEFAULT_RESULT_PREFIX'
]
