"""
Base expression classes for AGG-PBM.

Includes:
- BaseExpression: Abstract base class for field-computing kernels
"""

from .base_expression import BaseExpression

__all__ = ['BaseExpression']
