"""
Field handling for AGG-PBM.

Fields are TensorFlow tensors sharing one shape across a computation.
"""

from .field_store import (
    FieldStore,
    FieldBindingError,
    FieldShapeError,
    as_field,
    check_same_shape,
    DEFAULT_DTYPE
)

__all__ = [
    'FieldStore',
    'FieldBindingError',
    'FieldShapeError',
    'as_field',
    'check_same_shape',
    'DEFAULT_DTYPE'
]
