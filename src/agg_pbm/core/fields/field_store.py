"""
Field Store for AGG-PBM.

Holds named fields (TensorFlow tensors) that kernels bind to at evaluation
time. Tensors are immutable, so every field handed out by the store is a
read-only view of the stored values.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Union

import numpy as np
import tensorflow as tf


DEFAULT_DTYPE = tf.float64


class FieldBindingError(KeyError):
    """Exception raised when a requested field tag is not in the store."""
    pass


class FieldShapeError(ValueError):
    """Exception raised when fields that must share a shape do not."""
    pass


def as_field(
    values: Union[float, Sequence[float], np.ndarray, tf.Tensor],
    dtype: tf.DType = DEFAULT_DTYPE
) -> tf.Tensor:
    """Convert array-like values to a field tensor.

    Args:
        values: Python scalar, nested list, NumPy array or tensor
        dtype: Floating dtype of the resulting field (default: float64)

    Returns:
        Tensor of the requested dtype. Scalars give a shape () field.

    Example:
        >>> rho = as_field([1.0, 1.2, 0.9])
        >>> rho.dtype
        tf.float64
    """
    if isinstance(values, tf.Tensor):
        if values.dtype == dtype:
            return values
        return tf.cast(values, dtype)
    return tf.convert_to_tensor(np.asarray(values, dtype=dtype.as_numpy_dtype))


def check_same_shape(
    fields: Sequence[tf.Tensor],
    names: Optional[Sequence[str]] = None
) -> tf.TensorShape:
    """Check that all fields share one shape.

    Args:
        fields: Field tensors to compare
        names: Optional tags used in the error message

    Returns:
        The common shape

    Raises:
        FieldShapeError: If any field differs from the first one
    """
    if not fields:
        raise FieldShapeError("No fields given for shape check")
    if names is None:
        names = [f"field[{k}]" for k in range(len(fields))]

    reference = fields[0].shape
    mismatched = [
        f"{name}: {tuple(field.shape)}"
        for name, field in zip(names, fields)
        if field.shape != reference
    ]
    if mismatched:
        raise FieldShapeError(
            f"Fields must share shape {tuple(reference)} "
            f"(from {names[0]}); mismatched: {', '.join(mismatched)}"
        )
    return reference


class FieldStore:
    """Named collection of fields shared between kernels.

    Example:
        >>> store = FieldStore()
        >>> store.register('rho', [1.0, 1.0])
        >>> 'rho' in store
        True
        >>> store.field_ref('rho').shape
        TensorShape([2])
    """

    def __init__(self, dtype: tf.DType = DEFAULT_DTYPE):
        self.dtype = dtype
        self._fields: Dict[str, tf.Tensor] = {}

    def register(self, tag: str, values) -> tf.Tensor:
        """Store values under a tag, replacing any previous field."""
        field = as_field(values, self.dtype)
        self._fields[tag] = field
        return field

    def field_ref(self, tag: str) -> tf.Tensor:
        """Return the field stored under tag.

        Raises:
            FieldBindingError: If the tag has not been registered
        """
        try:
            return self._fields[tag]
        except KeyError:
            raise FieldBindingError(
                f"Field '{tag}' is not registered. "
                f"Available fields: {sorted(self._fields)}"
            ) from None

    def field_refs(self, tags: Iterable[str]) -> List[tf.Tensor]:
        return [self.field_ref(tag) for tag in tags]

    def publish(self, tags: Sequence[str], fields: Sequence[tf.Tensor]) -> None:
        """Store computed fields under their result tags."""
        if len(tags) != len(fields):
            raise ValueError(
                f"Got {len(fields)} fields for {len(tags)} result tags"
            )
        for tag, field in zip(tags, fields):
            self.register(tag, field)

    def tags(self) -> List[str]:
        return list(self._fields)

    def __contains__(self, tag: object) -> bool:
        return tag in self._fields

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"FieldStore(n_fields={len(self._fields)}, dtype={self.dtype.name})"


__all__ = [
    'FieldStore',
    'FieldBindingError',
    'FieldShapeError',
    'as_field',
    'check_same_shape',
    'DEFAULT_DTYPE'
]
