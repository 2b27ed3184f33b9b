"""
Base Expression for AGG-PBM.

Provides the abstract base class for kernels that compute named output
fields from named input fields held in a FieldStore. Subclasses declare
their inputs, bind them for one call and evaluate.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence, Tuple

import tensorflow as tf

from agg_pbm.core.fields import DEFAULT_DTYPE, FieldStore


class BaseExpression(ABC):
    """Abstract base class for field-computing kernels.

    The evaluation cycle is:
    - required_inputs(): tags a scheduler must resolve first
    - bind_fields(store): resolve those tags into tensors for one call
    - evaluate_bound(bound): compute one tensor per result tag

    Subclasses keep only configuration on the instance. Bound fields are
    returned to the caller, never stored, so one instance can serve
    concurrent evaluations.

    Attributes:
        result_tags: Names of the computed fields, in output order
        dtype: Floating dtype every input is cast to
        gpu_runnable: Whether the evaluation is safe to place on a GPU
    """

    def __init__(
        self,
        result_tags: Sequence[str],
        dtype: tf.DType = DEFAULT_DTYPE
    ):
        self.result_tags: Tuple[str, ...] = tuple(result_tags)
        self.dtype = dtype
        self.gpu_runnable = False

    def set_gpu_runnable(self, runnable: bool) -> None:
        self.gpu_runnable = bool(runnable)

    @abstractmethod
    def required_inputs(self) -> Tuple[str, ...]:
        """Tags of every field this expression reads."""
        pass

    @abstractmethod
    def bind_fields(self, store: FieldStore) -> Any:
        """Resolve the required input tags for a single evaluation."""
        pass

    @abstractmethod
    def evaluate_bound(self, bound: Any) -> List[tf.Tensor]:
        """Compute the result fields from previously bound inputs."""
        pass

    def evaluate_fields(
        self,
        store: FieldStore,
        publish: bool = True
    ) -> Dict[str, tf.Tensor]:
        """Bind inputs from store, evaluate, and optionally publish results.

        Args:
            store: Field store holding every tag in required_inputs()
            publish: Whether to register the results back in the store

        Returns:
            Dictionary mapping result tag to computed field
        """
        bound = self.bind_fields(store)
        results = self.evaluate_bound(bound)
        if publish:
            store.publish(self.result_tags, results)
        return dict(zip(self.result_tags, results))

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"inputs={len(self.required_inputs())}, "
            f"results={len(self.result_tags)}, "
            f"dtype={self.dtype.name})"
        )


__all__ = ['BaseExpression']
