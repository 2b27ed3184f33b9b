"""
Aggregation Efficiency Kernel.

Computes one efficiency field per ordered pair (i, j) of abscissae,

    ψ_ij = m1 / (1 + m1),    m1 = L * G / (d * ρ * (r_i + r_j)² * ε)

where d = max(r_i, r_j) for the BULK_DIFFUSION and MONOSURFACE growth
models and d = 1 for CONSTANT and KINETIC. Results are ordered
``idx = i * nEnv + j``. The (i, j) and (j, i) fields are computed
separately and stored as separate outputs.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import tensorflow as tf

from agg_pbm.aggregation.physics.efficiency import (
    efficiency_from_ratio,
    get_growth_ratio_function
)
from agg_pbm.aggregation.physics.growth_models import GrowthModel, parse_growth_model
from agg_pbm.core.fields import (
    DEFAULT_DTYPE,
    FieldShapeError,
    FieldStore,
    as_field,
    check_same_shape
)
from agg_pbm.core.models import BaseExpression
from agg_pbm.core.utils.config_loader import ConfigurationError

DEFAULT_RESULT_PREFIX = "aggregation_efficiency"


def efficiency_tag(prefix: str, i: int, j: int) -> str:
    """Name of the efficiency field for the ordered pair (i, j)."""
    return f"{prefix}_{i}_{j}"


def default_result_tags(n_env: int, prefix: str = DEFAULT_RESULT_PREFIX) -> List[str]:
    """Result tags for every ordered pair in i * nEnv + j order."""
    return [efficiency_tag(prefix, i, j) for i in range(n_env) for j in range(n_env)]


@dataclass(frozen=True)
class BoundFields:
    """Input fields resolved for a single evaluation call."""

    abscissae: Tuple[tf.Tensor, ...]
    growth_coef: tf.Tensor
    dissipation: tf.Tensor
    density: tf.Tensor


class AggregationEfficiency(BaseExpression):
    """Pairwise aggregation efficiency for a quadrature-based PBM.

    The growth model and length parameter are fixed at construction.
    Evaluation is a pure function of the input fields: the instance is
    never modified after __init__, so repeated or concurrent calls are
    safe and give identical results for identical inputs.

    Attributes:
        abscissae_tags: Tags of the nEnv abscissa fields, in matrix order
        growth_coef_tag: Tag of the growth-rate coefficient field G
        dissipation_tag: Tag of the energy dissipation rate field ε
        density_tag: Tag of the fluid density field ρ
        length_param: Scale factor L matching the units of the growth term
        growth_model: Selected GrowthModel

    Example:
        >>> kernel = AggregationEfficiency(
        ...     ['r_0', 'r_1'], 'g0', 'eps', 'rho',
        ...     length_param=1.0, growth_model='CONSTANT')
        >>> psi = kernel.evaluate([1.0, 3.0], 2.0, 1.0, 1.0)
        >>> float(psi[kernel.pair_index(0, 1)])  # 0.125 / 1.125
        0.1111111111111111
    """

    def __init__(
        self,
        abscissae_tags: Sequence[str],
        growth_coef_tag: str,
        dissipation_tag: str,
        density_tag: str,
        length_param: float,
        growth_model: Union[str, GrowthModel],
        result_tags: Optional[Sequence[str]] = None,
        dtype: tf.DType = DEFAULT_DTYPE
    ):
        """Initialize the kernel.

        Args:
            abscissae_tags: Ordered tags of the size-class fields (at least one)
            growth_coef_tag: Tag of the growth-rate coefficient field
            dissipation_tag: Tag of the energy dissipation rate field
            density_tag: Tag of the density field
            length_param: Finite real L; its sign is not restricted
            growth_model: BULK_DIFFUSION, MONOSURFACE, CONSTANT or KINETIC
            result_tags: nEnv² output tags (default: aggregation_efficiency_i_j)
            dtype: Floating dtype inputs are cast to (default: float64)

        Raises:
            ConfigurationError: On an empty abscissa list, unknown growth
                model, non-finite length_param or wrong number of result tags
        """
        self.abscissae_tags: Tuple[str, ...] = tuple(abscissae_tags)
        if not self.abscissae_tags:
            raise ConfigurationError("At least one abscissa tag is required")
        n_env = len(self.abscissae_tags)

        if result_tags is None:
            result_tags = default_result_tags(n_env)
        elif len(result_tags) != n_env * n_env:
            raise ConfigurationError(
                f"Expected {n_env * n_env} result tags for {n_env} abscissae, "
                f"got {len(result_tags)}"
            )

        if isinstance(length_param, bool):
            raise ConfigurationError(
                f"length_param must be a real number, got {length_param!r}"
            )
        try:
            length_param = float(length_param)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"length_param must be a real number, got {length_param!r}"
            ) from None
        if not math.isfinite(length_param):
            raise ConfigurationError(f"length_param must be finite, got {length_param}")

        super().__init__(result_tags, dtype)

        self.growth_coef_tag = growth_coef_tag
        self.dissipation_tag = dissipation_tag
        self.density_tag = density_tag
        self.length_param = length_param
        self.growth_model = parse_growth_model(growth_model)
        self._ratio_fn = get_growth_ratio_function(self.growth_model)

        self.set_gpu_runnable(True)

    @classmethod
    def from_config(
        cls,
        config: Dict[str, Any],
        dtype: tf.DType = DEFAULT_DTYPE
    ) -> "AggregationEfficiency":
        """Build a kernel from a configuration dict or its 'kernel' section.

        Raises:
            ConfigurationError: If a required kernel key is missing
        """
        kernel = config.get('kernel', config)
        required = ['abscissae', 'growth_coef', 'dissipation', 'density',
                    'length_param', 'growth_model']
        missing = [key for key in required if key not in kernel]
        if missing:
            raise ConfigurationError(
                f"Missing kernel settings: {', '.join(missing)}"
            )

        abscissae = kernel['abscissae']
        if isinstance(abscissae, str):
            raise ConfigurationError("kernel.abscissae must be a list of field tags")

        prefix = kernel.get('result_prefix', DEFAULT_RESULT_PREFIX)
        return cls(
            abscissae_tags=abscissae,
            growth_coef_tag=kernel['growth_coef'],
            dissipation_tag=kernel['dissipation'],
            density_tag=kernel['density'],
            length_param=kernel['length_param'],
            growth_model=kernel['growth_model'],
            result_tags=default_result_tags(len(abscissae), prefix),
            dtype=dtype
        )

    @property
    def n_env(self) -> int:
        return len(self.abscissae_tags)

    def pair_index(self, i: int, j: int) -> int:
        """Position of the (i, j) efficiency in the result list."""
        if not (0 <= i < self.n_env and 0 <= j < self.n_env):
            raise IndexError(f"Pair ({i}, {j}) out of range for nEnv={self.n_env}")
        return i * self.n_env + j

    def result_tag(self, i: int, j: int) -> str:
        return self.result_tags[self.pair_index(i, j)]

    def required_inputs(self) -> Tuple[str, ...]:
        return self.abscissae_tags + (
            self.growth_coef_tag,
            self.dissipation_tag,
            self.density_tag
        )

    def bind_fields(self, store: FieldStore) -> BoundFields:
        """Resolve abscissae, G, ε and ρ from the store for one call.

        Raises:
            FieldBindingError: If a required tag is not in the store
            FieldShapeError: If the resolved fields differ in shape
        """
        return self._bind(
            store.field_refs(self.abscissae_tags),
            store.field_ref(self.growth_coef_tag),
            store.field_ref(self.dissipation_tag),
            store.field_ref(self.density_tag)
        )

    def _bind(self, abscissae, g0, eps, rho) -> BoundFields:
        abscissae = [as_field(r, self.dtype) for r in abscissae]
        if len(abscissae) != self.n_env:
            raise FieldShapeError(
                f"Expected {self.n_env} abscissa fields, got {len(abscissae)}"
            )
        g0 = as_field(g0, self.dtype)
        eps = as_field(eps, self.dtype)
        rho = as_field(rho, self.dtype)

        check_same_shape(abscissae + [g0, eps, rho], list(self.required_inputs()))
        return BoundFields(tuple(abscissae), g0, eps, rho)

    def _efficiency_stack(self, bound: BoundFields) -> tf.Tensor:
        r = tf.stack(bound.abscissae)
        ri = tf.expand_dims(r, axis=1)
        rj = tf.expand_dims(r, axis=0)
        l_tensor = tf.constant(self.length_param, dtype=self.dtype)
        m1 = self._ratio_fn(ri, rj, bound.growth_coef, bound.dissipation,
                            bound.density, l_tensor)
        return efficiency_from_ratio(m1)

    def evaluate_bound(self, bound: BoundFields) -> List[tf.Tensor]:
        stack = self._efficiency_stack(bound)
        flat = tf.reshape(stack, tf.concat([[self.n_env * self.n_env], tf.shape(stack)[2:]], axis=0))
        return tf.unstack(flat, num=self.n_env * self.n_env, axis=0)

    def evaluate(self, abscissae, g0, eps, rho) -> List[tf.Tensor]:
        """Compute the nEnv² efficiency fields.

        Args:
            abscissae: nEnv abscissa fields, same order as abscissae_tags
            g0: Growth-rate coefficient field
            eps: Energy dissipation rate field
            rho: Density field

        Returns:
            List of efficiency fields, entry i * nEnv + j for pair (i, j)

        Raises:
            FieldShapeError: On a wrong abscissa count or mismatched shapes
        """
        return self.evaluate_bound(self._bind(abscissae, g0, eps, rho))

    def evaluate_matrix(self, abscissae, g0, eps, rho) -> tf.Tensor:
        """Same values as evaluate(), stacked to shape (nEnv, nEnv, *field_shape)."""
        return self._efficiency_stack(self._bind(abscissae, g0, eps, rho))

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"n_env={self.n_env}, "
            f"growth_model='{self.growth_model.value}', "
            f"length_param={self.length_param})"
        )


__all__ = [
    'AggregationEfficiency',
    'BoundFields',
    'efficiency_tag',
    'default_result_tags',
    'DEFAULT_RESULT_PREFIX'
]
