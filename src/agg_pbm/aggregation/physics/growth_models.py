"""
Growth-rate closures available to the aggregation efficiency kernel.

The selector is resolved once when a kernel is built. Unknown names are
rejected with a ConfigurationError instead of producing empty output.
"""

from enum import Enum
from typing import Union

from agg_pbm.core.utils.config_loader import ConfigurationError


class GrowthModel(str, Enum):
    """Growth-rate model used in the efficiency closure.

    BULK_DIFFUSION and MONOSURFACE divide by the larger abscissa of the
    pair; CONSTANT and KINETIC do not.
    """

    BULK_DIFFUSION = "BULK_DIFFUSION"
    MONOSURFACE = "MONOSURFACE"
    CONSTANT = "CONSTANT"
    KINETIC = "KINETIC"

    @property
    def uses_size_dependent_denominator(self) -> bool:
        return self in (GrowthModel.BULK_DIFFUSION, GrowthModel.MONOSURFACE)

    def __str__(self) -> str:
        return self.value


def parse_growth_model(value: Union[str, GrowthModel, None]) -> GrowthModel:
    """Resolve a growth model name.

    Args:
        value: Enum member or name, case-insensitive ('kinetic', ' CONSTANT ')

    Returns:
        Matching GrowthModel member

    Raises:
        ConfigurationError: If the value names no supported model

    Example:
        >>> parse_growth_model('bulk_diffusion')
        <GrowthModel.BULK_DIFFUSION: 'BULK_DIFFUSION'>
    """
    if isinstance(value, GrowthModel):
        return value

    name = str(value).strip().upper() if value is not None else ""
    try:
        return GrowthModel(name)
    except ValueError:
        allowed = ", ".join(model.value for model in GrowthModel)
        raise ConfigurationError(
            f"Unsupported growth model: {value!r}. Must be one of: {allowed}"
        ) from None


__all__ = ['GrowthModel', 'parse_growth_model']
