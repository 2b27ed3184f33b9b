"""Growth model selector parsing."""

from __future__ import annotations

import pytest

from agg_pbm.aggregation.physics import GrowthModel, parse_growth_model
from agg_pbm.core.utils import ConfigurationError


@pytest.mark.parametrize(
    "name, expected",
    [
        ("BULK_DIFFUSION", GrowthModel.BULK_DIFFUSION),
        ("monosurface", GrowthModel.MONOSURFACE),
        ("  Constant ", GrowthModel.CONSTANT),
        ("KINETIC", GrowthModel.KINETIC),
        (GrowthModel.KINETIC, GrowthModel.KINETIC),
    ],
)
def test_parse_growth_model_accepts_known_names(name, expected):
    assert parse_growth_model(name) is expected


@pytest.mark.parametrize("name", ["DIFFUSION", "", None, "BULK DIFFUSION"])
def test_parse_growth_model_rejects_unknown_names(name):
    with pytest.raises(ConfigurationError, match="Unsupported growth model"):
        parse_growth_model(name)


def test_size_dependent_denominator_flag():
    assert GrowthModel.BULK_DIFFUSION.uses_size_dependent_denominator
    assert GrowthModel.MONOSURFACE.uses_size_dependent_denominator
    assert not GrowthModel.CONSTANT.uses_size_dependent_denominator
    assert not GrowthModel.KINETIC.uses_size_dependent_denominator


def test_bulk_diffusion_and_monosurface_stay_distinct_members():
    assert GrowthModel.BULK_DIFFUSION is not GrowthModel.MONOSURFACE
    assert str(GrowthModel.MONOSURFACE) == "MONOSURFACE"
