"""Smoke tests for the aggregation experiment runner.

These evaluate the preset cases with small fields and a YAML-driven run
to verify the pipeline end to end without numerical errors.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from agg_pbm.aggregation.experiments import run_case, run_from_config
from agg_pbm.core.utils import ConfigurationError, ResultManager, load_config, save_config

REPO_ROOT = Path(__file__).resolve().parents[2]
CONFIG_DIR = REPO_ROOT / "configs" / "aggregation"


@pytest.mark.parametrize("case", ["scenario1", "scenario2", "scenario3", "scenario4"])
def test_scenarios_run_and_match_reference(case):
    result = run_case(case, make_plots=False, verbose=False)

    assert result["config"].case_type == case
    (key,) = result["efficiencies"]
    assert result["max_abs_error"][key] <= 1e-12
    assert result["validation"][key]["valid"]


def test_sweep_covers_every_growth_model():
    result = run_case("sweep", n_points=40, make_plots=True, verbose=False)

    assert set(result["efficiencies"]) == {"BULK_DIFFUSION", "MONOSURFACE", "CONSTANT", "KINETIC"}
    for key, matrix in result["efficiencies"].items():
        assert matrix.shape == (4, 4, 40)
        assert result["max_abs_error"][key] <= 1e-12
        assert result["validation"][key]["valid"], result["validation"][key]["errors"]
        # The sweep injects unphysical points, so some outputs are zeroed
        assert np.any(matrix == 0.0)

    history = result["history"]
    assert history["growth_models"] == ["BULK_DIFFUSION", "MONOSURFACE", "CONSTANT", "KINETIC"]
    assert set(result["figures"]) == set(result["efficiencies"])


def test_run_case_saves_figures(tmp_path):
    run_case("scenario1", make_plots=True, output_dir=tmp_path, verbose=False)
    assert (tmp_path / "scenario1_constant.png").exists()


def test_unknown_case_is_rejected():
    with pytest.raises(ValueError, match="Unsupported case_type"):
        run_case("case1", verbose=False)


@pytest.mark.parametrize("n_points", [0, -3])
def test_empty_fields_are_rejected(n_points):
    with pytest.raises(ValueError, match="n_points"):
        run_case("sweep", n_points=n_points, make_plots=False, verbose=False)


def test_run_from_shipped_config():
    result = run_from_config(
        CONFIG_DIR / "scenario1_constant_config.yaml", verbose=False
    )
    kernel = result["kernel"]
    assert result["efficiencies"].shape == (2, 2)
    assert result["efficiencies"][0, 1] == pytest.approx(1.0 / 9.0)
    assert result["max_abs_error"] <= 1e-12
    assert result["save_dir"] is None
    assert kernel.result_tag(0, 1) in result["store"]


def test_run_from_config_saves_results(tmp_path):
    config_path = tmp_path / "profile.yaml"
    config = load_config(str(CONFIG_DIR / "bulk_diffusion_profile_config.yaml"))
    save_config(config, str(config_path))

    result = run_from_config(config_path, base_dir=str(tmp_path / "results"), verbose=False)

    matrix = result["efficiencies"]
    assert matrix.shape == (3, 3, 5)
    np.testing.assert_array_equal(matrix[..., 3:], 0.0)
    assert np.all(matrix[..., :3] > 0.0)
    assert result["validation"]["valid"]

    rm = ResultManager(
        "aggregation", "bulk_diffusion_profile",
        base_dir=str(tmp_path / "results"),
        timestamp=Path(result["save_dir"]).name, create_dir=False,
    )
    saved = rm.load_efficiencies()
    np.testing.assert_array_equal(saved["efficiencies"], matrix)
    assert list(saved["result_tags"])[0] == "eff_0_0"
    assert "plots/efficiency_matrix.png" in rm.list_saved_files()
    assert rm.load_metadata()["metrics"]["max_abs_error"] <= 1e-12


def test_run_from_config_dict_uses_given_fields_only():
    config = {
        "problem_type": "aggregation",
        "case_name": "dict_run",
        "kernel": {"abscissae": ["a"], "growth_model": "BULK_DIFFUSION"},
        "fields": {"a": 2.0, "g0": 1.0, "eps": 1.0, "rho": 1.0},
    }
    result = run_from_config(config, make_plots=False, verbose=False)

    assert "r_0" not in result["store"]
    assert float(result["efficiencies"][0, 0]) == pytest.approx(0.03125 / 1.03125)


def test_run_from_config_rejects_missing_field_values():
    config = {
        "problem_type": "aggregation",
        "case_name": "broken",
        "kernel": {"abscissae": ["a", "b"]},
        "fields": {"a": 1.0, "g0": 1.0, "eps": 1.0, "rho": 1.0},
    }
    with pytest.raises(ConfigurationError, match="b"):
        run_from_config(config, verbose=False)
