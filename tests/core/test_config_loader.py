"""Configuration loading and validation."""

from __future__ import annotations

import pytest

from agg_pbm.core.utils import (
    ConfigurationError,
    get_config_value,
    get_default_aggregation_config,
    load_aggregation_config,
    load_config,
    merge_configs,
    save_config,
    validate_aggregation_config,
    validate_config,
)


def test_save_and_load_round_trip(tmp_path):
    path = tmp_path / "cfg" / "run.yaml"
    config = get_default_aggregation_config()
    save_config(config, str(path))
    assert load_config(str(path)) == config


def test_save_config_refuses_overwrite(tmp_path):
    path = tmp_path / "run.yaml"
    save_config({"problem_type": "aggregation", "case_name": "x"}, str(path))
    with pytest.raises(FileExistsError):
        save_config({"problem_type": "aggregation", "case_name": "y"}, str(path))
    save_config({"problem_type": "aggregation", "case_name": "y"}, str(path), overwrite=True)
    assert load_config(str(path))["case_name"] == "y"


def test_load_config_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.yaml"))

    empty = tmp_path / "empty.yaml"
    empty.write_text("")
    with pytest.raises(ConfigurationError, match="Empty"):
        load_config(str(empty))

    broken = tmp_path / "broken.yaml"
    broken.write_text("kernel: [unclosed\n")
    with pytest.raises(ConfigurationError, match="parse"):
        load_config(str(broken))

    partial = tmp_path / "partial.yaml"
    partial.write_text("problem_type: aggregation\n")
    with pytest.raises(ConfigurationError, match="case_name"):
        load_config(str(partial))


def test_validate_config_nested_fields():
    config = {"kernel": {"length_param": 1.0}}
    validate_config(config, ["kernel.length_param"])
    with pytest.raises(ConfigurationError, match="kernel.growth_model"):
        validate_config(config, ["kernel.growth_model"])


def test_get_config_value_with_default():
    config = {"kernel": {"growth_model": "KINETIC"}}
    assert get_config_value(config, "kernel.growth_model") == "KINETIC"
    assert get_config_value(config, "kernel.result_prefix", default="eff") == "eff"
    assert get_config_value(config, "missing", default=3) == 3


def test_merge_configs_is_deep_and_non_mutating():
    base = get_default_aggregation_config()
    merged = merge_configs(base, {"kernel": {"length_param": 2.5}})
    assert merged["kernel"]["length_param"] == 2.5
    assert merged["kernel"]["growth_model"] == "CONSTANT"
    assert base["kernel"]["length_param"] == 1.0


def test_default_config_is_valid():
    validate_aggregation_config(get_default_aggregation_config())


@pytest.mark.parametrize(
    "override, message",
    [
        ({"problem_type": "breakage"}, "problem_type"),
        ({"kernel": {"growth_model": "SURFACE"}}, "Unsupported growth model"),
        ({"kernel": {"length_param": float("nan")}}, "finite"),
        ({"kernel": {"length_param": "1.0"}}, "real number"),
        ({"kernel": {"abscissae": []}}, "non-empty"),
        ({"kernel": {"density": "rho_liquid"}}, "rho_liquid"),
    ],
)
def test_validate_aggregation_config_rejects(override, message):
    config = merge_configs(get_default_aggregation_config(), override)
    with pytest.raises(ConfigurationError, match=message):
        validate_aggregation_config(config)


def test_load_aggregation_config_appends_suffix(tmp_path):
    save_config(get_default_aggregation_config(), str(tmp_path / "mine_config.yaml"))
    config = load_aggregation_config("mine", config_dir=str(tmp_path))
    assert config["kernel"]["abscissae"] == ["r_0", "r_1"]


def test_load_aggregation_config_requires_kernel_keys(tmp_path):
    config = get_default_aggregation_config()
    del config["kernel"]["density"]
    save_config(config, str(tmp_path / "bad_config.yaml"))
    with pytest.raises(ConfigurationError, match="kernel.density"):
        load_aggregation_config("bad", config_dir=str(tmp_path))


def test_utils_exports_only_defined_names():
    import agg_pbm.core.utils as utils

    for name in utils.__all__:
        assert hasattr(utils, name), name
    assert "load_yaml" not in utils.__all__
    assert "configure_gpu_memory_growth" not in utils.__all__
