"""ResultManager saving and loading."""

from __future__ import annotations

import os

import numpy as np
import pytest

from agg_pbm.core.utils import ResultManager


def test_creates_timestamped_directories(tmp_path):
    rm = ResultManager("aggregation", "test_case", base_dir=str(tmp_path), timestamp="20260101_000000")
    assert rm.save_dir == os.path.join(str(tmp_path), "aggregation", "test_case", "20260101_000000")
    assert os.path.isdir(os.path.join(rm.save_dir, "plots"))
    assert "test_case" in repr(rm)
    assert "20260101_000000" in str(rm)


def test_create_dir_false_does_not_touch_disk(tmp_path):
    rm = ResultManager("aggregation", "lazy", base_dir=str(tmp_path), create_dir=False)
    assert not os.path.exists(rm.save_dir)


def test_efficiencies_round_trip(tmp_path):
    rm = ResultManager("aggregation", "test_case", base_dir=str(tmp_path))
    matrix = np.random.default_rng(0).uniform(0.0, 0.9, (2, 2, 5))
    abscissae = np.ones((2, 5))

    rm.save_efficiencies(matrix, abscissae, reference=matrix, result_tags=["a", "b", "c", "d"])
    loaded = rm.load_efficiencies()

    np.testing.assert_array_equal(loaded["efficiencies"], matrix)
    np.testing.assert_array_equal(loaded["abscissae"], abscissae)
    np.testing.assert_array_equal(loaded["reference"], matrix)
    assert list(loaded["result_tags"]) == ["a", "b", "c", "d"]


def test_efficiencies_without_optional_arrays(tmp_path):
    rm = ResultManager("aggregation", "test_case", base_dir=str(tmp_path))
    rm.save_efficiencies(np.zeros((1, 1)), np.ones((1,)))
    assert set(rm.load_efficiencies()) == {"efficiencies", "abscissae"}


def test_metadata_round_trip_with_numpy_values(tmp_path):
    rm = ResultManager("aggregation", "test_case", base_dir=str(tmp_path))
    config = {"kernel": {"growth_model": "KINETIC"}, "fields": {"r_0": np.array([1.0, 2.0])}}
    rm.save_metadata(config, {"max_abs_error": np.float64(0.0)})

    metadata = rm.load_metadata()
    assert metadata["problem_type"] == "aggregation"
    assert metadata["config"]["fields"]["r_0"] == [1.0, 2.0]
    assert metadata["metrics"]["max_abs_error"] == 0.0


def test_missing_files_raise(tmp_path):
    rm = ResultManager("aggregation", "empty", base_dir=str(tmp_path))
    with pytest.raises(FileNotFoundError):
        rm.load_efficiencies()
    with pytest.raises(FileNotFoundError):
        rm.load_metadata()


def test_listing_files_and_runs(tmp_path):
    base = str(tmp_path)
    for ts in ("20260101_000000", "20260102_000000"):
        ResultManager("aggregation", "case", base_dir=base, timestamp=ts)
    rm = ResultManager("aggregation", "case", base_dir=base, timestamp="20260103_000000")
    rm.save_metadata({})

    assert rm.list_saved_files() == ["metadata.json"]
    assert rm.get_plot_path("x.png").endswith(os.path.join("plots", "x.png"))
    assert ResultManager.list_all_runs("aggregation", "case", base_dir=base) == [
        "20260103_000000", "20260102_000000", "20260101_000000"
    ]
    assert ResultManager.list_all_runs("aggregation", "none", base_dir=base) == []
