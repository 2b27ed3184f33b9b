"""Experiment runners for aggregation efficiency.

The :mod:`agg_pbm.aggregation.experiments.runner` module exposes
``run_case`` for the preset benchmark cases and ``run_from_config`` for
YAML-driven runs.
"""

from .runner import CaseConfig, run_case, run_from_config

__all__ = ["CaseConfig", "run_case", "run_from_config"]
