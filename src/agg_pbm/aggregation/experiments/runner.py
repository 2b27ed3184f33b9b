"""High-level runner for aggregation efficiency experiments.

The primary entry points are :func:`run_case`, which evaluates the kernel
on one of the preset benchmark cases and checks it against the NumPy
reference solution, and :func:`run_from_config`, which drives the kernel
from a YAML configuration through a :class:`FieldStore` the way a host
simulation would.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from time import perf_counter
from typing import Any, Dict, Optional, Tuple, Union

import matplotlib.pyplot as plt
import numpy as np
from tqdm.auto import tqdm

from agg_pbm.aggregation.models import AggregationEfficiency
from agg_pbm.aggregation.physics import GrowthModel, validate_efficiency
from agg_pbm.aggregation.solutions import get_scenario, reference_efficiency_matrix
from agg_pbm.core.fields import FieldStore
from agg_pbm.core.utils import (
    EvaluationLogger,
    ResultManager,
    get_config_value,
    get_default_aggregation_config,
    load_config,
    log_uniform_field,
    merge_configs,
    set_random_seed,
    validate_aggregation_config,
)


# ---------------------------------------------------------------------------
# Configuration helpers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CaseConfig:
    """Configuration describing an aggregation efficiency benchmark case."""

    case_type: str
    growth_models: Tuple[GrowthModel, ...]
    length_param: float
    n_env: int
    n_points: int
    scenario: Optional[str] = None
    r_range: Tuple[float, float] = (1e-6, 1e-4)
    g0_range: Tuple[float, float] = (1e-9, 1e-7)
    eps_range: Tuple[float, float] = (1e-3, 1.0)
    rho_range: Tuple[float, float] = (800.0, 1200.0)
    unphysical_fraction: float = 0.0
    negative_growth_fraction: float = 0.0


def _build_case_config(case_type: str) -> CaseConfig:
    case = case_type.lower()
    if case in {"scenario1", "scenario2", "scenario3", "scenario4"}:
        scenario = get_scenario(case)
        return CaseConfig(
            case_type=case,
            growth_models=(scenario.growth_model,),
            length_param=scenario.length_param,
            n_env=len(scenario.abscissae),
            n_points=1,
            scenario=case,
        )
    if case == "sweep":
        return CaseConfig(
            case_type="sweep",
            growth_models=tuple(GrowthModel),
            length_param=1.0,
            n_env=4,
            n_points=256,
            unphysical_fraction=0.05,
            negative_growth_fraction=0.05,
        )
    raise ValueError(f"Unsupported case_type={case_type!r}")


def _build_fields(config: CaseConfig, seed: int) -> Dict[str, np.ndarray]:
    """Input fields for a case, each of shape (n_points,)."""
    shape = (config.n_points,)
    if config.scenario is not None:
        scenario = get_scenario(config.scenario)
        return {
            "abscissae": np.array([np.full(shape, r) for r in scenario.abscissae]),
            "g0": np.full(shape, scenario.g0),
            "eps": np.full(shape, scenario.eps),
            "rho": np.full(shape, scenario.rho),
        }

    rng = np.random.default_rng(seed)
    abscissae = np.sort(
        np.array([log_uniform_field(rng, *config.r_range, shape) for _ in range(config.n_env)]),
        axis=0,
    )
    g0 = log_uniform_field(rng, *config.g0_range, shape)
    eps = log_uniform_field(rng, *config.eps_range, shape)
    rho = rng.uniform(*config.rho_range, shape)

    # Exercise the ρ <= 0 / ε <= 0 guard and the negative-ratio clamp
    n_bad = int(round(config.unphysical_fraction * config.n_points))
    if n_bad:
        idx = rng.choice(config.n_points, size=2 * n_bad, replace=False)
        rho[idx[:n_bad]] = 0.0
        eps[idx[n_bad:]] = -eps[idx[n_bad:]]
    n_neg = int(round(config.negative_growth_fraction * config.n_points))
    if n_neg:
        idx = rng.choice(config.n_points, size=n_neg, replace=False)
        g0[idx] = -g0[idx]

    return {"abscissae": abscissae, "g0": g0, "eps": eps, "rho": rho}


def _tags(n_env: int) -> Tuple[Tuple[str, ...], str, str, str]:
    return tuple(f"r_{k}" for k in range(n_env)), "g0", "eps", "rho"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def run_case(
    case_type: str = "scenario1",
    *,
    n_points: Optional[int] = None,
    seed: int = 42,
    make_plots: bool = True,
    output_dir: Optional[Path] = None,
    verbose: bool = True,
) -> Dict[str, object]:
    """Evaluate the efficiency kernel for a benchmark case.

    Parameters
    ----------
    case_type:
        Identifier for the benchmark (``scenario1`` – ``scenario4`` or ``sweep``).
    n_points:
        Override for the number of spatial points per field.
    seed:
        Random seed used for the sweep fields and TensorFlow.
    make_plots:
        Whether to assemble Matplotlib heatmaps of the efficiency matrices.
    output_dir:
        Optional directory for saving the generated figures.
    verbose:
        Control progress logging.

    Returns
    -------
    dict
        Dictionary containing efficiencies and reference values per growth
        model, error and validation summaries, the evaluation history and
        optional figure handles.
    """

    config = _build_case_config(case_type)
    if n_points is not None:
        if n_points < 1:
            raise ValueError(f"n_points must be at least 1, got {n_points}")
        config = replace(config, n_points=n_points)

    set_random_seed(seed)
    fields = _build_fields(config, seed)
    abscissae_tags, g0_tag, eps_tag, rho_tag = _tags(config.n_env)

    logger = EvaluationLogger()
    efficiencies: Dict[str, np.ndarray] = {}
    references: Dict[str, np.ndarray] = {}
    max_abs_error: Dict[str, float] = {}
    validation: Dict[str, dict] = {}
    figures: Dict[str, plt.Figure] = {}

    start = perf_counter()
    progress = tqdm(config.growth_models, desc="Growth models", disable=not verbose)
    for model in progress:
        kernel = AggregationEfficiency(
            abscissae_tags, g0_tag, eps_tag, rho_tag,
            length_param=config.length_param,
            growth_model=model,
        )
        matrix = kernel.evaluate_matrix(
            list(fields["abscissae"]), fields["g0"], fields["eps"], fields["rho"]
        ).numpy()
        reference = reference_efficiency_matrix(
            list(fields["abscissae"]), fields["g0"], fields["eps"], fields["rho"],
            config.length_param, model,
        )

        key = model.value
        efficiencies[key] = matrix
        references[key] = reference
        max_abs_error[key] = float(np.max(np.abs(matrix - reference)))
        validation[key] = validate_efficiency(matrix)
        logger.log_evaluation(config.case_type, key, matrix)
        if verbose:
            progress.write(logger.summary_line())

        if make_plots:
            figures[key] = logger.plot_efficiency_matrix(
                matrix,
                labels=list(abscissae_tags),
                title=f"{config.case_type}: {key}",
            )
    duration = perf_counter() - start

    if make_plots and output_dir is not None:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        for key, fig in figures.items():
            fig.savefig(output_dir / f"{config.case_type}_{key.lower()}.png", dpi=200)

    return {
        "config": config,
        "fields": fields,
        "efficiencies": efficiencies,
        "reference": references,
        "max_abs_error": max_abs_error,
        "validation": validation,
        "history": logger.to_dict(),
        "figures": figures,
        "duration_sec": duration,
    }


def run_from_config(
    config: Union[str, Path, Dict[str, Any]],
    *,
    make_plots: Optional[bool] = None,
    base_dir: str = "results",
    verbose: bool = True,
) -> Dict[str, object]:
    """Evaluate the kernel on fields and settings taken from a configuration.

    Parameters
    ----------
    config:
        Path to a YAML configuration or an already loaded dictionary.
        Missing sections are filled from the default aggregation config.
    make_plots:
        Override for ``output.save_plots``.
    base_dir:
        Root directory used when ``output.save_results`` is enabled.
    verbose:
        Control progress logging.

    Returns
    -------
    dict
        Kernel, field store, per-tag results, the stacked matrix, the
        reference matrix and, when saved, the result directory.
    """
    if isinstance(config, (str, Path)):
        config = load_config(str(config))
    defaults = get_default_aggregation_config()
    # Field values are taken as given, never merged with the default fields
    fields = config.get("fields") or defaults.pop("fields")
    config = merge_configs(defaults, {k: v for k, v in config.items() if k != "fields"})
    config["fields"] = dict(fields)
    validate_aggregation_config(config)

    kernel = AggregationEfficiency.from_config(config)

    store = FieldStore(dtype=kernel.dtype)
    for tag, values in config["fields"].items():
        store.register(tag, values)

    results = kernel.evaluate_fields(store, publish=True)
    n_env = kernel.n_env
    matrix = np.stack([results[tag].numpy() for tag in kernel.result_tags])
    matrix = matrix.reshape((n_env, n_env) + matrix.shape[1:])

    abscissae = [np.asarray(config["fields"][tag], dtype=np.float64) for tag in kernel.abscissae_tags]
    fields = config["fields"]
    reference = reference_efficiency_matrix(
        abscissae,
        fields[kernel.growth_coef_tag],
        fields[kernel.dissipation_tag],
        fields[kernel.density_tag],
        kernel.length_param,
        kernel.growth_model,
    )
    max_abs_error = float(np.max(np.abs(matrix - reference)))

    logger = EvaluationLogger()
    logger.log_evaluation(config["case_name"], kernel.growth_model.value, matrix)
    if verbose:
        print(logger.summary_line())

    save_results = bool(get_config_value(config, "output.save_results", False))
    if make_plots is None:
        make_plots = bool(get_config_value(config, "output.save_plots", False))

    figures: Dict[str, plt.Figure] = {}
    if make_plots:
        figures["efficiency_matrix"] = logger.plot_efficiency_matrix(
            matrix, labels=list(kernel.abscissae_tags), title=config["case_name"]
        )

    save_dir: Optional[str] = None
    if save_results:
        rm = ResultManager("aggregation", config["case_name"], base_dir=base_dir)
        rm.save_efficiencies(
            matrix,
            np.stack(np.broadcast_arrays(*abscissae)),
            reference=reference,
            result_tags=kernel.result_tags,
        )
        rm.save_metadata(config, {"max_abs_error": max_abs_error, **logger.to_dict()})
        plot_format = get_config_value(config, "output.plot_format", "png")
        plot_dpi = get_config_value(config, "output.plot_dpi", 200)
        for name, fig in figures.items():
            fig.savefig(rm.get_plot_path(f"{name}.{plot_format}"), dpi=plot_dpi)
        save_dir = rm.save_dir
        if verbose:
            print(f"Results saved to: {save_dir}")

    return {
        "config": config,
        "kernel": kernel,
        "store": store,
        "results": results,
        "efficiencies": matrix,
        "reference": reference,
        "max_abs_error": max_abs_error,
        "validation": validate_efficiency(matrix),
        "figures": figures,
        "save_dir": save_dir,
    }


__all__ = ["run_case", "run_from_config", "CaseConfig"]
