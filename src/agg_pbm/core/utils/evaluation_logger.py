"""Evaluation logger utilities for AGG-PBM."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np

from .helper_functions import field_statistics


@dataclass
class EvaluationLogger:
    """Collects efficiency statistics per kernel evaluation and renders plots."""

    labels: List[str] = field(default_factory=list)
    records: Dict[str, List[float]] = field(
        default_factory=lambda: {
            "n_env": [],
            "n_points": [],
            "min": [],
            "mean": [],
            "max": [],
            "zero_fraction": [],
        }
    )
    growth_models: List[str] = field(default_factory=list)

    def log_evaluation(self, label: str, growth_model: str, matrix) -> Dict[str, float]:
        """Record one evaluation given its ``(nEnv, nEnv, ...)`` efficiency stack."""
        arr = np.asarray(matrix, dtype=np.float64)
        n_env = arr.shape[0] if arr.ndim >= 2 else 1
        n_points = int(np.prod(arr.shape[2:])) if arr.ndim > 2 else 1
        stats = field_statistics(arr)

        self.labels.append(label)
        self.growth_models.append(str(growth_model))
        self.records["n_env"].append(n_env)
        self.records["n_points"].append(n_points)
        for key in ("min", "mean", "max", "zero_fraction"):
            self.records[key].append(stats[key])
        return stats

    def summary_line(self, index: int = -1) -> str:
        return (
            f"{self.labels[index]} [{self.growth_models[index]}] "
            f"nEnv={self.records['n_env'][index]} "
            f"points={self.records['n_points'][index]} "
            f"eff min/mean/max={self.records['min'][index]:.4e}/"
            f"{self.records['mean'][index]:.4e}/{self.records['max'][index]:.4e} "
            f"zeroed={self.records['zero_fraction'][index]:.1%}"
        )

    def plot_efficiency_matrix(
        self,
        matrix,
        labels: Optional[Sequence[str]] = None,
        title: str = "Aggregation efficiency",
    ) -> plt.Figure:
        """Heatmap of the point-averaged efficiency for each (i, j) pair."""
        arr = np.asarray(matrix, dtype=np.float64)
        n_env = arr.shape[0]
        mean_eff = arr.reshape(n_env, n_env, -1).mean(axis=-1)
        if labels is None:
            labels = [str(k) for k in range(n_env)]

        fig, ax = plt.subplots(figsize=(6, 5))
        im = ax.imshow(mean_eff, cmap="viridis", vmin=0.0, vmax=max(float(mean_eff.max()), 1e-12))
        ax.set_xticks(range(n_env))
        ax.set_yticks(range(n_env))
        ax.set_xticklabels(labels, rotation=45, ha="right")
        ax.set_yticklabels(labels)
        ax.set_xlabel("Abscissa j")
        ax.set_ylabel("Abscissa i")
        ax.set_title(title)
        for i in range(n_env):
            for j in range(n_env):
                ax.text(j, i, f"{mean_eff[i, j]:.3f}", ha="center", va="center", color="w", fontsize=8)
        fig.colorbar(im, ax=ax, label="mean efficiency")
        fig.tight_layout()
        return fig

    def to_dict(self) -> Dict[str, List]:
        return {"labels": self.labels, "growth_models": self.growth_models, **self.records}
