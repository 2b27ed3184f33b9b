"""
Result Manager for AGG-PBM.

Handles timestamped saving and loading of aggregation efficiency results:
efficiency matrices, abscissae, plots and run metadata.
"""

import os
import json
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

import numpy as np


def _to_builtin(value: Any) -> Any:
    """Convert NumPy scalars/arrays nested in metadata to JSON types."""
    if isinstance(value, dict):
        return {str(k): _to_builtin(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_builtin(v) for v in value]
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    return value


class ResultManager:
    """Manages timestamped saving and loading of efficiency results.

    Directory structure:
        results/{problem_type}/{case_name}/{timestamp}/
            ├── efficiencies.npz
            ├── metadata.json
            └── plots/
                └── efficiency_matrix.png

    Attributes:
        base_dir: Root directory for all results
        problem_type: Type of problem (e.g., 'aggregation')
        case_name: Name of the specific case (e.g., 'scenario1_constant')
        timestamp: Current timestamp for this run
        save_dir: Full path to the timestamped save directory

    Example:
        >>> rm = ResultManager(problem_type='aggregation', case_name='scenario1')
        >>> rm.save_efficiencies(matrix, abscissae)
        >>> rm.save_metadata(config, {'max_abs_error': 0.0})
    """

    def __init__(
        self,
        problem_type: str,
        case_name: str,
        base_dir: str = "results",
        timestamp: Optional[str] = None,
        create_dir: bool = True
    ):
        """Initialize the ResultManager.

        Args:
            problem_type: Type of problem (e.g., 'aggregation')
            case_name: Name of the case (e.g., 'scenario1_constant')
            base_dir: Base directory for all results (default: 'results')
            timestamp: Custom timestamp string (default: auto-generated YYYYMMDD_HHMMSS)
            create_dir: Whether to create the directory immediately (default: True)
        """
        self.base_dir = base_dir
        self.problem_type = problem_type
        self.case_name = case_name

        if timestamp is None:
            self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        else:
            self.timestamp = timestamp

        self.save_dir = os.path.join(
            self.base_dir,
            self.problem_type,
            self.case_name,
            self.timestamp
        )

        if create_dir:
            self._create_directories()

    def _create_directories(self) -> None:
        os.makedirs(self.save_dir, exist_ok=True)
        os.makedirs(os.path.join(self.save_dir, "plots"), exist_ok=True)

    def save_efficiencies(
        self,
        efficiencies: np.ndarray,
        abscissae: np.ndarray,
        reference: Optional[np.ndarray] = None,
        result_tags: Optional[Sequence[str]] = None,
        filename: str = "efficiencies.npz"
    ) -> str:
        """Save an efficiency matrix and the abscissae it was computed from.

        Args:
            efficiencies: Efficiency stack, shape (nEnv, nEnv, *field_shape)
            abscissae: Abscissa fields, shape (nEnv, *field_shape)
            reference: Reference solution with the shape of efficiencies, optional
            result_tags: Output field names in i * nEnv + j order, optional
            filename: Name of file to save (default: 'efficiencies.npz')

        Returns:
            Full path to saved file
        """
        filepath = os.path.join(self.save_dir, filename)

        save_dict = {
            'efficiencies': np.asarray(efficiencies),
            'abscissae': np.asarray(abscissae)
        }
        if reference is not None:
            save_dict['reference'] = np.asarray(reference)
        if result_tags is not None:
            save_dict['result_tags'] = np.asarray(list(result_tags), dtype=str)

        np.savez(filepath, **save_dict)
        return filepath

    def load_efficiencies(
        self,
        filename: str = "efficiencies.npz"
    ) -> Dict[str, np.ndarray]:
        """Load a saved efficiency matrix.

        Returns:
            Dictionary with keys 'efficiencies', 'abscissae' and, when saved,
            'reference' and 'result_tags'

        Raises:
            FileNotFoundError: If the efficiency file doesn't exist
        """
        filepath = os.path.join(self.save_dir, filename)
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"Efficiencies not found: {filepath}")

        with np.load(filepath) as data:
            result = {key: data[key] for key in data.files}
        return result

    def save_metadata(
        self,
        config: Dict[str, Any],
        metrics: Optional[Dict[str, float]] = None,
        filename: str = "metadata.json"
    ) -> str:
        """Save run metadata and configuration.

        Args:
            config: Configuration dictionary (kernel settings, field values, ...)
            metrics: Final metrics dictionary (errors, statistics), optional
            filename: Name of file to save (default: 'metadata.json')

        Returns:
            Full path to saved file
        """
        filepath = os.path.join(self.save_dir, filename)

        metadata = {
            'timestamp': self.timestamp,
            'problem_type': self.problem_type,
            'case_name': self.case_name,
            'config': _to_builtin(config)
        }

        if metrics is not None:
            metadata['metrics'] = _to_builtin(metrics)

        with open(filepath, 'w') as f:
            json.dump(metadata, f, indent=2)

        return filepath

    def load_metadata(
        self,
        filename: str = "metadata.json"
    ) -> Dict[str, Any]:
        """Load run metadata.

        Raises:
            FileNotFoundError: If metadata file doesn't exist
        """
        filepath = os.path.join(self.save_dir, filename)
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"Metadata not found: {filepath}")

        with open(filepath, 'r') as f:
            metadata = json.load(f)

        return metadata

    def get_plot_path(self, plot_name: str) -> str:
        """Get the full path for saving a plot."""
        return os.path.join(self.save_dir, "plots", plot_name)

    def list_saved_files(self) -> List[str]:
        """List all files saved in this run's directory (relative paths)."""
        all_files = []
        for root, _, files in os.walk(self.save_dir):
            for file in files:
                full_path = os.path.join(root, file)
                rel_path = os.path.relpath(full_path, self.save_dir)
                all_files.append(rel_path)
        return sorted(all_files)

    @staticmethod
    def list_all_runs(
        problem_type: str,
        case_name: str,
        base_dir: str = "results"
    ) -> List[str]:
        """List all saved runs for a given problem type and case.

        Returns:
            List of timestamp strings, most recent first
        """
        case_dir = os.path.join(base_dir, problem_type, case_name)

        if not os.path.exists(case_dir):
            return []

        timestamps = []
        for item in os.listdir(case_dir):
            item_path = os.path.join(case_dir, item)
            if os.path.isdir(item_path):
                timestamps.append(item)

        return sorted(timestamps, reverse=True)

    def __repr__(self) -> str:
        return (f"ResultManager(problem_type='{self.problem_type}', "
                f"case_name='{self.case_name}', timestamp='{self.timestamp}')")

    def __str__(self) -> str:
        return f"ResultManager for {self.problem_type}/{self.case_name} [{self.timestamp}]"
