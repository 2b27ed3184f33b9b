"""
Configuration Loader for AGG-PBM.

Handles loading and validation of YAML configuration files for aggregation
efficiency runs. Provides defaults for optional parameters and type checking.
"""

import math
import os
from typing import Dict, Any, Optional, List

import yaml


class ConfigurationError(Exception):
    """Exception raised for configuration errors."""
    pass


def load_config(
    config_path: str,
    validate: bool = True,
    required_fields: Optional[List[str]] = None
) -> Dict[str, Any]:
    """Load and validate a YAML configuration file.

    Args:
        config_path: Path to the YAML configuration file
        validate: Whether to validate required fields (default: True)
        required_fields: List of required field names. If None, uses default set.

    Returns:
        Dictionary containing configuration parameters

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigurationError: If validation fails or YAML is invalid

    Example:
        >>> config = load_config('configs/aggregation/scenario1_constant_config.yaml')
        >>> print(config['problem_type'])
        'aggregation'
        >>> print(config['kernel']['growth_model'])
        'CONSTANT'
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse YAML file: {e}")

    if config is None:
        raise ConfigurationError(f"Empty configuration file: {config_path}")

    if validate:
        if required_fields is None:
            required_fields = ['problem_type', 'case_name']

        validate_config(config, required_fields)

    return config


def validate_config(
    config: Dict[str, Any],
    required_fields: List[str]
) -> None:
    """Validate that required fields are present in configuration.

    Args:
        config: Configuration dictionary to validate
        required_fields: List of required field names (supports nested fields with dots)

    Raises:
        ConfigurationError: If any required field is missing

    Example:
        >>> config = {'problem_type': 'aggregation', 'kernel': {'length_param': 1.0}}
        >>> validate_config(config, ['problem_type', 'kernel.length_param'])
        # Passes validation
        >>> validate_config(config, ['problem_type', 'missing_field'])
        # Raises ConfigurationError
    """
    missing_fields = []

    for field in required_fields:
        if '.' in field:
            parts = field.split('.')
            current = config
            try:
                for part in parts:
                    current = current[part]
            except (KeyError, TypeError):
                missing_fields.append(field)
        else:
            if field not in config:
                missing_fields.append(field)

    if missing_fields:
        raise ConfigurationError(
            f"Missing required fields in configuration: {', '.join(missing_fields)}"
        )


def get_config_value(
    config: Dict[str, Any],
    key: str,
    default: Any = None
) -> Any:
    """Get a configuration value with optional default.

    Supports nested keys with dot notation (e.g., 'kernel.growth_model').

    Example:
        >>> config = {'kernel': {'growth_model': 'KINETIC'}}
        >>> get_config_value(config, 'kernel.growth_model')
        'KINETIC'
        >>> get_config_value(config, 'kernel.result_prefix', default='eff')
        'eff'
    """
    if '.' in key:
        parts = key.split('.')
        current = config
        try:
            for part in parts:
                current = current[part]
            return current
        except (KeyError, TypeError):
            return default
    else:
        return config.get(key, default)


def merge_configs(
    base_config: Dict[str, Any],
    override_config: Dict[str, Any]
) -> Dict[str, Any]:
    """Merge two configurations, with override taking precedence.

    Performs deep merge for nested dictionaries.

    Example:
        >>> base = {'kernel': {'growth_model': 'CONSTANT', 'length_param': 1.0}}
        >>> override = {'kernel': {'length_param': 2.5}}
        >>> merged = merge_configs(base, override)
        >>> merged['kernel']
        {'growth_model': 'CONSTANT', 'length_param': 2.5}
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def save_config(
    config: Dict[str, Any],
    config_path: str,
    overwrite: bool = False
) -> None:
    """Save configuration dictionary to a YAML file.

    Args:
        config: Configuration dictionary to save
        config_path: Path where to save the YAML file
        overwrite: Whether to overwrite existing file (default: False)

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    if os.path.exists(config_path) and not overwrite:
        raise FileExistsError(
            f"Configuration file already exists: {config_path}. "
            "Set overwrite=True to replace it."
        )

    os.makedirs(os.path.dirname(config_path) or '.', exist_ok=True)

    with open(config_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def load_aggregation_config(
    case_name: str,
    config_dir: str = "configs/aggregation"
) -> Dict[str, Any]:
    """Convenience function to load aggregation case configurations.

    Args:
        case_name: Name of the case (e.g., 'scenario1_constant')
        config_dir: Directory containing aggregation configs

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigurationError: If validation fails

    Example:
        >>> config = load_aggregation_config('scenario1_constant')
        >>> # Loads configs/aggregation/scenario1_constant_config.yaml
    """
    if not case_name.endswith('_config'):
        case_name = f"{case_name}_config"
    if not case_name.endswith('.yaml'):
        case_name = f"{case_name}.yaml"

    config_path = os.path.join(config_dir, case_name)

    required_fields = [
        'problem_type',
        'case_name',
        'kernel.growth_model',
        'kernel.length_param',
        'kernel.abscissae',
        'kernel.growth_coef',
        'kernel.dissipation',
        'kernel.density'
    ]

    return load_config(config_path, validate=True, required_fields=required_fields)


def get_default_aggregation_config() -> Dict[str, Any]:
    """Get default configuration template for aggregation efficiency runs.

    Returns:
        Dictionary with default configuration values. The field values
        reproduce the two-class CONSTANT benchmark (efficiency(0,1) = 1/9).
    """
    return {
        'problem_type': 'aggregation',
        'case_name': 'default',

        'kernel': {
            'growth_model': 'CONSTANT',
            'length_param': 1.0,
            'abscissae': ['r_0', 'r_1'],
            'growth_coef': 'g0',
            'dissipation': 'eps',
            'density': 'rho',
            'result_prefix': 'aggregation_efficiency'
        },

        'fields': {
            'r_0': 1.0,
            'r_1': 3.0,
            'g0': 2.0,
            'eps': 1.0,
            'rho': 1.0
        },

        'output': {
            'save_results': False,
            'save_plots': False,
            'plot_format': 'png',
            'plot_dpi': 200
        }
    }


def validate_aggregation_config(config: Dict[str, Any]) -> None:
    """Validate aggregation-specific configuration requirements.

    Checks the kernel section and that every tag the kernel references
    has values in the ``fields`` section.

    Raises:
        ConfigurationError: If configuration values are invalid
    """
    # Local import: physics imports this module for ConfigurationError
    from agg_pbm.aggregation.physics.growth_models import parse_growth_model

    if config.get('problem_type') != 'aggregation':
        raise ConfigurationError(
            f"Expected problem_type='aggregation', got '{config.get('problem_type')}'"
        )

    kernel = config.get('kernel')
    if not isinstance(kernel, dict):
        raise ConfigurationError("Configuration requires a 'kernel' section")

    parse_growth_model(kernel.get('growth_model'))

    length_param = kernel.get('length_param')
    if isinstance(length_param, bool) or not isinstance(length_param, (int, float)):
        raise ConfigurationError(f"length_param must be a real number, got {length_param!r}")
    if not math.isfinite(length_param):
        raise ConfigurationError(f"length_param must be finite, got {length_param}")

    abscissae = kernel.get('abscissae')
    if not isinstance(abscissae, list) or len(abscissae) < 1:
        raise ConfigurationError("kernel.abscissae must be a non-empty list of field tags")

    referenced = list(abscissae) + [
        kernel.get('growth_coef'),
        kernel.get('dissipation'),
        kernel.get('density')
    ]
    fields = config.get('fields', {}) or {}
    missing = [tag for tag in referenced if tag not in fields]
    if missing:
        raise ConfigurationError(
            f"No values given in 'fields' for: {', '.join(map(str, missing))}"
        )


__all__ = [
    'load_config',
    'validate_config',
    'get_config_value',
    'merge_configs',
    'save_config',
    'load_aggregation_config',
    'get_default_aggregation_config',
    'validate_aggregation_config',
    'ConfigurationError'
]
