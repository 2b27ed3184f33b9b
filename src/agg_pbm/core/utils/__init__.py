"""
Utility functions for AGG-PBM.

Includes:
- result_manager: Timestamped result saving and loading
- config_loader: YAML configuration management
- helper_functions: General-purpose utilities
- evaluation_logger: Per-evaluation statistics and plots
"""

from .result_manager import ResultManager
from .evaluation_logger import EvaluationLogger

from .config_loader import (
    load_config,
    validate_config,
    get_config_value,
    merge_configs,
    save_config,
    load_aggregation_config,
    get_default_aggregation_config,
    validate_aggregation_config,
    ConfigurationError
)

from .helper_functions import (
    set_random_seed,
    log_uniform_field,
    field_statistics
)

__all__ = [
    'ResultManager',
    'EvaluationLogger',
    'load_config',
    'validate_config',
    'get_config_value',
    'merge_configs',
    'save_config',
    'load_aggregation_config',
    'get_default_aggregation_config',
    'validate_aggregation_config',
    'ConfigurationError',
    'set_random_seed',
    'log_uniform_field',
    'field_statistics'
]
