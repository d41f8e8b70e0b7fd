"""Utility modules for project management and visualization.

Submodules:
- plotting: Scientific plot styling, formatters, palettes
- runners: Script discovery and execution
- config: Project configuration and cleanup
- mlflow: MLflow run orchestration and logging
- hydra: Hydra callbacks

Import examples:
    from utils import plotting     # Auto-applies scientific styles
    from utils import runners      # Script execution
    from utils import mlflow       # MLflow utilities
    from utils.config import get_repo_root, load_project_config
"""

import warnings

# Suppress MLflow FutureWarning about filesystem backend deprecation
warnings.filterwarnings("ignore", category=FutureWarning, module="mlflow")

from . import runners, config  # noqa: E402

# Re-export common config functions for convenience
from .config import get_repo_root  # noqa: E402

__all__ = [
    "runners",
    "config",
    "get_repo_root",
]
