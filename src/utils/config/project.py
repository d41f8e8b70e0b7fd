"""Project configuration utilities.

Loads ``project_config.yaml`` from the repository root on top of the
defaults below. Sections are merged one level deep so a user file only needs
the keys it overrides.
"""

import copy
from typing import Any, Dict

import yaml

from .paths import get_repo_root


DEFAULT_CONFIG = {
    "mlflow": {
        "mode": "local",
        "project_prefix": "/Shared/Microbench",
    },
    "benchmarks": {
        "repeats": 5,
        "warmup": 1,
        "thread_counts": [1, 2, 4],
        "worker_counts": [1, 2, 4],
    },
    "paths": {
        "data": "data",
        "figures": "figures",
    },
}


def load_project_config(config_name: str = "project_config.yaml") -> Dict[str, Any]:
    """Load project configuration from YAML.

    Parameters
    ----------
    config_name : str
        Name of the config file in repo root.

    Returns
    -------
    dict
        Parsed configuration combined with defaults.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    config_path = get_repo_root() / config_name
    if config_path.exists():
        with open(config_path, "r") as f:
            user_config = yaml.safe_load(f) or {}
        for section, values in user_config.items():
            if isinstance(values, dict) and isinstance(config.get(section), dict):
                config[section].update(values)
            else:
                config[section] = values

    return config


def get_config_section(section: str) -> Dict[str, Any]:
    """Get a specific section from project config.

    Parameters
    ----------
    section : str
        Section name (e.g., "mlflow", "benchmarks").

    Returns
    -------
    dict
        Section contents, or empty dict if not found.
    """
    return load_project_config().get(section, {})
