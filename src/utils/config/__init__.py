"""Configuration utilities.

Repository paths, the YAML project config and cleanup of generated files.
"""

from .paths import get_repo_root, get_data_dir, get_figures_dir
from .project import load_project_config, get_config_section
from .clean import clean_all

__all__ = [
    "get_repo_root",
    "get_data_dir",
    "get_figures_dir",
    "load_project_config",
    "get_config_section",
    "clean_all",
]
