"""Cleanup of generated benchmark data, figures and caches."""

import shutil
from pathlib import Path
from typing import Iterable, Optional, Tuple

from .paths import get_repo_root


# Generated directories and files, relative to the repo root
GENERATED_DIRS = [
    "data",
    "figures",
    "mlruns",
    "mlflow.db",
    "multirun",
    "outputs",
    "build",
    "dist",
    ".pytest_cache",
    ".ruff_cache",
]

# Recursive glob patterns
GENERATED_PATTERNS = [
    "__pycache__",
    "*.pyc",
    ".DS_Store",
]


def _remove_item(path: Path) -> bool:
    """Remove a file or directory. Returns False if removal failed."""
    try:
        if path.is_dir():
            shutil.rmtree(path)
        else:
            path.unlink()
        return True
    except OSError:
        return False


def clean_directories(
    directories: Optional[Iterable[str]] = None,
    repo_root: Optional[Path] = None,
) -> Tuple[int, int]:
    """Remove generated directories.

    Returns
    -------
    tuple
        (cleaned_count, failed_count)
    """
    repo_root = repo_root or get_repo_root()
    directories = GENERATED_DIRS if directories is None else directories

    cleaned, failed = 0, 0
    for d in directories:
        path = repo_root / d
        if path.exists():
            ok = _remove_item(path)
            cleaned += ok
            failed += not ok
    return cleaned, failed


def clean_patterns(
    patterns: Optional[Iterable[str]] = None,
    repo_root: Optional[Path] = None,
) -> Tuple[int, int]:
    """Remove files/directories matching glob patterns anywhere in the repo.

    Returns
    -------
    tuple
        (cleaned_count, failed_count)
    """
    repo_root = repo_root or get_repo_root()
    patterns = GENERATED_PATTERNS if patterns is None else patterns

    cleaned, failed = 0, 0
    for pattern in patterns:
        for path in list(repo_root.rglob(pattern)):
            if not path.exists():
                continue
            ok = _remove_item(path)
            cleaned += ok
            failed += not ok
    return cleaned, failed


def clean_all(repo_root: Optional[Path] = None) -> Tuple[int, int]:
    """Clean all generated files and caches."""
    print("\nCleaning all generated files and caches...")

    c1, f1 = clean_directories(repo_root=repo_root)
    c2, f2 = clean_patterns(repo_root=repo_root)
    total_cleaned, total_failed = c1 + c2, f1 + f2

    if total_cleaned:
        print(f"  ✓ Cleaned {total_cleaned} items")
    if total_failed:
        print(f"  ✗ Failed to clean {total_failed} items")
    if not total_cleaned and not total_failed:
        print("  Nothing to clean")
    print()
    return total_cleaned, total_failed
