"""Discovery and execution of experiment scripts.

Compute scripts run one at a time so their timings do not compete for
cores; plot scripts only read parquet/MLflow data and run in parallel.
"""

import subprocess
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import List, Optional, Tuple

from ..config import get_repo_root


def discover_scripts(pattern: str, directory: str = "Experiments") -> List[Path]:
    """Find scripts under ``directory`` whose file name contains ``pattern``.

    Parameters
    ----------
    pattern : str
        Pattern to match in script names (e.g., "plot", "compute")
    directory : str, default "Experiments"
        Directory to search in, relative to repo root

    Returns
    -------
    list of Path
        Sorted list of matching script paths
    """
    search_dir = get_repo_root() / directory
    if not search_dir.exists():
        return []

    return sorted(
        p
        for p in search_dir.rglob("*.py")
        if p.is_file() and pattern in p.name and p.name != "__init__.py"
    )


def run_script(
    script: Path,
    repo_root: Path,
    timeout: int = 600,
    interpreter: str = "uv run python",
) -> Tuple[Path, bool, Optional[str]]:
    """Run one script from the repo root.

    Returns
    -------
    tuple
        (display_path, success, error_message)
    """
    display_path = script.relative_to(repo_root)
    try:
        result = subprocess.run(
            interpreter.split() + [str(script)],
            capture_output=True,
            text=True,
            timeout=timeout,
            cwd=str(repo_root),
        )
    except subprocess.TimeoutExpired:
        return display_path, False, "timeout"
    except OSError as e:
        return display_path, False, str(e)

    if result.returncode != 0:
        error_msg = result.stderr[-200:] if result.stderr else ""
        return display_path, False, f"exit {result.returncode}: {error_msg}"
    return display_path, True, None


def run_scripts(
    scripts: List[Path],
    parallel: bool = False,
    timeout: int = 600,
    interpreter: str = "uv run python",
    max_workers: Optional[int] = None,
) -> Tuple[int, int]:
    """Run scripts sequentially or in a thread pool.

    Returns
    -------
    tuple
        (success_count, fail_count)
    """
    if not scripts:
        print("  No scripts to run")
        return 0, 0

    repo_root = get_repo_root()
    how = "in parallel" if parallel else "sequentially"
    print(f"\nRunning {len(scripts)} scripts {how}...\n")

    if parallel:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [
                executor.submit(run_script, s, repo_root, timeout, interpreter)
                for s in scripts
            ]
            results = [f.result() for f in as_completed(futures)]
    else:
        results = [run_script(s, repo_root, timeout, interpreter) for s in scripts]

    success_count = 0
    for display_path, success, error_msg in results:
        if success:
            print(f"  ✓ {display_path}")
            success_count += 1
        else:
            print(f"  ✗ {display_path} ({error_msg})")

    fail_count = len(results) - success_count
    print(f"\n  Summary: {success_count} succeeded, {fail_count} failed\n")
    return success_count, fail_count


def run_compute_scripts() -> Tuple[int, int]:
    """Run all compute scripts sequentially."""
    return run_scripts(discover_scripts("compute"), parallel=False, timeout=1800)


def run_plot_scripts() -> Tuple[int, int]:
    """Run all plot scripts in parallel."""
    return run_scripts(discover_scripts("plot"), parallel=True, timeout=180)
