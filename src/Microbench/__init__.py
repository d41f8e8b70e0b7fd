"""Numerical micro-workload benchmarks.

Times small numerical workloads across interchangeable backends (pure
Python, NumPy/SciPy, numba JIT, numba parallel) and reports ratios.

Workloads
---------
- Triple nested loop array fill
- Dense matrix-matrix product
- Gamma function via quadrature vs. library
- Vectorised sine over small and large inputs
- Parallel Gamma over a shared array (processes, threads, MPI)
"""

from pathlib import Path

from .datastructures import BenchmarkParams, BenchmarkMetrics, TimingSeries
from .kernels import BACKENDS, PythonKernel, NumPyKernel, NumbaKernel, get_kernel
from .benchmarks import (
    BaseBenchmark,
    ArrayFillBenchmark,
    MatmulBenchmark,
    GammaBenchmark,
    SineBenchmark,
    ParallelGammaBenchmark,
    WORKLOADS,
    create_benchmark,
)
from .parallel import ParallelGamma, SharedArray, partition_range, gamma_threads
from .problems import (
    SINE_SIZES,
    create_array_3d,
    random_matrices,
    gamma_sample_points,
    integer_points,
    sine_inputs,
    factorial_reference,
)
from .timing import time_callable, speedup, format_duration
from .comparison import compare_backends, ratio_table

__all__ = [
    # Data structures
    "BenchmarkParams",
    "BenchmarkMetrics",
    "TimingSeries",
    # Kernels
    "BACKENDS",
    "PythonKernel",
    "NumPyKernel",
    "NumbaKernel",
    "get_kernel",
    # Benchmarks
    "BaseBenchmark",
    "ArrayFillBenchmark",
    "MatmulBenchmark",
    "GammaBenchmark",
    "SineBenchmark",
    "ParallelGammaBenchmark",
    "WORKLOADS",
    "create_benchmark",
    # Parallel
    "ParallelGamma",
    "SharedArray",
    "partition_range",
    "gamma_threads",
    # Problem setup
    "SINE_SIZES",
    "create_array_3d",
    "random_matrices",
    "gamma_sample_points",
    "integer_points",
    "sine_inputs",
    "factorial_reference",
    # Timing
    "time_callable",
    "speedup",
    "format_duration",
    "compare_backends",
    "ratio_table",
    # Utilities
    "get_project_root",
]


def get_project_root() -> Path:
    """Get project root directory.

    Works reliably in both standalone scripts and Sphinx-Gallery execution.

    Returns
    -------
    Path
        Project root directory (contains pyproject.toml).
    """
    current = Path(__file__).resolve().parent
    while current != current.parent:
        if (current / "pyproject.toml").exists():
            return current
        current = current.parent

    # Fallback: assume standard src layout
    return Path(__file__).resolve().parent.parent.parent
