"""Workload benchmarks.

Consistent naming: {Workload}Benchmark, all built on BaseBenchmark.

Single process:
- ArrayFillBenchmark: triple nested loop array fill
- MatmulBenchmark: dense matrix-matrix product
- GammaBenchmark: Gamma via quadrature or library
- SineBenchmark: vectorised sine, small and large inputs

Parallel:
- ParallelGammaBenchmark: worker processes, numba threads or MPI ranks
  writing disjoint slices of a shared array
"""

from .base import BaseBenchmark
from .workloads import (
    ArrayFillBenchmark,
    MatmulBenchmark,
    GammaBenchmark,
    SineBenchmark,
)
from .parallel_gamma import PARALLEL_MODES, ParallelGammaBenchmark

WORKLOADS = {
    "array_fill": ArrayFillBenchmark,
    "matmul": MatmulBenchmark,
    "gamma": GammaBenchmark,
    "sine": SineBenchmark,
    "parallel_gamma": ParallelGammaBenchmark,
}


def create_benchmark(workload: str, size, **kwargs) -> BaseBenchmark:
    """Create a benchmark instance by workload name (see ``WORKLOADS``)."""
    try:
        cls = WORKLOADS[workload]
    except KeyError:
        raise ValueError(
            f"Unknown workload '{workload}'. Choose from {list(WORKLOADS)}"
        ) from None
    return cls(size, **kwargs)


__all__ = [
    "BaseBenchmark",
    "ArrayFillBenchmark",
    "MatmulBenchmark",
    "GammaBenchmark",
    "SineBenchmark",
    "ParallelGammaBenchmark",
    "PARALLEL_MODES",
    "WORKLOADS",
    "create_benchmark",
]
