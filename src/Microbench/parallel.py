"""Parallel Gamma evaluation over shared arrays.

Worker processes attach to the input and output arrays through
``multiprocessing.shared_memory`` and each writes only its own contiguous
index range, so no locking is needed. Two dispatch styles are offered:

- ``ParallelGamma.run``: dispatch every chunk and wait on all of them
- ``ParallelGamma.dispatch``: return the futures immediately (no join)

``gamma_threads`` is the shared-memory threaded counterpart built on numba
``prange``.
"""

import multiprocessing
from concurrent.futures import ProcessPoolExecutor, wait
from multiprocessing import shared_memory
from typing import Dict, List, Optional, Tuple

import numpy as np
from scipy import special

from .kernels import NumbaKernel, gamma_quad


GAMMA_METHODS = ("library", "quad")


def partition_range(n: int, n_parts: int) -> List[Tuple[int, int]]:
    """Split [0, n) into at most ``n_parts`` contiguous, disjoint chunks.

    Chunk sizes differ by at most one; empty chunks are dropped.
    """
    if n_parts < 1:
        raise ValueError(f"n_parts must be at least 1, got {n_parts}")
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    base, rem = divmod(n, n_parts)
    parts = []
    start = 0
    for i in range(n_parts):
        stop = start + base + (1 if i < rem else 0)
        if stop > start:
            parts.append((start, stop))
        start = stop
    return parts


def evaluate_gamma(points: np.ndarray, method: str = "library") -> np.ndarray:
    """Evaluate Gamma on a slice with the library or quadrature method."""
    if method == "library":
        return special.gamma(points)
    if method == "quad":
        return np.array([gamma_quad(z) for z in points], dtype=np.float64)
    raise ValueError(f"Unknown Gamma method '{method}'. Choose from {list(GAMMA_METHODS)}")


class SharedArray:
    """NumPy array backed by a named shared memory block.

    Parameters
    ----------
    shape : int or tuple
        Array shape.
    dtype : dtype
        Element type (default: float64).
    name : str, optional
        Name of an existing block to attach to (``create=False``).
    create : bool
        Create a new block (default: True). The creator owns the block and
        unlinks it on ``__exit__``.
    """

    def __init__(self, shape, dtype=np.float64, name: Optional[str] = None, create: bool = True):
        self.shape = tuple(int(s) for s in np.atleast_1d(shape))
        self.dtype = np.dtype(dtype)
        self._owner = create
        nbytes = int(np.prod(self.shape)) * self.dtype.itemsize
        if create:
            # SharedMemory rejects zero-sized blocks
            self._shm = shared_memory.SharedMemory(name=name, create=True, size=max(nbytes, 1))
        else:
            self._shm = shared_memory.SharedMemory(name=name)
        self.array = np.ndarray(self.shape, dtype=self.dtype, buffer=self._shm.buf)

    @classmethod
    def from_array(cls, data) -> "SharedArray":
        """Create a shared copy of ``data``."""
        data = np.asarray(data)
        shared = cls(data.shape, dtype=data.dtype)
        shared.array[...] = data
        return shared

    @property
    def name(self) -> str:
        return self._shm.name

    def close(self):
        """Detach from the block (the view must not be used afterwards)."""
        self.array = None
        self._shm.close()

    def unlink(self):
        """Free the block. Only the creating process unlinks."""
        if self._owner:
            self._shm.unlink()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        self.unlink()


# ============================================================================
# Worker side
# ============================================================================

# Per-worker cache of attached blocks: name -> (SharedMemory, view)
_worker_blocks: Dict[str, tuple] = {}


def _attach(name: str, n: int) -> np.ndarray:
    entry = _worker_blocks.get(name)
    if entry is None:
        shm = shared_memory.SharedMemory(name=name)
        entry = (shm, np.ndarray((n,), dtype=np.float64, buffer=shm.buf))
        _worker_blocks[name] = entry
    return entry[1]


def _release_stale(keep: set):
    """Detach from blocks of earlier runs."""
    for name in [k for k in _worker_blocks if k not in keep]:
        shm, view = _worker_blocks.pop(name)
        del view
        shm.close()


def _gamma_chunk(task: tuple) -> int:
    """Evaluate Gamma on points[start:stop] into out[start:stop]."""
    in_name, out_name, n, start, stop, method = task
    _release_stale({in_name, out_name})
    points = _attach(in_name, n)
    out = _attach(out_name, n)
    out[start:stop] = evaluate_gamma(points[start:stop], method)
    return stop - start


# ============================================================================
# Parent side
# ============================================================================


class ParallelGamma:
    """Distribute Gamma evaluation across a pool of worker processes.

    Parameters
    ----------
    n_workers : int
        Number of worker processes (default: 2).
    method : str
        "library" (scipy.special.gamma) or "quad" (Euler integral quadrature).
    """

    def __init__(self, n_workers: int = 2, method: str = "library"):
        if n_workers < 1:
            raise ValueError(f"n_workers must be at least 1, got {n_workers}")
        if method not in GAMMA_METHODS:
            raise ValueError(f"Unknown Gamma method '{method}'. Choose from {list(GAMMA_METHODS)}")
        self.n_workers = n_workers
        self.method = method
        # Forking after numba has started its threading layer can leave the
        # parent unable to exit; spawned workers only need numpy and scipy.
        self._executor = ProcessPoolExecutor(
            max_workers=n_workers, mp_context=multiprocessing.get_context("spawn")
        )
        self._points: Optional[SharedArray] = None
        self._out: Optional[SharedArray] = None
        self._pending = []

    def _stage(self, points) -> int:
        """Copy inputs into a fresh shared input array and allocate the output."""
        points = np.ascontiguousarray(points, dtype=np.float64)
        if points.ndim != 1:
            raise ValueError(f"Expected a 1-D input array, got shape {points.shape}")
        self.wait()
        self._release()
        self._points = SharedArray.from_array(points)
        self._out = SharedArray(points.shape, dtype=np.float64)
        self._out.array[:] = 0.0
        return points.shape[0]

    def dispatch(self, points) -> list:
        """Submit all chunks and return their futures without waiting."""
        n = self._stage(points)
        self._pending = [
            self._executor.submit(
                _gamma_chunk,
                (self._points.name, self._out.name, n, start, stop, self.method),
            )
            for start, stop in partition_range(n, self.n_workers)
        ]
        return self._pending

    def wait(self):
        """Block until all dispatched chunks finished; re-raise worker errors."""
        if not self._pending:
            return
        wait(self._pending)
        pending, self._pending = self._pending, []
        for future in pending:
            future.result()

    def collect(self) -> np.ndarray:
        """Wait for the current dispatch and return a copy of the results."""
        self.wait()
        if self._out is None:
            raise RuntimeError("Nothing has been dispatched")
        return self._out.array.copy()

    def run(self, points) -> np.ndarray:
        """Evaluate Gamma at ``points``, returning once every worker is done."""
        self.dispatch(points)
        return self.collect()

    def warmup(self, warmup_size: int = 10):
        """Start the worker processes (the pool spawns them lazily)."""
        self.run(np.linspace(1.0, 2.0, max(warmup_size, self.n_workers)))

    def _release(self):
        for shared in (self._points, self._out):
            if shared is not None:
                shared.close()
                shared.unlink()
        self._points = None
        self._out = None

    def shutdown(self):
        """Stop the workers and free the shared arrays."""
        self.wait()
        self._executor.shutdown(wait=True)
        self._release()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()


def gamma_threads(
    points, out: np.ndarray = None, numba_threads: int = 1
) -> np.ndarray:
    """Shared-memory threaded Gamma: numba prange over the output array."""
    kernel = NumbaKernel(numba_threads=numba_threads, parallel=True)
    return kernel.gamma(points, out)
