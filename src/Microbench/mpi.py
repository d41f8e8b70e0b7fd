"""Distributed Gamma evaluation with MPI shared-memory windows.

Ranks on the same node share one result array allocated with
``MPI.Win.Allocate_shared``. Each rank writes its own disjoint slice, then
node leaders reduce their (zero-padded) arrays to rank 0.

Run under ``mpiexec -n <ranks>``; a single rank works without a launcher.
"""

import numpy as np
from mpi4py import MPI

from .parallel import evaluate_gamma, partition_range


def gamma_mpi(points, comm=None, method: str = "library"):
    """Evaluate Gamma at ``points`` across all ranks of ``comm``.

    Parameters
    ----------
    points : array_like
        Evaluation points, identical on every rank.
    comm : MPI.Comm, optional
        Communicator (default: ``MPI.COMM_WORLD``).
    method : str
        "library" or "quad" (see ``evaluate_gamma``).

    Returns
    -------
    np.ndarray or None
        Full result array on rank 0, None on other ranks.
    """
    comm = comm if comm is not None else MPI.COMM_WORLD
    rank = comm.Get_rank()
    points = np.ascontiguousarray(points, dtype=np.float64)
    n = points.shape[0]

    if n == 0:
        return np.empty(0, dtype=np.float64) if rank == 0 else None

    node = comm.Split_type(MPI.COMM_TYPE_SHARED)
    node_rank = node.Get_rank()

    itemsize = MPI.DOUBLE.Get_size()
    nbytes = n * itemsize if node_rank == 0 else 0
    win = MPI.Win.Allocate_shared(nbytes, itemsize, comm=node)
    buf, itemsize = win.Shared_query(0)
    shared = np.ndarray(buffer=buf, dtype=np.float64, shape=(n,))

    if node_rank == 0:
        shared[:] = 0.0
    node.Barrier()

    chunks = partition_range(n, comm.Get_size())
    if rank < len(chunks):
        start, stop = chunks[rank]
        shared[start:stop] = evaluate_gamma(points[start:stop], method)
    node.Barrier()

    # Node leaders combine their partial arrays (slices are disjoint)
    leaders = comm.Split(0 if node_rank == 0 else MPI.UNDEFINED, rank)
    result = None
    if leaders != MPI.COMM_NULL:
        result = np.empty(n, dtype=np.float64) if leaders.Get_rank() == 0 else None
        leaders.Reduce(shared, result, op=MPI.SUM, root=0)
        leaders.Free()

    comm.Barrier()
    del shared
    win.Free()
    node.Free()

    return result if rank == 0 else None
