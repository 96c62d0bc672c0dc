import logging

import numpy as np
from mpi4py import MPI

from median_filter.errors import TransportError
from median_filter.transport import Channel

logger = logging.getLogger(__name__)

# tipo numpy -> tipo MPI usado nos buffers
MPI_TYPES = {
    np.dtype(np.uint8): MPI.UNSIGNED_CHAR,
    np.dtype(np.int32): MPI.INT,
    np.dtype(np.uint32): MPI.UNSIGNED,
}


def world():
    return MPI.COMM_WORLD  # comunicador que engloba todos os processos


def wtime():
    return MPI.Wtime()


def abort(code=1):
    MPI.COMM_WORLD.Abort(code)


class MPIChannel(Channel):
    def __init__(self, comm):
        self.comm = comm
        self.rank = comm.Get_rank()

    def send_array(self, dest, array):
        array = np.ascontiguousarray(array).ravel()
        try:
            self.comm.Send([array, MPI_TYPES[array.dtype]], dest=dest)
        except MPI.Exception as e:
            raise TransportError(f"[rank {self.rank}] send to rank {dest} failed: {e}") from e

    def recv_array(self, source, count, dtype):
        buffer = np.empty(count, dtype=dtype)  # buffer dimensionado antes do Recv
        mpi_type = MPI_TYPES[buffer.dtype]
        status = MPI.Status()
        try:
            self.comm.Recv([buffer, mpi_type], source=source, status=status)
        except MPI.Exception as e:
            raise TransportError(
                f"[rank {self.rank}] receive from rank {source} failed: {e}"
            ) from e
        # mensagem menor que o buffer deixaria lixo no final
        received = status.Get_count(mpi_type)
        if received != count:
            raise TransportError(
                f"[rank {self.rank}] expected {count} x {buffer.dtype} from rank {source}, "
                f"got {received}"
            )
        return buffer
