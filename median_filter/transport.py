"""Canais ponto a ponto entre os processos de uma execução.

O filtro distribuído só conversa com um `WorldContext`; em produção o canal
é o `MPIChannel` (median_filter.mpi), nos testes um `InMemoryChannel` com
cada rank rodando numa thread.
"""
import logging
import queue
import threading
from dataclasses import dataclass

import numpy as np

from median_filter.errors import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorldContext:
    rank: int
    size: int
    channel: object

    @classmethod
    def from_mpi(cls, comm=None):
        from median_filter.mpi import MPIChannel, world

        comm = comm if comm is not None else world()
        return cls(comm.Get_rank(), comm.Get_size(), MPIChannel(comm))


class Channel:
    """Envio/recebimento bloqueante de arrays numpy 1D de tamanho conhecido."""

    def send_array(self, dest, array):
        raise NotImplementedError

    def recv_array(self, source, count, dtype):
        raise NotImplementedError


class InMemoryHub:
    """Uma fila FIFO por par ordenado (origem, destino)."""

    def __init__(self, size, timeout=None):
        self.size = size
        self.timeout = timeout
        self._queues = {}
        self._lock = threading.Lock()

    def queue_for(self, source, dest):
        with self._lock:
            return self._queues.setdefault((source, dest), queue.Queue())

    def channel(self, rank):
        return InMemoryChannel(self, rank)

    def context(self, rank):
        return WorldContext(rank, self.size, self.channel(rank))

    def pending(self):
        with self._lock:
            return {key: q.qsize() for key, q in self._queues.items() if q.qsize()}


class InMemoryChannel(Channel):
    def __init__(self, hub, rank):
        self.hub = hub
        self.rank = rank

    def _check_peer(self, peer):
        if not 0 <= peer < self.hub.size or peer == self.rank:
            raise TransportError(f"[rank {self.rank}] invalid peer {peer}")

    def send_array(self, dest, array):
        self._check_peer(dest)
        # sempre uma cópia: nada é compartilhado entre ranks
        self.hub.queue_for(self.rank, dest).put(np.array(array, copy=True).ravel())

    def recv_array(self, source, count, dtype):
        self._check_peer(source)
        try:
            data = self.hub.queue_for(source, self.rank).get(timeout=self.hub.timeout)
        except queue.Empty:
            raise TransportError(
                f"[rank {self.rank}] timed out waiting for rank {source}"
            ) from None
        if data.dtype != np.dtype(dtype) or data.size != count:
            raise TransportError(
                f"[rank {self.rank}] expected {count} x {np.dtype(dtype)} from rank {source}, "
                f"got {data.size} x {data.dtype}"
            )
        return data
