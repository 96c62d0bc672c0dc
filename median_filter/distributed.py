"""Filtro de mediana distribuído por faixas de linhas com troca de linhas fantasma.

Protocolo (estritamente em fases, tudo bloqueante):

1. rank 0 envia largura e altura (uint32[2]) para cada rank 1..size-1;
2. para cada rank com faixa não vazia, envia int32[4]
   (owned_start, owned_end, ghost_start, ghost_end) e depois os bytes RGB
   das linhas [ghost_start, ghost_end);
3. cada rank filtra só as suas linhas e devolve os bytes dessas linhas;
4. rank 0 recolhe em ordem crescente de rank e monta a imagem final.

O rank 0 filtra a própria faixa em memória, sem serialização.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from median_filter import codec
from median_filter.errors import MedianFilterError
from median_filter.grid import PixelGrid
from median_filter.partition import RowRange, WorkAssignment, partition
from median_filter.window import filter_rows

logger = logging.getLogger(__name__)

COORDINATOR_RANK = 0


class Role(enum.Enum):
    COORDINATOR = "coordinator"
    WORKER = "worker"


def role_for(rank):
    return Role.COORDINATOR if rank == COORDINATOR_RANK else Role.WORKER


@dataclass
class DistributedResult:
    image: Optional[PixelGrid]  # só no coordenador
    rank: int
    size: int


def process_chunk(chunk, assignment, kernel_size):
    local = assignment.local_owned
    return filter_rows(chunk, local.start, local.end, kernel_size)


def assemble(width, height, fragments):
    output = PixelGrid.new_empty(width, height)
    written = np.zeros(height, dtype=np.int32)
    for owned, fragment in fragments:
        output.paste_rows(owned.start, fragment)
        written[owned.start:owned.end] += 1
    if not np.all(written == 1):
        raise MedianFilterError(
            f"rows not written exactly once: {np.flatnonzero(written != 1).tolist()}"
        )
    return output


def run_coordinator(ctx, image, kernel_size):
    if image is None:
        raise ValueError("coordinator needs the input image")
    channel = ctx.channel
    width, height = image.width, image.height

    # broadcast das dimensões, ponto a ponto
    dims = np.array([width, height], dtype=np.uint32)
    for dest in range(1, ctx.size):
        channel.send_array(dest, dims)

    assignments = partition(height, ctx.size, kernel_size // 2)
    fragments = []
    dispatched = []
    for assignment in assignments:
        if assignment.empty:
            logger.debug("[rank 0] rank %d has no rows, skipping", assignment.worker_id)
            continue
        ghost = assignment.ghost
        if assignment.worker_id == COORDINATOR_RANK:
            chunk = image.rows(ghost.start, ghost.end)
            fragments.append((assignment.owned, process_chunk(chunk, assignment, kernel_size)))
            continue

        ranges = np.array(
            [assignment.owned.start, assignment.owned.end, ghost.start, ghost.end],
            dtype=np.int32,
        )
        channel.send_array(assignment.worker_id, ranges)
        payload = np.frombuffer(codec.encode(image, ghost.start, ghost.end), dtype=np.uint8)
        channel.send_array(assignment.worker_id, payload)
        dispatched.append(assignment)
        logger.debug(
            "[rank 0] sent rows %d..%d (ghost %d..%d) to rank %d",
            assignment.owned.start, assignment.owned.end, ghost.start, ghost.end,
            assignment.worker_id,
        )

    # gather em ordem crescente de rank
    for assignment in dispatched:
        owned_height = len(assignment.owned)
        data = channel.recv_array(
            assignment.worker_id, codec.payload_size(width, owned_height), np.uint8
        )
        fragments.append((assignment.owned, codec.decode(data, width, owned_height)))

    return DistributedResult(assemble(width, height, fragments), ctx.rank, ctx.size)


def run_worker(ctx, kernel_size):
    channel = ctx.channel
    width, height = (int(v) for v in channel.recv_array(COORDINATOR_RANK, 2, np.uint32))

    # a partição é função pura de (altura, size, half_kernel): sem faixa, sem conversa
    if partition(height, ctx.size, kernel_size // 2)[ctx.rank].empty:
        logger.debug("[rank %d] no rows assigned", ctx.rank)
        return DistributedResult(None, ctx.rank, ctx.size)

    owned_start, owned_end, ghost_start, ghost_end = (
        int(v) for v in channel.recv_array(COORDINATOR_RANK, 4, np.int32)
    )
    assignment = WorkAssignment(
        ctx.rank, RowRange(owned_start, owned_end), RowRange(ghost_start, ghost_end)
    )
    ghost_height = len(assignment.ghost)
    data = channel.recv_array(
        COORDINATOR_RANK, codec.payload_size(width, ghost_height), np.uint8
    )
    chunk = codec.decode(data, width, ghost_height)

    processed = process_chunk(chunk, assignment, kernel_size)
    channel.send_array(COORDINATOR_RANK, np.frombuffer(codec.encode(processed), dtype=np.uint8))
    logger.debug("[rank %d] returned rows %d..%d", ctx.rank, owned_start, owned_end)
    return DistributedResult(None, ctx.rank, ctx.size)


def apply_median_filter_mpi(ctx, image, kernel_size):
    """Ponto de entrada único: o papel do processo sai do seu rank.

    `image` só é lido no coordenador; os workers podem passar None.
    """
    if role_for(ctx.rank) is Role.COORDINATOR:
        return run_coordinator(ctx, image, kernel_size)
    return run_worker(ctx, kernel_size)
