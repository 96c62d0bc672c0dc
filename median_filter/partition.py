from dataclasses import dataclass


@dataclass(frozen=True)
class RowRange:
    start: int  # inclusivo
    end: int  # exclusivo

    def __len__(self):
        return max(0, self.end - self.start)

    @property
    def empty(self):
        return self.end <= self.start


@dataclass(frozen=True)
class WorkAssignment:
    worker_id: int
    owned: RowRange
    ghost: RowRange

    @property
    def empty(self):
        return self.owned.empty

    @property
    def local_owned(self):
        # linhas próprias em coordenadas do pedaço recebido (linha 0 = ghost.start)
        return RowRange(self.owned.start - self.ghost.start, self.owned.end - self.ghost.start)


def rows_per_band(height, worker_count):
    return (height + worker_count - 1) // worker_count


def partition(height, worker_count, half_kernel):
    """Divide [0, height) em faixas contíguas de ceil(height / worker_count) linhas.

    A última faixa é truncada em height; processos que sobram recebem faixa
    vazia. As faixas fantasma estendem cada faixa em half_kernel linhas para
    cima e para baixo, limitadas à imagem.
    """
    if worker_count < 1:
        raise ValueError(f"worker_count must be >= 1, got {worker_count}")
    band = rows_per_band(height, worker_count)

    assignments = []
    for worker_id in range(worker_count):
        start = worker_id * band
        end = min((worker_id + 1) * band, height)
        if start >= height:
            empty = RowRange(height, height)
            assignments.append(WorkAssignment(worker_id, empty, empty))
            continue
        ghost = RowRange(max(0, start - half_kernel), min(height, end + half_kernel))
        assignments.append(WorkAssignment(worker_id, RowRange(start, end), ghost))
    return assignments
