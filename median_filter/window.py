import numpy as np

from median_filter.grid import PixelGrid, mirror_index

BLOCK_ROWS = 64


def median(values):
    values = sorted(values)
    return values[len(values) // 2]


def median_rgb(pixels):
    # mediana calculada separadamente em cada canal
    return tuple(median([p[c] for p in pixels]) for c in range(3))


def collect_neighborhood(grid, x, y, kernel_size):
    radius = kernel_size // 2
    return [
        grid.get_pixel_padded(x + dx, y + dy)
        for dy in range(-radius, radius + 1)
        for dx in range(-radius, radius + 1)
    ]


def filter_rows(grid, start, end, kernel_size, block_rows=BLOCK_ROWS):
    """Aplica a mediana nas linhas [start, end) de grid e devolve só essas linhas.

    As linhas fora do intervalo servem apenas de contexto. O espelhamento usa
    a extensão do próprio grid, então um pedaço com linhas fantasma recebe o
    mesmo resultado que a imagem inteira.
    """
    out_height = end - start
    output = PixelGrid.new_empty(grid.width, max(out_height, 0))
    # blocos de linhas limitam a memória a k*k*block_rows linhas por vez
    for block_start in range(start, end, block_rows):
        block_end = min(block_start + block_rows, end)
        output.pixels[block_start - start:block_end - start] = _median_block(
            grid, block_start, block_end, kernel_size
        )
    return output


def _median_block(grid, start, end, kernel_size):
    radius = kernel_size // 2
    ys = np.arange(start, end)
    xs = np.arange(grid.width)

    # uma "camada" por deslocamento (dy, dx) da janela: (k*k, linhas, largura, 3)
    layers = np.empty((kernel_size * kernel_size, end - start, grid.width, 3), dtype=np.uint8)
    i = 0
    for dy in range(-radius, radius + 1):
        rows = grid.pixels[mirror_index(ys + dy, grid.height)]
        for dx in range(-radius, radius + 1):
            layers[i] = rows[:, mirror_index(xs + dx, grid.width)]
            i += 1

    layers.sort(axis=0)
    return layers[(kernel_size * kernel_size) // 2]
