import numpy as np

from median_filter.errors import ChunkSizeError
from median_filter.grid import PixelGrid


def payload_size(width, height):
    return width * height * 3


def encode(grid, start=0, end=None):
    """Serializa as linhas [start, end) como bytes R,G,B linha-major."""
    end = grid.height if end is None else end
    return grid.pixels[start:end].tobytes()


def decode(data, width, height):
    expected = payload_size(width, height)
    if len(data) != expected:
        raise ChunkSizeError(
            f"payload has {len(data)} bytes, expected {expected} for {width}x{height}"
        )
    # frombuffer é somente leitura; copia para o grid ser dono dos dados
    flat = np.frombuffer(data, dtype=np.uint8).copy()
    return PixelGrid(flat.reshape((height, width, 3)))
