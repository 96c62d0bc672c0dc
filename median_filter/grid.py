import logging

import cv2
import numpy as np

from median_filter.errors import ImageIOError

logger = logging.getLogger(__name__)


def mirror_index(c, limit):
    """Reflete coordenadas fora de [0, limit) pela borda mais próxima.

    c < 0 vira -c, c >= limit vira 2*limit - c - 2, e o resultado é
    limitado a [0, limit - 1]. Aceita int ou array numpy.
    """
    c = np.asarray(c)
    mapped = np.where(c < 0, -c, np.where(c >= limit, 2 * limit - c - 2, c))
    return np.clip(mapped, 0, limit - 1)


class PixelGrid:
    """Raster RGB em memória, linha-major, um byte por canal."""

    def __init__(self, pixels):
        pixels = np.asarray(pixels)
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise ValueError(f"expected a (height, width, 3) array, got {pixels.shape}")
        self.pixels = np.ascontiguousarray(pixels, dtype=np.uint8)

    @classmethod
    def new_empty(cls, width, height):
        return cls(np.zeros((height, width, 3), dtype=np.uint8))

    @property
    def width(self):
        return self.pixels.shape[1]

    @property
    def height(self):
        return self.pixels.shape[0]

    def get_pixel(self, x, y):
        return tuple(int(v) for v in self.pixels[y, x])

    def put_pixel(self, x, y, pixel):
        self.pixels[y, x] = pixel

    def get_pixel_padded(self, x, y):
        px = int(mirror_index(x, self.width))
        py = int(mirror_index(y, self.height))
        return self.get_pixel(px, py)

    def rows(self, start, end):
        # cópia, nunca uma view para dentro da imagem original
        return PixelGrid(self.pixels[start:end].copy())

    def paste_rows(self, offset, fragment):
        if fragment.width != self.width:
            raise ValueError(f"fragment width {fragment.width} != grid width {self.width}")
        if offset < 0 or offset + fragment.height > self.height:
            raise ValueError(
                f"rows [{offset}, {offset + fragment.height}) outside grid of height {self.height}"
            )
        self.pixels[offset:offset + fragment.height] = fragment.pixels

    def __eq__(self, other):
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return np.array_equal(self.pixels, other.pixels)

    def __repr__(self):
        return f"PixelGrid(width={self.width}, height={self.height})"


def load_image(path):
    img = cv2.imread(str(path), cv2.IMREAD_COLOR)  # OpenCV lê em BGR
    if img is None:
        raise ImageIOError(f"Failed to load image: {path}")
    logger.debug("loaded %s (%dx%d)", path, img.shape[1], img.shape[0])
    return PixelGrid(cv2.cvtColor(img, cv2.COLOR_BGR2RGB))


def save_image(grid, path):
    try:
        ok = cv2.imwrite(str(path), cv2.cvtColor(grid.pixels, cv2.COLOR_RGB2BGR))
    except cv2.error as e:
        raise ImageIOError(f"Failed to save image {path}: {e}") from e
    if not ok:
        raise ImageIOError(f"Failed to save image: {path}")


def add_noise(grid, noise_level, rng=None):
    """Ruído sal e pimenta: corrompe width*height*noise_level pixels (com reposição)."""
    rng = rng if rng is not None else np.random.default_rng()
    pixels_to_corrupt = int(grid.width * grid.height * noise_level)
    if pixels_to_corrupt == 0:
        return grid

    xs = rng.integers(0, grid.width, size=pixels_to_corrupt)
    ys = rng.integers(0, grid.height, size=pixels_to_corrupt)
    # branco (sal) ou preto (pimenta) com a mesma probabilidade
    values = np.where(rng.random(pixels_to_corrupt) < 0.5, 255, 0).astype(np.uint8)
    grid.pixels[ys, xs] = values[:, None]
    logger.debug("corrupted %d pixels", pixels_to_corrupt)
    return grid
