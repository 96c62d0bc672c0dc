import logging
import os
from concurrent.futures import ThreadPoolExecutor

from median_filter.grid import PixelGrid
from median_filter.partition import partition
from median_filter.window import filter_rows

logger = logging.getLogger(__name__)


def apply_median_filter(img, kernel_size, workers=None):
    """Divide as linhas entre threads; todas leem a mesma imagem, ninguém escreve nela."""
    workers = workers or os.cpu_count() or 1
    bands = [a.owned for a in partition(img.height, workers, kernel_size // 2) if not a.empty]
    logger.debug("filtering %d row bands on %d threads", len(bands), workers)

    output = PixelGrid.new_empty(img.width, img.height)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [
            (band, pool.submit(filter_rows, img, band.start, band.end, kernel_size))
            for band in bands
        ]
        for band, future in futures:
            output.paste_rows(band.start, future.result())
    return output
