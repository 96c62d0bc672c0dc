import math

import numpy as np
from skimage.metrics import structural_similarity

# janela gaussiana 11x11, sigma 1.5 (Wang et al. 2004)
SSIM_WINDOW = 11
SSIM_SIGMA = 1.5


def _check_shapes(reference, candidate):
    if reference.pixels.shape != candidate.pixels.shape:
        raise ValueError(
            f"image shapes differ: {reference.pixels.shape} vs {candidate.pixels.shape}"
        )


def psnr(reference, candidate):
    _check_shapes(reference, candidate)
    diff = reference.pixels.astype(np.float64) - candidate.pixels.astype(np.float64)
    mse = np.mean(diff ** 2)
    if mse == 0:
        return math.inf
    return 10.0 * math.log10(255.0 ** 2 / mse)


def ssim_window(width, height):
    # imagens menores que 11x11 usam a maior janela ímpar que cabe
    smallest = min(width, height, SSIM_WINDOW)
    return smallest if smallest % 2 == 1 else smallest - 1


def ssim(reference, candidate):
    """SSIM médio sobre os três canais RGB."""
    _check_shapes(reference, candidate)
    return float(structural_similarity(
        reference.pixels,
        candidate.pixels,
        win_size=ssim_window(reference.width, reference.height),
        channel_axis=-1,
        gaussian_weights=True,
        sigma=SSIM_SIGMA,
        use_sample_covariance=False,
        data_range=255,
    ))
