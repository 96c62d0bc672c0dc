"""Filtro de mediana RGB: sequencial, threads e distribuído com MPI."""
from median_filter.config import FilterConfig
from median_filter.errors import (
    ChunkSizeError,
    ConfigurationError,
    ImageIOError,
    MedianFilterError,
    TransportError,
)
from median_filter.grid import PixelGrid, add_noise, load_image, save_image

__version__ = "0.1.0"

__all__ = [
    "ChunkSizeError",
    "ConfigurationError",
    "FilterConfig",
    "ImageIOError",
    "MedianFilterError",
    "PixelGrid",
    "TransportError",
    "add_noise",
    "load_image",
    "save_image",
]
