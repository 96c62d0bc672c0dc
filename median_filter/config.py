from dataclasses import dataclass
from typing import Optional

from median_filter.errors import ConfigurationError

KERNEL_SIZES = (3, 5)
METHODS = ("seq", "par", "dist")


@dataclass
class FilterConfig:
    kernel_size: int = 3
    noise_level: float = 0.0
    method: str = "seq"
    workers: Optional[int] = None  # threads do backend "par"

    @property
    def half_kernel(self):
        return self.kernel_size // 2

    def validate(self):
        if self.kernel_size not in KERNEL_SIZES:
            raise ConfigurationError("Kernel size must be 3 or 5")
        if not 0.0 <= self.noise_level <= 1.0:
            raise ConfigurationError("Noise level must be between 0.0 and 1.0")
        if self.method not in METHODS:
            raise ConfigurationError(
                f"Unknown method '{self.method}'. Available: {', '.join(METHODS)}"
            )
        if self.workers is not None and self.workers < 1:
            raise ConfigurationError("Worker count must be at least 1")
        return self
