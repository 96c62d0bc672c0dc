"""Tests for run configuration validation."""
import pytest

from median_filter.config import FilterConfig
from median_filter.errors import ConfigurationError, MedianFilterError


class TestFilterConfig:
    def test_defaults_are_valid(self):
        config = FilterConfig().validate()
        assert (config.kernel_size, config.noise_level, config.method) == (3, 0.0, "seq")

    @pytest.mark.parametrize("kernel_size", [3, 5])
    def test_accepted_kernels(self, kernel_size):
        assert FilterConfig(kernel_size=kernel_size).validate().half_kernel == kernel_size // 2

    @pytest.mark.parametrize("kernel_size", [0, 1, 2, 4, 7, 9])
    def test_rejected_kernels(self, kernel_size):
        with pytest.raises(ConfigurationError, match="Kernel size"):
            FilterConfig(kernel_size=kernel_size).validate()

    @pytest.mark.parametrize("noise", [0.0, 0.5, 1.0])
    def test_accepted_noise(self, noise):
        FilterConfig(noise_level=noise).validate()

    @pytest.mark.parametrize("noise", [-0.01, 1.01, 5.0])
    def test_rejected_noise(self, noise):
        with pytest.raises(ConfigurationError, match="Noise level"):
            FilterConfig(noise_level=noise).validate()

    @pytest.mark.parametrize("method", ["gpu", "", "SEQ"])
    def test_rejected_methods(self, method):
        with pytest.raises(ConfigurationError, match="Unknown method"):
            FilterConfig(method=method).validate()

    def test_rejected_worker_count(self):
        with pytest.raises(ConfigurationError):
            FilterConfig(method="par", workers=0).validate()

    def test_configuration_error_is_project_error(self):
        assert issubclass(ConfigurationError, MedianFilterError)
