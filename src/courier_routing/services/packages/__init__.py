"""Package service helpers."""

from .stats import compute_package_stats

__all__ = ["compute_package_stats"]
