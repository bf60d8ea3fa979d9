"""Package statistics helpers."""

from __future__ import annotations

from typing import Iterable

from ...models.domain import Package, PackageStatus


def compute_package_stats(packages: Iterable[Package]) -> dict:
    packages = list(packages)
    delivered = sum(1 for package in packages if package.status == PackageStatus.DELIVERED)
    return {
        "total": len(packages),
        "delivered": delivered,
        "pending": len(packages) - delivered,
    }
