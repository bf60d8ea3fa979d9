"""JSON-file package store keyed by tracking number."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from pydantic import ValidationError

from ..config import settings
from ..models.domain import Package, PackageStatus
from ..schemas.packages import PackageRecord
from .filesystem import FileStorage

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PackageStorage:
    """Stores the courier's packages as a list of records in a single JSON file.

    Every mutation rewrites the whole file while holding ``_lock``.
    """

    def __init__(self, path: Path | None = None, files: FileStorage | None = None) -> None:
        self.path = (path or settings.package_store_path).resolve()
        self.files = files or FileStorage(root=self.path.parent)
        self._lock = threading.RLock()

    def _load(self) -> list[Package]:
        raw = self.files.read_json(self.path, default=[])
        if isinstance(raw, dict):
            raw = list(raw.values())
        if not isinstance(raw, list):
            raise ValueError(f"Package store '{self.path}' must hold a list of records.")

        packages: list[Package] = []
        seen: set[str] = set()
        for position, item in enumerate(raw):
            try:
                record = PackageRecord.model_validate(item)
            except ValidationError as exc:
                logger.warning(f"Skipping invalid package record #{position} in {self.path.name}: {exc.errors()}")
                continue
            if record.tracking_number in seen:
                logger.warning(f"Duplicate tracking number {record.tracking_number} in package store, keeping first")
                continue
            seen.add(record.tracking_number)
            packages.append(record.to_domain())
        return packages

    def _dump(self, packages: Iterable[Package]) -> None:
        payload = [PackageRecord.from_domain(package).model_dump(mode="json") for package in packages]
        self.files.write_json(self.path, payload)

    def list_packages(self) -> list[Package]:
        with self._lock:
            return self._load()

    def get_package(self, tracking_number: str) -> Optional[Package]:
        for package in self.list_packages():
            if package.tracking_number == tracking_number:
                return package
        return None

    def save_package(self, package: Package) -> Package:
        """Insert a new package or merge it over the stored one."""

        with self._lock:
            packages = self._load()
            now = _utcnow()
            for idx, existing in enumerate(packages):
                if existing.tracking_number == package.tracking_number:
                    stored = replace(package, created_at=existing.created_at or now, updated_at=now)
                    packages[idx] = stored
                    break
            else:
                stored = replace(package, created_at=now, updated_at=now)
                packages.append(stored)
            self._dump(packages)
        return stored

    def delete_package(self, tracking_number: str) -> bool:
        with self._lock:
            packages = self._load()
            remaining = [package for package in packages if package.tracking_number != tracking_number]
            if len(remaining) == len(packages):
                return False
            self._dump(remaining)
        return True

    def update_status(self, tracking_number: str, status: PackageStatus) -> Optional[Package]:
        with self._lock:
            package = self.get_package(tracking_number)
            if package is None:
                return None
            package.status = status
            return self.save_package(package)

    def search(self, query: str) -> list[Package]:
        needle = query.lower()
        return [
            package
            for package in self.list_packages()
            if needle in package.tracking_number.lower() or needle in package.address.lower()
        ]

    def filter_by_status(self, status: PackageStatus | str | None) -> list[Package]:
        packages = self.list_packages()
        if status is None or status == "all":
            return packages
        wanted = PackageStatus(status)
        return [package for package in packages if package.status == wanted]

    def packages_by_order(self) -> list[Package]:
        ordered = [package for package in self.list_packages() if package.visit_index is not None]
        return sorted(ordered, key=lambda package: package.visit_index)

    def update_visit_indices(self, updates: Iterable[tuple[str, int]], *, clear_others: bool = False) -> int:
        """Write visit indices back onto stored packages in one pass.

        Unknown tracking numbers are ignored. With ``clear_others`` every package
        left out of ``updates`` loses its index, so the stored order is exactly the
        new route. Returns the number of packages updated.
        """

        updates = list(updates)
        with self._lock:
            packages = self._load()
            by_number = {package.tracking_number: package for package in packages}
            now = _utcnow()
            dirty = False
            if clear_others:
                routed = {tracking_number for tracking_number, _ in updates}
                for package in packages:
                    if package.tracking_number not in routed and package.visit_index is not None:
                        package.visit_index = None
                        package.updated_at = now
                        dirty = True
            updated = 0
            for tracking_number, visit_index in updates:
                package = by_number.get(tracking_number)
                if package is None:
                    logger.warning(f"Package {tracking_number} not found in store, skipping visit index update")
                    continue
                package.visit_index = visit_index
                package.updated_at = now
                updated += 1
            if updated or dirty:
                self._dump(packages)
        return updated

    def clear(self) -> None:
        with self._lock:
            self.files.remove(self.path)
