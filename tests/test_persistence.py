import json
from pathlib import Path

import pytest

from courier_routing.models.domain import Package, PackageStatus
from courier_routing.persistence.filesystem import FileStorage
from courier_routing.persistence.packages import PackageStorage


def _package(number: str, address: str = "Valiasr St", lat: float | None = 35.7, lon: float | None = 51.4) -> Package:
    return Package(tracking_number=number, address=address, latitude=lat, longitude=lon)


@pytest.fixture
def storage(tmp_path: Path) -> PackageStorage:
    return PackageStorage(path=tmp_path / "packages.json")


def test_file_storage_creates_run_directory(tmp_path: Path) -> None:
    files = FileStorage(root=tmp_path)
    run_dir = files.make_run_directory(prefix="route_test")

    assert run_dir.exists()
    assert run_dir.is_dir()
    assert run_dir.parent == tmp_path / "outputs"


def test_file_storage_json_round_trip_and_default(tmp_path: Path) -> None:
    files = FileStorage(root=tmp_path)
    path = tmp_path / "nested" / "data.json"

    assert files.read_json(path, default=[]) == []
    files.write_json(path, {"hello": "world"})

    assert path.read_text(encoding="utf-8") == '{\n  "hello": "world"\n}'
    assert files.read_json(path) == {"hello": "world"}


def test_file_storage_rejects_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ValueError):
        FileStorage(root=tmp_path).read_json(path)


def test_save_and_get_package(storage: PackageStorage) -> None:
    stored = storage.save_package(_package("TRK-1"))

    assert stored.created_at is not None
    assert stored.updated_at == stored.created_at
    fetched = storage.get_package("TRK-1")
    assert fetched is not None
    assert fetched.address == "Valiasr St"
    assert fetched.status == PackageStatus.PENDING
    assert storage.get_package("missing") is None


def test_save_package_merges_and_keeps_created_at(storage: PackageStorage) -> None:
    first = storage.save_package(_package("TRK-1"))
    second = storage.save_package(_package("TRK-1", address="Enghelab Sq"))

    assert len(storage.list_packages()) == 1
    assert second.created_at == first.created_at
    assert second.updated_at >= first.updated_at
    assert storage.get_package("TRK-1").address == "Enghelab Sq"


def test_delete_and_update_status(storage: PackageStorage) -> None:
    storage.save_package(_package("TRK-1"))
    storage.save_package(_package("TRK-2"))

    delivered = storage.update_status("TRK-1", PackageStatus.DELIVERED)
    assert delivered is not None and delivered.status == PackageStatus.DELIVERED
    assert storage.update_status("missing", PackageStatus.DELIVERED) is None

    assert storage.delete_package("TRK-2") is True
    assert storage.delete_package("TRK-2") is False
    assert [p.tracking_number for p in storage.list_packages()] == ["TRK-1"]


def test_search_and_filter(storage: PackageStorage) -> None:
    storage.save_package(_package("ABC-100", address="Azadi Square"))
    storage.save_package(_package("XYZ-200", address="Tajrish"))
    storage.update_status("XYZ-200", PackageStatus.DELIVERED)

    assert [p.tracking_number for p in storage.search("abc")] == ["ABC-100"]
    assert [p.tracking_number for p in storage.search("TAJ")] == ["XYZ-200"]
    assert [p.tracking_number for p in storage.filter_by_status("pending")] == ["ABC-100"]
    assert [p.tracking_number for p in storage.filter_by_status(PackageStatus.DELIVERED)] == ["XYZ-200"]
    assert len(storage.filter_by_status("all")) == 2


def test_update_visit_indices_ignores_unknown_numbers(storage: PackageStorage) -> None:
    storage.save_package(_package("TRK-1"))
    storage.save_package(_package("TRK-2"))
    storage.save_package(_package("TRK-3"))

    updated = storage.update_visit_indices([("TRK-3", 1), ("GHOST", 2), ("TRK-1", 3)])

    assert updated == 2
    assert [p.tracking_number for p in storage.packages_by_order()] == ["TRK-3", "TRK-1"]
    assert storage.get_package("TRK-2").visit_index is None


def test_update_visit_indices_can_clear_stale_indices(storage: PackageStorage) -> None:
    for number in ("TRK-1", "TRK-2", "TRK-3"):
        storage.save_package(_package(number))
    storage.update_visit_indices([("TRK-1", 1), ("TRK-2", 2), ("TRK-3", 3)])

    updated = storage.update_visit_indices([("TRK-2", 1), ("TRK-3", 2)], clear_others=True)

    assert updated == 2
    ordered = storage.packages_by_order()
    assert [(p.tracking_number, p.visit_index) for p in ordered] == [("TRK-2", 1), ("TRK-3", 2)]
    assert storage.get_package("TRK-1").visit_index is None


def test_clear_removes_everything(storage: PackageStorage) -> None:
    storage.save_package(_package("TRK-1"))
    storage.clear()

    assert storage.list_packages() == []
    assert not storage.path.exists()


def test_loads_mobile_client_records_and_skips_invalid(storage: PackageStorage) -> None:
    records = {
        "TRK-1": {
            "trackingNumber": "TRK-1",
            "address": "Valiasr St",
            "lat": 35.7595,
            "lng": 51.3801,
            "status": "pending",
            "order": 2,
            "createdAt": 1700000000000,
            "updatedAt": 1700000000000,
        },
        "BAD-LAT": {"trackingNumber": "BAD-LAT", "address": "x", "lat": 200, "lng": 51.0, "status": "pending"},
        "NO-NUMBER": {"address": "no tracking number", "status": "pending"},
    }
    storage.path.write_text(json.dumps(records), encoding="utf-8")

    packages = storage.list_packages()

    assert [p.tracking_number for p in packages] == ["TRK-1"]
    package = packages[0]
    assert package.latitude == pytest.approx(35.7595)
    assert package.longitude == pytest.approx(51.3801)
    assert package.visit_index == 2
    assert package.created_at.year == 2023


def test_corrupt_store_raises_value_error(storage: PackageStorage) -> None:
    storage.path.write_text('"just a string"', encoding="utf-8")

    with pytest.raises(ValueError):
        storage.list_packages()
