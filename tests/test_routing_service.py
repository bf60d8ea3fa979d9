import json
from pathlib import Path

import pytest

from courier_routing.models.domain import Package, PackageStatus, Position
from courier_routing.persistence.filesystem import FileStorage
from courier_routing.persistence.packages import PackageStorage
from courier_routing.schemas.routing import PositionModel, RoutingRequest
from courier_routing.services.location.tracking import LocationTracker
from courier_routing.services.routing import service as routing_service


def _package(number: str, lat: float | None, lon: float | None, status: PackageStatus = PackageStatus.PENDING) -> Package:
    return Package(tracking_number=number, address=f"Address {number}", status=status, latitude=lat, longitude=lon)


@pytest.fixture
def files(tmp_path: Path) -> FileStorage:
    return FileStorage(root=tmp_path)


@pytest.fixture
def storage(tmp_path: Path, files: FileStorage) -> PackageStorage:
    store = PackageStorage(path=tmp_path / "packages.json", files=files)
    store.save_package(_package("FAR", 35.75, 51.389))
    store.save_package(_package("NEAR", 35.70, 51.389))
    store.save_package(_package("NOWHERE", None, None))
    store.save_package(_package("DONE", 35.69, 51.389, status=PackageStatus.DELIVERED))
    store.save_package(_package("MID", 35.72, 51.389))
    return store


@pytest.fixture
def tracker(files: FileStorage) -> LocationTracker:
    return LocationTracker(storage=files)


def test_optimize_uses_tracked_position_and_persists_order(storage, tracker):
    tracker.record(Position(35.6892, 51.389))

    response = routing_service.optimize_pending_packages(RoutingRequest(), storage=storage, tracker=tracker)

    assert [stop.tracking_number for stop in response.stops] == ["NEAR", "MID", "FAR"]
    assert [stop.visit_index for stop in response.stops] == [1, 2, 3]
    assert response.summary.stop_count == 3
    assert response.summary.total_distance_km == pytest.approx(6.77, abs=0.05)
    assert response.summary.estimated_minutes == 14
    assert response.metadata["skipped"] == ["NOWHERE"]
    assert response.metadata["persisted"] == 3

    ordered = storage.packages_by_order()
    assert [(p.tracking_number, p.visit_index) for p in ordered] == [("NEAR", 1), ("MID", 2), ("FAR", 3)]
    assert storage.get_package("DONE").visit_index is None


def test_optimize_prefers_explicit_start(storage, tracker):
    tracker.record(Position(35.6892, 51.389))
    payload = RoutingRequest(start=PositionModel(latitude=35.80, longitude=51.389), persist=False)

    response = routing_service.optimize_pending_packages(payload, storage=storage, tracker=tracker)

    assert [stop.tracking_number for stop in response.stops] == ["FAR", "MID", "NEAR"]
    assert "persisted" not in response.metadata
    assert storage.packages_by_order() == []


def test_optimize_without_location_raises(storage, tracker):
    with pytest.raises(ValueError, match="location"):
        routing_service.optimize_pending_packages(RoutingRequest(), storage=storage, tracker=tracker)


def test_optimize_without_pending_packages_raises(tmp_path, tracker):
    empty = PackageStorage(path=tmp_path / "empty.json")
    tracker.record(Position(35.6892, 51.389))

    with pytest.raises(ValueError, match="No pending packages"):
        routing_service.optimize_pending_packages(RoutingRequest(), storage=empty, tracker=tracker)


def test_optimize_when_no_package_has_coordinates_raises(tmp_path, tracker):
    store = PackageStorage(path=tmp_path / "nocoords.json")
    store.save_package(_package("NOWHERE", None, None))
    tracker.record(Position(35.6892, 51.389))

    with pytest.raises(ValueError, match="no pending package has coordinates"):
        routing_service.optimize_pending_packages(RoutingRequest(), storage=store, tracker=tracker)


def test_optimize_custom_speed(storage, tracker):
    tracker.record(Position(35.6892, 51.389))
    payload = RoutingRequest(average_speed_kmh=60, persist=False)

    response = routing_service.optimize_pending_packages(payload, storage=storage, tracker=tracker)

    assert response.summary.average_speed_kmh == 60
    assert response.summary.estimated_minutes == 7


def test_optimize_writes_run_outputs(tmp_path, storage, tracker, files):
    tracker.record(Position(35.6892, 51.389))
    payload = RoutingRequest(save_outputs=True)

    response = routing_service.optimize_pending_packages(payload, storage=storage, tracker=tracker, files=files)

    run_dirs = list((tmp_path / "outputs").iterdir())
    assert len(run_dirs) == 1
    run_dir = run_dirs[0]
    assert Path(response.metadata["run_directory"]).name == run_dir.name

    summary = json.loads((run_dir / "summary.json").read_text(encoding="utf-8"))
    assert summary["summary"]["stop_count"] == 3
    stops_csv = (run_dir / "stops.csv").read_text(encoding="utf-8")
    assert stops_csv.startswith("visit_index,tracking_number")
    assert "NEAR" in stops_csv and "FAR" in stops_csv

    geojson = json.loads((run_dir / "route.geojson").read_text(encoding="utf-8"))
    kinds = [feature["properties"]["kind"] for feature in geojson["features"]]
    assert kinds == ["start", "stop", "stop", "stop", "route"]
    line = geojson["features"][-1]["geometry"]
    assert line["type"] == "LineString"
    assert line["coordinates"][0] == [51.389, 35.6892]


def test_route_overlay_in_metadata(storage, tracker):
    tracker.record(Position(35.6892, 51.389))

    response = routing_service.optimize_pending_packages(
        RoutingRequest(persist=False), storage=storage, tracker=tracker
    )

    overlay = response.metadata["map_overlays"]["route"]
    assert overlay["type"] == "FeatureCollection"
    assert len(overlay["features"]) == 5


def test_cluster_pending_packages(storage):
    response = routing_service.cluster_pending_packages(3.0, storage=storage)

    assert response.radius_km == 3.0
    assert response.skipped == ["NOWHERE"]
    assert [cluster.tracking_numbers for cluster in response.clusters] == [["FAR"], ["NEAR", "MID"]]
