from courier_routing.models.domain import DeliveryTarget
from courier_routing.services.geospatial import haversine_km
from courier_routing.services.routing.clustering import cluster_targets


def _target(identifier: str, lat: float | None, lon: float | None) -> DeliveryTarget:
    return DeliveryTarget(identifier=identifier, latitude=lat, longitude=lon)


def test_cluster_targets_groups_around_seed():
    seed = _target("SEED", 35.700, 51.40)
    north = _target("NORTH", 35.709, 51.40)
    south = _target("SOUTH", 35.691, 51.40)
    far = _target("FAR", 35.800, 51.40)

    clusters = cluster_targets([seed, north, far, south], radius_km=1.5)

    assert [[t.identifier for t in cluster] for cluster in clusters] == [
        ["SEED", "NORTH", "SOUTH"],
        ["FAR"],
    ]


def test_cluster_members_are_measured_against_seed_only():
    seed = _target("SEED", 35.700, 51.40)
    north = _target("NORTH", 35.709, 51.40)
    south = _target("SOUTH", 35.691, 51.40)

    clusters = cluster_targets([seed, north, south], radius_km=1.5)

    assert len(clusters) == 1
    assert haversine_km(north.latitude, north.longitude, south.latitude, south.longitude) > 1.5


def test_cluster_targets_excludes_missing_coordinates():
    targets = [
        _target("A", 35.70, 51.40),
        _target("NONE", None, None),
        _target("B", 35.90, 51.60),
    ]

    clusters = cluster_targets(targets)
    identifiers = [t.identifier for cluster in clusters for t in cluster]

    assert sorted(identifiers) == ["A", "B"]
    assert all(cluster for cluster in clusters)


def test_cluster_targets_empty():
    assert cluster_targets([]) == []
