"""Proximity grouping of delivery targets."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import DeliveryTarget
from ..geospatial import haversine_km

DEFAULT_CLUSTER_RADIUS_KM = 2.0


def cluster_targets(
    targets: Sequence[DeliveryTarget],
    radius_km: float = DEFAULT_CLUSTER_RADIUS_KM,
) -> list[list[DeliveryTarget]]:
    """Group targets around seeds taken in input order.

    Each unclustered target seeds a cluster and absorbs every other unclustered
    target within ``radius_km`` of the seed. Membership is measured against the
    seed only, so two members of one cluster may be more than ``radius_km``
    apart. Targets without coordinates are left out.
    """

    candidates = [target for target in targets if target.has_coordinates]
    clustered: set[int] = set()
    clusters: list[list[DeliveryTarget]] = []

    for seed_idx, seed in enumerate(candidates):
        if seed_idx in clustered:
            continue
        clustered.add(seed_idx)
        cluster = [seed]
        for other_idx, other in enumerate(candidates):
            if other_idx in clustered:
                continue
            distance = haversine_km(seed.latitude, seed.longitude, other.latitude, other.longitude)
            if distance <= radius_km:
                cluster.append(other)
                clustered.add(other_idx)
        clusters.append(cluster)

    return clusters
