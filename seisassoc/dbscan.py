"""Density-based spatial clustering (DBSCAN) of observations."""

from __future__ import annotations

import math
from collections import deque
from collections.abc import Sequence
from numbers import Real

NOISE = -1


def _as_rows(observations: Sequence) -> list[tuple[float, ...]]:
    """Turn observations into rows of floats with one shared feature count.

    Each observation is either a number (a single feature) or a sequence
    of numbers.
    """
    rows = []
    for observation in observations:
        if isinstance(observation, Real):
            rows.append((float(observation),))
        else:
            rows.append(tuple(float(v) for v in observation))
    if not rows:
        raise ValueError("No observations")
    n_features = len(rows[0])
    if n_features < 1:
        raise ValueError("No features")
    for row in rows:
        if len(row) != n_features:
            raise ValueError(
                f"observation has {len(row)} features; expected {n_features}")
    return rows


class DBSCAN:
    """Brute-force DBSCAN with optional observation weights.

    A point is a core point when the summed weight of the points within
    epsilon of it, itself included, reaches the minimum number of
    observations.  Clusters are numbered from 0 in the order in which their
    first core point appears; points belonging to no cluster get -1.
    """

    def __init__(self) -> None:
        self.clear()

    def clear(self) -> None:
        """Reset the clusterer to its uninitialized state."""
        self._rows: list[tuple[float, ...]] = []
        self._weights: list[float] = []
        self._labels: list[int] = []
        self._epsilon = 3.0
        self._min_observations = 5
        self._n_clusters = 0
        self._have_weights = False
        self._have_data = False
        self._have_clusters = False
        self._initialized = False

    def initialize(self, epsilon: float, min_observations: int) -> None:
        """Set the neighbourhood radius and the minimum cluster weight."""
        self.clear()
        if epsilon < 0:
            raise ValueError(f"epsilon = {epsilon:f} must be non-negative")
        if min_observations < 1:
            raise ValueError(
                f"minObservations = {min_observations} must be positive")
        self._epsilon = float(epsilon)
        self._min_observations = int(min_observations)
        self._initialized = True

    def _reset_data(self) -> None:
        self._have_data = False
        self._have_clusters = False
        self._have_weights = False
        if not self._initialized:
            raise RuntimeError("Class not initialized")

    def set_data(self, observations: Sequence) -> None:
        """Set unweighted observations (numbers or feature sequences)."""
        self._reset_data()
        rows = _as_rows(observations)
        self._rows = rows
        self._weights = [1.0] * len(rows)
        self._have_data = True

    def set_weighted_data(self, observations: Sequence,
                          weights: Sequence[float]) -> None:
        """Set observations together with one positive weight for each."""
        self._reset_data()
        rows = _as_rows(observations)
        if len(weights) != len(rows):
            raise ValueError(
                f"weights.size = {len(weights)} does not equal {len(rows)}")
        weights = [float(w) for w in weights]
        if min(weights) <= 0:
            raise ValueError("All weights must be positive")
        self._rows = rows
        self._weights = weights
        self._have_weights = True
        self._have_data = True

    def cluster(self) -> None:
        """Cluster the observations that were set."""
        self._have_clusters = False
        self._labels = []
        if not self._initialized:
            raise RuntimeError("Class not initialized")
        if not self._have_data:
            raise RuntimeError("Data not yet set")

        rows = self._rows
        epsilon = self._epsilon
        neighbours = [
            [j for j, other in enumerate(rows)
             if math.dist(row, other) <= epsilon]
            for row in rows
        ]
        is_core = [
            sum(self._weights[j] for j in hood) >= self._min_observations
            for hood in neighbours
        ]

        labels = [NOISE] * len(rows)
        n_clusters = 0
        for start, core in enumerate(is_core):
            if not core or labels[start] != NOISE:
                continue
            labels[start] = n_clusters
            queue = deque([start])
            while queue:
                point = queue.popleft()
                for j in neighbours[point]:
                    if labels[j] == NOISE:
                        labels[j] = n_clusters
                        if is_core[j]:
                            queue.append(j)
            n_clusters += 1

        self._labels = labels
        self._n_clusters = n_clusters
        self._have_clusters = True

    def is_initialized(self) -> bool:
        """True once initialize() has succeeded."""
        return self._initialized

    def have_data(self) -> bool:
        """True once observations have been set."""
        return self._have_data

    def have_labels(self) -> bool:
        """True once cluster() has run on the current data."""
        return self._have_clusters

    def labels(self) -> list[int]:
        """Cluster label of each observation; -1 marks noise."""
        if not self._have_clusters:
            raise RuntimeError("Clustering not yet done")
        return list(self._labels)

    def number_of_clusters(self) -> int:
        """Number of clusters found by the last clustering."""
        return self._n_clusters