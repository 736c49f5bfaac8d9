"""Component management utilities backed by a disjoint-set union structure."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Set


class DisjointSetUnion:
    """Disjoint set union with path compression and canonical minimum roots."""

    def __init__(self) -> None:
        self._parent: Dict[int, int] = {}

    def _ensure(self, item: int) -> None:
        if item not in self._parent:
            self._parent[item] = item

    def find(self, item: int) -> int:
        self._ensure(item)
        parent = self._parent[item]
        if parent != item:
            parent = self.find(parent)
            self._parent[item] = parent
        return parent

    def union(self, a: int, b: int) -> int:
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return root_a
        # Always keep the smaller id as the canonical representative to retain determinism.
        if root_a < root_b:
            self._parent[root_b] = root_a
            return root_a
        self._parent[root_a] = root_b
        return root_b


class ComponentManager:
    """Tracks which rooms are joined by corridors."""

    def __init__(self, room_ids: Iterable[int] = ()) -> None:
        self._dsu = DisjointSetUnion()
        self._room_ids: List[int] = []
        for room_id in room_ids:
            self.register_room(room_id)

    def register_room(self, room_id: int) -> int:
        if room_id < 0:
            raise ValueError(f"Room ids must be non-negative, got {room_id}")
        self._room_ids.append(room_id)
        return self._dsu.find(room_id)

    def connect(self, room_a_id: int, room_b_id: int) -> int:
        """Join the components of two rooms and return the merged root."""
        return self._dsu.union(room_a_id, room_b_id)

    def has_single_component(self) -> bool:
        return len(self._active_components()) <= 1

    def _active_components(self) -> Set[int]:
        return {self._dsu.find(room_id) for room_id in self._room_ids}

    def component_summary(self) -> Dict[int, List[int]]:
        summary: Dict[int, List[int]] = defaultdict(list)
        for room_id in self._room_ids:
            summary[self._dsu.find(room_id)].append(room_id)
        return dict(summary)

    def component_sizes(self) -> Dict[int, int]:
        return {root: len(members) for root, members in self.component_summary().items()}

    def total_components(self) -> int:
        return len(self._active_components())
