from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Tuple

from hazard.errors import MapDefinitionError, UnknownTerritoryError


@dataclass(frozen=True)
class Territory:
    id: int
    name: str


TERRITORY_NAMES = [
    # Australia
    "Western Australia",  # 0
    "Eastern Australia",  # 1
    "New Guinea",  # 2
    "Indonesia",  # 3
    # Asia
    "India",  # 4
    "China",  # 5
    "Siberia",  # 6
    "Mongolia",  # 7
    "Japan",  # 8
    "Yakutsk",  # 9
    "Irkutsk",  # 10
    "Afghanistan",  # 11
    "Middle East",  # 12
    "Southeast Asia",  # 13
    "Kamchatka",  # 14
    "Ural",  # 15
]

EDGE_NAMES: List[Tuple[str, str]] = [
    ("Western Australia", "Eastern Australia"),
    ("Western Australia", "Indonesia"),
    ("Eastern Australia", "New Guinea"),
    ("New Guinea", "Indonesia"),
    ("Indonesia", "Southeast Asia"),
    ("Southeast Asia", "China"),
    ("Southeast Asia", "India"),
    ("India", "Afghanistan"),
    ("India", "Middle East"),
    ("India", "China"),
    ("Middle East", "Afghanistan"),
    ("China", "Afghanistan"),
    ("China", "Ural"),
    ("China", "Siberia"),
    ("China", "Mongolia"),
    ("Afghanistan", "Ural"),
    ("Japan", "Mongolia"),
    ("Japan", "Kamchatka"),
    ("Mongolia", "Siberia"),
    ("Mongolia", "Irkutsk"),
    ("Mongolia", "Kamchatka"),
    ("Siberia", "Yakutsk"),
    ("Siberia", "Ural"),
    ("Siberia", "Irkutsk"),
    ("Kamchatka", "Irkutsk"),
    ("Kamchatka", "Yakutsk"),
    ("Yakutsk", "Irkutsk"),
]


class TerritoryGraph:
    """Fixed set of territories and the symmetric adjacency between them.

    Territories are stored in an arena indexed by their id; the adjacency
    list is validated once on construction and never changes afterwards.
    """

    def __init__(self, names: Sequence[str], edges: Sequence[Tuple[int, int]]):
        self._territories: Tuple[Territory, ...] = tuple(
            Territory(index, name) for index, name in enumerate(names)
        )
        adjacency: Dict[int, List[int]] = {t.id: [] for t in self._territories}
        for src, dst in edges:
            if src not in adjacency or dst not in adjacency:
                raise MapDefinitionError(f"Edge ({src}, {dst}) references an unknown territory.")
            if src == dst:
                raise MapDefinitionError(f"Territory {src} cannot border itself.")
            if dst in adjacency[src]:
                continue
            adjacency[src].append(dst)
            adjacency[dst].append(src)
        isolated = [self._territories[i].name for i, n in adjacency.items() if not n]
        if isolated:
            raise MapDefinitionError(f"Territories without neighbours: {', '.join(isolated)}.")
        self._adjacency: Dict[int, Tuple[Territory, ...]] = {
            index: tuple(self._territories[n] for n in neighbors)
            for index, neighbors in adjacency.items()
        }

    @classmethod
    def from_names(
        cls, names: Sequence[str], edge_names: Sequence[Tuple[str, str]]
    ) -> "TerritoryGraph":
        lookup = {name: index for index, name in enumerate(names)}
        try:
            edges = [(lookup[a], lookup[b]) for a, b in edge_names]
        except KeyError as exc:
            raise MapDefinitionError(f"Unknown territory name {exc.args[0]!r} in edge list.") from exc
        return cls(names, edges)

    def __len__(self) -> int:
        return len(self._territories)

    def __iter__(self) -> Iterator[Territory]:
        return iter(self._territories)

    @property
    def territories(self) -> Tuple[Territory, ...]:
        return self._territories

    def has(self, index: int) -> bool:
        return 0 <= index < len(self._territories)

    def territory(self, index: int) -> Territory:
        if not self.has(index):
            raise UnknownTerritoryError(index)
        return self._territories[index]

    def neighbors(self, territory: Territory) -> Tuple[Territory, ...]:
        self._check(territory)
        return self._adjacency[territory.id]

    def sorted_neighbors(self, territory: Territory) -> Tuple[Territory, ...]:
        return tuple(sorted(self.neighbors(territory), key=lambda t: t.id))

    def are_adjacent(self, a: Territory, b: Territory) -> bool:
        return b in self.neighbors(a)

    def _check(self, territory: Territory) -> None:
        if self.territory(territory.id) != territory:
            raise UnknownTerritoryError(territory.id)


def build_world_map() -> TerritoryGraph:
    return TerritoryGraph.from_names(TERRITORY_NAMES, EDGE_NAMES)
