from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Iterable, Iterator, List, Optional

RARITIES = ("common", "uncommon", "rare", "epic", "legendary")


@dataclass(frozen=True)
class CatalogItem:
    id: str
    name: str
    cost: int
    rarity: str


class Catalog:
    """Read-only collection of purchasable tags, keyed by id."""

    def __init__(self, items: Iterable[CatalogItem]) -> None:
        self._items: Dict[str, CatalogItem] = {}
        for item in items:
            if item.id in self._items:
                raise ValueError(f"Duplicate catalog id: {item.id}")
            if not isinstance(item.cost, int) or isinstance(item.cost, bool) or item.cost <= 0:
                raise ValueError(f"Catalog item {item.id} must have a positive integer cost")
            if item.rarity not in RARITIES:
                raise ValueError(f"Catalog item {item.id} has unknown rarity {item.rarity!r}")
            self._items[item.id] = item

    def __iter__(self) -> Iterator[CatalogItem]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, tag_id: object) -> bool:
        return tag_id in self._items

    def get(self, tag_id: str) -> Optional[CatalogItem]:
        return self._items.get(tag_id)

    def as_dicts(self) -> List[dict]:
        return [asdict(item) for item in self]


def default_catalog() -> Catalog:
    return Catalog(
        [
            CatalogItem("green-1", "Green Sprout", 10, "common"),
            CatalogItem("green-2", "Leaf Collector", 20, "common"),
            CatalogItem("green-3", "Eco Friend", 30, "common"),
            CatalogItem("green-4", "Tree Hugger", 40, "uncommon"),
            CatalogItem("green-5", "Recycle Pro", 50, "uncommon"),
            CatalogItem("green-6", "Compost King", 60, "uncommon"),
            CatalogItem("green-7", "Sustain Guru", 75, "rare"),
            CatalogItem("green-8", "Planet Pal", 90, "rare"),
            CatalogItem("green-9", "Forest Friend", 110, "rare"),
            CatalogItem("green-10", "Eco Guardian", 140, "epic"),
            CatalogItem("green-11", "Green Baron", 180, "epic"),
            CatalogItem("green-12", "Leaf Knight", 220, "legendary"),
            CatalogItem("green-13", "The Great Tree", 300, "legendary"),
            CatalogItem("green-14", "Green Emperor", 350, "legendary"),
            CatalogItem("green-15", "Sapling Star", 25, "common"),
            CatalogItem("green-16", "Branch Buddy", 35, "common"),
            CatalogItem("green-17", "Garden Guru", 55, "uncommon"),
            CatalogItem("green-18", "Earth Ally", 95, "rare"),
            CatalogItem("green-19", "Nature Noble", 160, "epic"),
            CatalogItem("green-20", "Verdant Voice", 250, "legendary"),
        ]
    )
