"""Category catalog and the active (displayed) subset.

The catalog is static; the active set is an immutable snapshot handed to each
render pass. Toggling returns a new set, never mutates the old one.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from circumplex.engine.errors import InvalidInput
from circumplex.utils.color import RGB, parse_hex, to_hex


@dataclass(frozen=True)
class Category:
    """One emotion: stable id, display name and colour."""

    id: str
    name: str
    color: RGB

    @classmethod
    def from_hex(cls, id: str, name: str, color: str) -> Category:
        rgb = parse_hex(color)
        if rgb is None:
            raise InvalidInput(f"Invalid colour for category {id!r}: {color!r}")
        return cls(id=id, name=name, color=rgb)

    @property
    def hex_color(self) -> str:
        return to_hex(self.color)


class Catalog:
    """Ordered, id-unique collection of categories."""

    def __init__(self, categories: Iterable[Category]) -> None:
        self._categories: list[Category] = list(categories)
        if not self._categories:
            raise InvalidInput("Category catalog is empty")
        self._by_id: dict[str, Category] = {}
        for c in self._categories:
            if c.id in self._by_id:
                raise InvalidInput(f"Duplicate category ID: {c.id}")
            self._by_id[c.id] = c

    def __len__(self) -> int:
        return len(self._categories)

    def __iter__(self) -> Iterator[Category]:
        return iter(self._categories)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._by_id

    def get(self, category_id: str) -> Category:
        try:
            return self._by_id[category_id]
        except KeyError:
            raise InvalidInput(f"Unknown category: {category_id!r}") from None

    @property
    def ids(self) -> list[str]:
        return [c.id for c in self._categories]


class ActiveSet:
    """Ordered set of distinct category ids. Never empty."""

    __slots__ = ("_ids",)

    def __init__(self, ids: Iterable[str]) -> None:
        ids = tuple(ids)
        if not ids:
            raise InvalidInput("Active set must contain at least one category")
        if len(set(ids)) != len(ids):
            raise InvalidInput(f"Active set has duplicate ids: {list(ids)}")
        self._ids = ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ids)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._ids

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ActiveSet):
            return NotImplemented
        return self._ids == other._ids

    def __hash__(self) -> int:
        return hash(self._ids)

    def __repr__(self) -> str:
        return f"ActiveSet({list(self._ids)!r})"

    @property
    def ids(self) -> tuple[str, ...]:
        return self._ids

    def toggle(self, category_id: str) -> ActiveSet:
        """Remove the id if present, append it otherwise.

        Raises InvalidInput when the toggle would leave the set empty.
        """
        if category_id in self._ids:
            if len(self._ids) == 1:
                raise InvalidInput(f"Cannot deactivate {category_id!r}: it is the last active category")
            return ActiveSet(i for i in self._ids if i != category_id)
        return ActiveSet((*self._ids, category_id))

    def arranged(self, catalog: Catalog) -> list[Category]:
        """Active categories in catalog order; that order fixes their angular slots."""
        for category_id in self._ids:
            if category_id not in catalog:
                raise InvalidInput(f"Unknown category: {category_id!r}")
        return [c for c in catalog if c.id in self._ids]


EMOTIONS = Catalog([
    Category.from_hex("fear", "Fear", "#8B5CF6"),
    Category.from_hex("joy", "Joy", "#FFD700"),
    Category.from_hex("sadness", "Sadness", "#00D4FF"),
    Category.from_hex("surprise", "Surprise", "#F59E0B"),
    Category.from_hex("anger", "Anger", "#FF4757"),
    Category.from_hex("disgust", "Disgust", "#10B981"),
    Category.from_hex("anticipation", "Anticipation", "#9D4EDD"),
    Category.from_hex("trust", "Trust", "#06D6A0"),
    Category.from_hex("love", "Love", "#FF6B9D"),
    Category.from_hex("confusion", "Confusion", "#FB8500"),
    Category.from_hex("excitement", "Excitement", "#FF006E"),
    Category.from_hex("calm", "Calm", "#4ECDC4"),
    Category.from_hex("hope", "Hope", "#45B7D1"),
    Category.from_hex("frustration", "Frustration", "#E74C3C"),
    Category.from_hex("gratitude", "Gratitude", "#F39C12"),
    Category.from_hex("compassion", "Compassion", "#A855F7"),
])

DEFAULT_ACTIVE_IDS = ("joy", "sadness", "anger", "love")


def default_active_set() -> ActiveSet:
    return ActiveSet(DEFAULT_ACTIVE_IDS)
