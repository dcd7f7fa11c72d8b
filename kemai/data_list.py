"""Id/name lists for the customer, project and activity pickers."""

from __future__ import annotations

from enum import Enum, auto
from typing import Any, Iterable, Iterator


class CompletionState(Enum):
    """How typed text relates to the available names."""

    ACCEPTABLE = auto()
    INTERMEDIATE = auto()
    INVALID = auto()


class KimaiDataListModel:
    """Sorted ``(id, name)`` pairs with a leading empty entry.

    Items are any objects with ``id`` and ``name`` attributes.
    """

    def __init__(self) -> None:
        self._entries: list[tuple[int, str]] = []

    def set_kimai_data(self, items: Iterable[Any]) -> None:
        """Replace the entries; an empty input leaves the current ones in place."""
        items = list(items)
        if not items:
            return
        entries = [(0, "")]
        entries.extend((item.id, item.name) for item in items)
        entries.sort(key=lambda entry: entry[1].lower())
        self._entries = entries

    @property
    def entries(self) -> list[tuple[int, str]]:
        return list(self._entries)

    @property
    def names(self) -> list[str]:
        return [name for _, name in self._entries]

    def find_id(self, item_id: int) -> int:
        """Row of the entry with ``item_id``, or -1 when there is none."""
        return next((row for row, (entry_id, _) in enumerate(self._entries) if entry_id == item_id), -1)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[tuple[int, str]]:
        return iter(self._entries)

    def __getitem__(self, row: int) -> tuple[int, str]:
        return self._entries[row]


class KimaiDataFilter:
    """Restricts a list to a set of ids, always keeping the empty entry."""

    def __init__(self) -> None:
        self._ids: list[int] = []

    def set_kimai_filter(self, items: Iterable[Any]) -> None:
        """Keep only the ids of ``items``; an empty input removes the filter."""
        self._ids = [item.id for item in items]

    def accepts(self, item_id: int, name: str) -> bool:
        if not self._ids:
            return True
        return item_id in self._ids or not name

    def apply(self, model: KimaiDataListModel) -> list[tuple[int, str]]:
        """Entries of ``model`` that pass the filter, in order."""
        return [(item_id, name) for item_id, name in model if self.accepts(item_id, name)]


def validate_completion(names: Iterable[str], text: str) -> CompletionState:
    """Judge typed ``text`` against ``names`` the way the picker's validator does."""
    names = list(names)
    if not text or not names:
        return CompletionState.ACCEPTABLE
    folded = text.casefold()
    for name in names:
        if name == text:
            return CompletionState.ACCEPTABLE
        if folded in name.casefold():
            return CompletionState.INTERMEDIATE
    return CompletionState.INVALID