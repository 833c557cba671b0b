"""
Cursor-based containers used by the note collection and each todo list.

- SelectionList: ordered items with a single selection cursor
- TabBar: wrapping tab view derived from a SelectionList of titled items
"""
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, TypeVar

T = TypeVar("T")


class SelectionList(Generic[T]):
    """
    Ordered list with one selected index.

    The cursor is always in [0, len) or 0 when the list is empty. Every
    operation is a no-op when it has nothing to act on, so callers never
    need to guard against an empty list.
    """

    def __init__(self, items: Optional[List[T]] = None, selected: int = 0):
        self.items: List[T] = list(items) if items else []
        self.selected = 0
        self.select(selected)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __getitem__(self, index: int) -> T:
        return self.items[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SelectionList):
            return NotImplemented
        return self.items == other.items and self.selected == other.selected

    def __repr__(self) -> str:
        return f"SelectionList(items={self.items!r}, selected={self.selected})"

    def is_empty(self) -> bool:
        return not self.items

    def append(self, item: T):
        """Append item to the end (cursor unchanged)."""
        self.items.append(item)

    def remove_at(self, index: int) -> Optional[T]:
        """
        Remove the item at index.

        Args:
            index: Position of item to remove

        Returns:
            Removed item, or None if index was out of range
        """
        if not 0 <= index < len(self.items):
            return None

        removed = self.items.pop(index)

        # Keep pointing at the same item when something before it went away
        if index < self.selected:
            self.selected -= 1
        # Selected item was last: clamp to the new end
        if self.selected >= len(self.items):
            self.selected = max(0, len(self.items) - 1)

        return removed

    def replace_at(self, index: int, item: T) -> bool:
        """
        Replace the item at index in place.

        Returns:
            True if replaced, False if index was out of range
        """
        if not 0 <= index < len(self.items):
            return False
        self.items[index] = item
        return True

    def select(self, index: int):
        """Select index, clamped into range."""
        if not self.items:
            self.selected = 0
            return
        self.selected = max(0, min(index, len(self.items) - 1))

    def select_previous(self):
        if self.selected > 0:
            self.selected -= 1

    def select_next(self):
        if self.selected < len(self.items) - 1:
            self.selected += 1

    def get_selected(self) -> Optional[T]:
        """Get selected item, or None if the list is empty."""
        if 0 <= self.selected < len(self.items):
            return self.items[self.selected]
        return None

    def to_dict(self, encode: Callable[[T], Any]) -> Dict[str, Any]:
        """
        Convert to dictionary for serialization.

        Args:
            encode: Converts one item to a JSON-compatible value
        """
        return {
            "items": [encode(item) for item in self.items],
            "selected": self.selected,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], decode: Callable[[Any], T]) -> "SelectionList[T]":
        """
        Create SelectionList from dictionary.

        An out-of-range "selected" is clamped rather than rejected.

        Raises:
            ValueError: If data is not an object or "items" is not a list
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected an object, got {type(data).__name__}")
        raw_items = data.get("items", [])
        if not isinstance(raw_items, list):
            raise ValueError(f"'items' must be a list, got {raw_items!r}")
        items = [decode(item) for item in raw_items]
        selected = data.get("selected", 0)
        if not isinstance(selected, int) or isinstance(selected, bool):
            raise ValueError(f"'selected' must be an integer, got {selected!r}")
        return cls(items, selected)


class TabBar:
    """
    Tab strip over a SelectionList of items that have a ``title``.

    Holds no state of its own: titles are read from the items and the
    active tab is the list's cursor, so the bar always has exactly one
    tab per item, in item order.
    """

    def __init__(self, source: SelectionList):
        self._source = source

    @property
    def titles(self) -> List[str]:
        return [item.title for item in self._source]

    @property
    def index(self) -> int:
        return self._source.selected

    def __len__(self) -> int:
        return len(self._source)

    def next(self):
        """Activate the next tab, wrapping to the first."""
        if not len(self._source):
            return
        self._source.select((self._source.selected + 1) % len(self._source))

    def previous(self):
        """Activate the previous tab, wrapping to the last."""
        if not len(self._source):
            return
        self._source.select((self._source.selected - 1) % len(self._source))
