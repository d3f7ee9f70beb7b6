from typing import Iterable, List, Optional, Sequence


class SelectionError(ValueError):
    pass


class MultiSelect:
    """Chip picker over a fixed vocabulary, with an optional selection limit."""

    def __init__(self, options: Sequence[str], selected: Iterable[str] = (), limit: Optional[int] = None):
        self.options = list(options)
        self.limit = limit
        self.selected: List[str] = []
        for value in selected:
            self.add(value)

    def _check(self, value: str) -> None:
        if value not in self.options:
            raise SelectionError(f"Unknown option: {value}")

    def add(self, value: str) -> None:
        self._check(value)
        if value in self.selected:
            return
        if self.limit is not None and len(self.selected) >= self.limit:
            raise SelectionError(f"You can select up to {self.limit} options")
        self.selected.append(value)

    def remove(self, value: str) -> None:
        if value in self.selected:
            self.selected.remove(value)

    def toggle(self, value: str) -> None:
        if value in self.selected:
            self.remove(value)
        else:
            self.add(value)

    def clear(self) -> None:
        self.selected = []

    @property
    def full(self) -> bool:
        return self.limit is not None and len(self.selected) >= self.limit

    def available(self, search: str = "") -> List[str]:
        """Options not yet selected, optionally narrowed by a search string."""
        needle = search.strip().lower()
        return [o for o in self.options if o not in self.selected and needle in o.lower()]

    def __contains__(self, value: str) -> bool:
        return value in self.selected

    def __iter__(self):
        return iter(list(self.selected))

    def __len__(self) -> int:
        return len(self.selected)
