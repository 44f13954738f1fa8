"""
Category derivation and per-category editor state.

Categories have no table of their own: they are the distinct non-empty
category values present on skill rows.
"""

from typing import Dict, Iterable, List, Mapping, MutableMapping, Optional, Tuple


def categories(rows: Iterable[Mapping]) -> List[str]:
    """Sorted distinct non-empty category values of the given rows"""
    return sorted({row['category'] for row in rows if row['category']})


def diff_categories(current: Iterable[str], rendered: Iterable[str]) -> Tuple[List[str], List[str]]:
    """Groupings to add and to remove so that `rendered` matches `current`"""
    current, rendered = set(current), set(rendered)
    return sorted(current - rendered), sorted(rendered - current)


class ExperienceSelection:
    """
    Editor state for the experience view, kept in a session-like mapping.

    Holds the active category and, independently for each category, the id
    of the row selected for editing. Selecting a row only ever touches its
    own category's entry.
    """

    KEY = 'experience_state'

    def __init__(self, store: MutableMapping):
        self._store = store
        state = store.get(self.KEY) or {}
        self._active: Optional[str] = state.get('active')
        self._selected: Dict[str, int] = dict(state.get('selected') or {})

    @property
    def active_category(self) -> Optional[str]:
        return self._active

    def selected_id(self, category: Optional[str] = None) -> Optional[int]:
        category = category if category is not None else self._active
        if category is None:
            return None
        return self._selected.get(category)

    def activate(self, category: Optional[str]) -> None:
        """Switch the active category and reset the form"""
        if self._active is not None:
            self._selected.pop(self._active, None)
        if category is not None:
            self._selected.pop(category, None)
        self._active = category
        self._save()

    def select(self, category: str, row_id: int) -> None:
        self._selected[category] = row_id
        self._save()

    def clear(self, category: Optional[str] = None) -> None:
        category = category if category is not None else self._active
        if category is not None:
            self._selected.pop(category, None)
            self._save()

    def reset(self, category: str) -> None:
        """Forget everything about a category that was added or deleted"""
        self._selected.pop(category, None)
        if self._active == category:
            self._active = None
        self._save()

    def sync(self, current: Iterable[str]) -> None:
        """Drop state for categories that no longer exist"""
        current = set(current)
        for category in list(self._selected):
            if category not in current:
                del self._selected[category]
        if self._active not in current:
            self._active = None
        self._save()

    def to_dict(self) -> dict:
        return {
            'active_category': self._active,
            'selected_id': self.selected_id(),
            'selected': dict(self._selected),
        }

    def _save(self) -> None:
        self._store[self.KEY] = {'active': self._active, 'selected': dict(self._selected)}
