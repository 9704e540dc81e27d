from __future__ import annotations

import copy
import logging
import re
from dataclasses import asdict, dataclass
from typing import Callable, Dict, List, Optional

from .config import TAGS_KEY
from .storage import JsonStore

logger = logging.getLogger(__name__)


@dataclass
class TagCategory:
    id: str
    name: str
    color: str


DEFAULT_CATEGORIES = [
    TagCategory("mistakes", "Mistakes", "#ef4444"),
    TagCategory("custom", "Custom Tags", "#10b981"),
    TagCategory("reviewed", "Review Status", "#22c55e"),
]
DEFAULT_TAGS = {"mistakes": [], "custom": [], "reviewed": ["Reviewed", "Not Reviewed"]}


class TagCatalog:
    """Tag categories and the tags inside them; listeners fire on every change."""

    def __init__(self, store: Optional[JsonStore] = None):
        self.store = store
        self.categories: List[TagCategory] = copy.deepcopy(DEFAULT_CATEGORIES)
        self.tags: Dict[str, List[str]] = copy.deepcopy(DEFAULT_TAGS)
        self._listeners: List[Callable[[], None]] = []
        if store is not None:
            self._load()

    def _load(self) -> None:
        raw = self.store.get(TAGS_KEY)
        if not raw:
            return
        try:
            categories = [TagCategory(**c) for c in raw["categories"]]
            tags = {str(k): [str(t) for t in v] for k, v in raw["tags"].items()}
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning("Stored tag catalogue could not be read, using defaults: %s", e)
            return
        self.categories, self.tags = categories, tags

    def _changed(self) -> None:
        if self.store is not None:
            self.store.set(TAGS_KEY, {"categories": [asdict(c) for c in self.categories], "tags": self.tags})
        for cb in list(self._listeners):
            cb()

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        self._listeners.append(callback)

        def _unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return _unsubscribe

    # ---------- reads ----------
    def get_categories(self) -> List[TagCategory]:
        return list(self.categories)

    def get_category(self, category_id: str) -> Optional[TagCategory]:
        return next((c for c in self.categories if c.id == category_id), None)

    def get_tags(self, category_id: str) -> List[str]:
        return list(self.tags.get(category_id, []))

    def get_all_tags(self) -> Dict[str, List[str]]:
        return {k: list(v) for k, v in self.tags.items()}

    # ---------- writes ----------
    def add_category(self, name: str, color: str, category_id: Optional[str] = None) -> TagCategory:
        """Add a category; an existing id returns the existing category unchanged."""
        cid = category_id or re.sub(r"\s+", "-", name.lower())
        existing = self.get_category(cid)
        if existing is not None:
            return existing
        cat = TagCategory(cid, name, color)
        self.categories.append(cat)
        self.tags[cid] = []
        self._changed()
        return cat

    def update_category(self, category_id: str, **updates) -> None:
        cat = self.get_category(category_id)
        if cat is None:
            return
        for key in ("name", "color"):
            if key in updates:
                setattr(cat, key, updates[key])
        self._changed()

    def remove_category(self, category_id: str) -> None:
        self.categories = [c for c in self.categories if c.id != category_id]
        self.tags.pop(category_id, None)
        self._changed()

    def add_tag(self, category_id: str, tag: str) -> None:
        bucket = self.tags.setdefault(category_id, [])
        if tag not in bucket:
            bucket.append(tag)
            self._changed()

    def remove_tag(self, category_id: str, tag: str) -> None:
        if category_id in self.tags:
            self.tags[category_id] = [t for t in self.tags[category_id] if t != tag]
            self._changed()
