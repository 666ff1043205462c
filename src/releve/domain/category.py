"""Category domain service."""

import logging
import re
from typing import Optional

from releve.database.base import Database
from releve.domain.entities import Category as CategoryEntity
from releve.domain.errors import (
    ConflictError,
    ValidationError,
    duplicate_category,
)

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Non catégorisé"
GROUP_SEPARATOR = "/"

_WHITESPACE_RUN_RE = re.compile(r"\s{2,}")


def normalize_category_name(name: Optional[str]) -> str:
    """Trim a category name and collapse runs of internal whitespace."""
    return _WHITESPACE_RUN_RE.sub(" ", (name or "").strip())


def split_category(name: Optional[str]) -> tuple[str, str]:
    """Split a "Group / Subgroup" name into its two levels.

    Names without a separator are their own group and subgroup, and a
    missing name maps to the uncategorized sentinel on both levels.
    """
    if not name or not name.strip():
        return (UNCATEGORIZED, UNCATEGORIZED)
    parts = [p.strip() for p in name.split(GROUP_SEPARATOR) if p.strip()]
    if len(parts) >= 2:
        return (parts[0], " / ".join(parts[1:]))
    return (name.strip(), name.strip())


class CategoryService:
    """Service for managing an owner's categories."""

    def __init__(self, db: Database, user_id: str):
        """Initialize category service.

        Args:
            db: Database instance
            user_id: Owner of the categories
        """
        self.db = db
        self.user_id = user_id

    def create_category(self, name: str) -> int:
        """Create a category.

        Args:
            name: Category name, e.g. "Courses / Supermarché"

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If the owner already has this category
        """
        norm = normalize_category_name(name)
        if not norm:
            raise ValidationError("Category name is required")
        if self.db.find_category_by_name(self.user_id, norm) is not None:
            raise ConflictError(duplicate_category(norm))
        return self.db.create_category(self.user_id, norm)

    def get_category(self, category_id: int) -> Optional[CategoryEntity]:
        """Get category by ID, None if missing or owned by someone else."""
        return self.db.get_category(category_id, self.user_id)

    def get_category_by_name(self, name: str) -> Optional[CategoryEntity]:
        """Get category by name (normalized before lookup)."""
        return self.db.find_category_by_name(self.user_id, normalize_category_name(name))

    def list_categories(self) -> list[CategoryEntity]:
        """List categories ordered by name."""
        return self.db.list_categories(self.user_id)

    def get_category_groups(self) -> dict[str, list[CategoryEntity]]:
        """Group categories by the first level of their name.

        Returns:
            Group name -> categories in that group, both in name order
        """
        groups: dict[str, list[CategoryEntity]] = {}
        for cat in self.list_categories():
            group, _ = split_category(cat.name)
            groups.setdefault(group, []).append(cat)
        return groups


class CategoryRegistry:
    """Name -> ID resolution for the duration of one import call.

    Each distinct normalized name is looked up (or created) in the database
    at most once per registry. Create a new registry for every import.
    """

    def __init__(self, db: Database, user_id: str):
        self.db = db
        self.user_id = user_id
        self._cache: dict[str, int] = {}

    def resolve(self, name: str) -> int:
        """Return the ID of the named category, creating it on first use.

        Args:
            name: Category name; normalized before lookup

        Returns:
            Category ID
        """
        norm = normalize_category_name(name)
        cached = self._cache.get(norm)
        if cached is not None:
            return cached

        existing = self.db.find_category_by_name(self.user_id, norm)
        if existing is not None:
            self._cache[norm] = existing.id
            return existing.id

        try:
            category_id = self.db.create_category(self.user_id, norm)
            logger.info("Created category '%s' for %s", norm, self.user_id)
        except ConflictError:
            # Another import created it between our lookup and insert
            existing = self.db.find_category_by_name(self.user_id, norm)
            if existing is None:
                raise
            category_id = existing.id

        self._cache[norm] = category_id
        return category_id

    def __len__(self) -> int:
        return len(self._cache)
