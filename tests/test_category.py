"""Tests for categories and the per-import category registry."""

import pytest

from releve.domain.category import (
    UNCATEGORIZED,
    CategoryRegistry,
    CategoryService,
    normalize_category_name,
    split_category,
)
from releve.domain.errors import ConflictError, ValidationError


def test_normalize_category_name():
    assert normalize_category_name("  Courses   /  Marché ") == "Courses / Marché"
    assert normalize_category_name(None) == ""


def test_split_category():
    assert split_category("Courses / Supermarché") == ("Courses", "Supermarché")
    assert split_category("Divers") == ("Divers", "Divers")
    assert split_category("A / B / C") == ("A", "B / C")
    assert split_category(None) == (UNCATEGORIZED, UNCATEGORIZED)


def test_create_and_list(category_service):
    category_service.create_category("Transport / Train")
    category_service.create_category("Courses / Supermarché")

    names = [cat.name for cat in category_service.list_categories()]
    assert names == ["Courses / Supermarché", "Transport / Train"]


def test_create_normalizes_name(category_service):
    category_id = category_service.create_category("  Loisirs   /  Cinéma ")
    assert category_service.get_category(category_id).name == "Loisirs / Cinéma"


def test_create_duplicate(category_service):
    category_service.create_category("Loisirs / Cinéma")
    with pytest.raises(ConflictError):
        category_service.create_category("Loisirs  / Cinéma")


def test_create_empty_name(category_service):
    with pytest.raises(ValidationError):
        category_service.create_category("   ")


def test_categories_are_owner_scoped(temp_db, category_service):
    category_id = category_service.create_category("Loisirs / Cinéma")
    other = CategoryService(temp_db, "bob")

    assert other.get_category(category_id) is None
    assert other.list_categories() == []
    # Same name is allowed for another owner
    other.create_category("Loisirs / Cinéma")


def test_category_groups(category_service):
    category_service.create_category("Transport / Train")
    category_service.create_category("Transport / VTC")
    category_service.create_category("Divers")

    groups = category_service.get_category_groups()
    assert list(groups) == ["Divers", "Transport"]
    assert [c.name for c in groups["Transport"]] == ["Transport / Train", "Transport / VTC"]


def test_registry_creates_once(temp_db, category_service, user_id):
    registry = CategoryRegistry(temp_db, user_id)

    first = registry.resolve("Transport / Train")
    second = registry.resolve("  Transport  /  Train ")

    assert first == second
    assert len(registry) == 1
    assert [c.name for c in category_service.list_categories()] == ["Transport / Train"]


def test_registry_reuses_stored_category(temp_db, category_service, user_id):
    existing_id = category_service.create_category("Transport / Train")
    registry = CategoryRegistry(temp_db, user_id)

    assert registry.resolve("Transport / Train") == existing_id
    assert len(category_service.list_categories()) == 1


def test_registry_cache_skips_database(temp_db, user_id, monkeypatch):
    registry = CategoryRegistry(temp_db, user_id)
    category_id = registry.resolve("Transport / Train")

    def fail(*args, **kwargs):
        raise AssertionError("database should not be queried")

    monkeypatch.setattr(temp_db, "find_category_by_name", fail)
    monkeypatch.setattr(temp_db, "create_category", fail)
    assert registry.resolve("Transport / Train") == category_id


def test_registry_recovers_from_concurrent_creation(temp_db, user_id, monkeypatch):
    existing_id = temp_db.create_category(user_id, "Logement / Loyer")
    real_find = temp_db.find_category_by_name
    calls = []

    def racing_find(owner, name):
        calls.append(name)
        if len(calls) == 1:
            return None
        return real_find(owner, name)

    monkeypatch.setattr(temp_db, "find_category_by_name", racing_find)
    registry = CategoryRegistry(temp_db, user_id)

    assert registry.resolve("Logement / Loyer") == existing_id
