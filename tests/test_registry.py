"""Tests for the file-backed source registry."""

import json

import pytest

from rss_dashboard.registry import SourceRegistry, StorageError


def test_missing_file_is_empty(tmp_path):
    assert SourceRegistry(tmp_path / "sources.json").read_all() == []


def test_append_allocates_max_plus_one(tmp_path):
    path = tmp_path / "sources.json"
    path.write_text(json.dumps([{"id": 4, "name": "Old", "url": "https://old.example.com"}]), encoding="utf-8")
    registry = SourceRegistry(path)

    source = registry.append("New", "https://new.example.com/rss")

    assert source.id == 5
    assert source.sector == "unclassified"
    assert source.category == "unclassified"
    assert [s.id for s in registry.read_all()] == [4, 5]


def test_append_to_empty_registry_starts_at_one(tmp_path):
    registry = SourceRegistry(tmp_path / "sources.json")
    assert registry.append("First", "https://first.example.com").id == 1


def test_ids_are_not_reused_after_delete(tmp_path):
    registry = SourceRegistry(tmp_path / "sources.json")
    registry.append("A", "https://a.example.com")
    registry.append("B", "https://b.example.com")
    registry.remove(1)
    assert registry.append("C", "https://c.example.com").id == 3


def test_replace_is_partial(tmp_path):
    registry = SourceRegistry(tmp_path / "sources.json")
    registry.append("Name", "https://example.com/rss", sector="tech", category="news")

    updated = registry.replace(1, {"name": "Renamed", "url": "", "id": 99})

    assert updated is not None
    assert updated.id == 1
    assert updated.name == "Renamed"
    assert updated.url == "https://example.com/rss"
    assert updated.sector == "tech"
    assert registry.read_all()[0].name == "Renamed"


def test_replace_unknown_id_returns_none(tmp_path):
    registry = SourceRegistry(tmp_path / "sources.json")
    assert registry.replace(42, {"name": "x"}) is None


def test_remove(tmp_path):
    registry = SourceRegistry(tmp_path / "sources.json")
    registry.append("A", "https://a.example.com")
    assert registry.remove(1) is True
    assert registry.remove(1) is False
    assert registry.read_all() == []


def test_remove_matching_by_name_or_url(tmp_path):
    registry = SourceRegistry(tmp_path / "sources.json")
    registry.append("A", "https://a.example.com")
    registry.append("B", "https://b.example.com")
    registry.append("C", "https://c.example.com")

    removed = registry.remove_matching(name="A", url="https://c.example.com")

    assert [s.name for s in removed] == ["A", "C"]
    assert [s.name for s in registry.read_all()] == ["B"]
    assert registry.remove_matching() == []


def test_search_matches_any_field(tmp_path):
    registry = SourceRegistry(tmp_path / "sources.json")
    registry.append("Le Monde", "https://lemonde.fr/rss", sector="press", category="france")
    registry.append("Hacker News", "https://hnrss.org/frontpage", sector="tech")

    assert [s.name for s in registry.search("TECH")] == ["Hacker News"]
    assert [s.name for s in registry.search("france hnrss")] == ["Le Monde", "Hacker News"]
    assert registry.search("   ") == []


def test_file_is_written_as_indented_array(tmp_path):
    path = tmp_path / "sources.json"
    SourceRegistry(path).append("A", "https://a.example.com")
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == [
        {"id": 1, "name": "A", "url": "https://a.example.com", "sector": "unclassified", "category": "unclassified"}
    ]
    assert "\n    " in path.read_text(encoding="utf-8")


@pytest.mark.parametrize("content", ["{not json", '{"id": 1}', '[{"name": "no id"}]'])
def test_corrupt_file_raises_storage_error(tmp_path, content):
    path = tmp_path / "sources.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(StorageError):
        SourceRegistry(path).read_all()
