"""Tests for the local cache store."""

import json

import pytest
from Folio.content.merge import merge
from Folio.content.schema import default_document
from Folio.storage.local_cache import (
    FileKeyValueStorage,
    LocalCacheStore,
    MemoryKeyValueStorage,
    PORTFOLIO_CACHE_KEY,
)


@pytest.fixture
def storage(tmp_path):
    return FileKeyValueStorage(tmp_path / "cache")


@pytest.fixture
def cache(storage):
    return LocalCacheStore(storage)


class TestFileKeyValueStorage:
    """Test the file-per-key storage backend."""

    def test_missing_key(self, storage):
        assert storage.get_item("nothing") is None

    def test_set_and_get(self, storage):
        storage.set_item("greeting", "hello")
        assert storage.get_item("greeting") == "hello"

    def test_overwrite(self, storage):
        storage.set_item("k", "one")
        storage.set_item("k", "two")
        assert storage.get_item("k") == "two"

    def test_no_temp_files_left(self, storage):
        storage.set_item("k", "value")
        assert not list(storage.root.glob("*.tmp"))

    def test_remove(self, storage):
        storage.set_item("k", "value")
        storage.remove_item("k")
        storage.remove_item("k")
        assert storage.get_item("k") is None

    def test_rejects_path_like_keys(self, storage):
        with pytest.raises(ValueError):
            storage.get_item("../escape")


class TestLocalCacheStore:
    """Test reading and writing the cached document."""

    def test_read_before_first_write(self, cache):
        assert cache.read() is None

    def test_write_then_read(self, cache):
        doc = merge({"personalInfo": {"name": "Ada"}, "skills": [{"name": "Rust", "level": 99}]})
        cache.write(doc)

        cached = cache.read()
        assert cached == doc.as_partial()
        assert merge(cached) == doc

    def test_write_overwrites(self, cache):
        cache.write(merge({"personalInfo": {"name": "First"}}))
        cache.write(merge({"personalInfo": {"name": "Second"}}))
        assert cache.read().personal_info.name == "Second"

    def test_stored_as_json_under_fixed_key(self, cache, storage):
        cache.write(default_document())
        raw = storage.get_item(PORTFOLIO_CACHE_KEY)
        assert json.loads(raw)["personalInfo"]["name"] == "Your Name"

    def test_corrupt_json_reads_as_absent(self, cache, storage):
        storage.set_item(PORTFOLIO_CACHE_KEY, "{not json")
        assert cache.read() is None

    @pytest.mark.parametrize("raw", ["[]", "\"text\"", "42", "null"])
    def test_non_object_reads_as_absent(self, cache, storage, raw):
        storage.set_item(PORTFOLIO_CACHE_KEY, raw)
        assert cache.read() is None

    def test_older_schema_is_readable(self, cache, storage):
        storage.set_item(PORTFOLIO_CACHE_KEY, json.dumps({
            "personalInfo": {"name": "Old", "social": {"github": "https://github.com/old"}},
            "projects": [{"title": "Legacy", "description": "", "tags": [], "link": "#"}],
        }))
        doc = merge(cache.read())
        assert doc.personal_info.name == "Old"
        assert doc.personal_info.qr_code_url == ""
        assert doc.projects[0].image_url == ""

    def test_unavailable_storage_fails_closed(self):
        cache = LocalCacheStore(None)
        assert cache.read() is None
        cache.write(default_document())
        cache.clear()

    def test_write_error_is_not_raised(self):
        class BrokenStorage(MemoryKeyValueStorage):
            def set_item(self, key, value):
                raise OSError("disk full")

        cache = LocalCacheStore(BrokenStorage())
        cache.write(default_document())
        assert cache.read() is None

    def test_unusable_key_fails_closed(self, storage):
        cache = LocalCacheStore(storage, key="portfolio data")
        cache.write(default_document())
        assert cache.read() is None
        cache.clear()
        assert not list(storage.root.iterdir())

    def test_undecodable_bytes_read_as_absent(self, cache, storage):
        (storage.root / f"{PORTFOLIO_CACHE_KEY}.json").write_bytes(b"\xff\xfe\x00garbage")
        assert cache.read() is None

    def test_clear(self, cache):
        cache.write(default_document())
        cache.clear()
        assert cache.read() is None

    def test_custom_key(self, storage):
        cache = LocalCacheStore(storage, key="draft")
        cache.write(default_document())
        assert storage.get_item("draft") is not None
        assert storage.get_item(PORTFOLIO_CACHE_KEY) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
