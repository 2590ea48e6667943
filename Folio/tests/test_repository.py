"""Tests for the read/write orchestrator."""

from unittest.mock import MagicMock

import pytest
from Folio.content.merge import merge
from Folio.content.schema import coerce_partial, default_document
from Folio.remote.client import UploadCategory
from Folio.remote.results import Fail, RemoteError, Success
from Folio.storage.local_cache import (
    FileKeyValueStorage,
    LocalCacheStore,
    MemoryKeyValueStorage,
    PORTFOLIO_CACHE_KEY,
)
from Folio.sync.repository import DocumentSource, PortfolioRepository
from Folio.utils.errors import ErrorKind

UNAVAILABLE = Fail(RemoteError(ErrorKind.REMOTE_UNAVAILABLE, "connection refused"))


@pytest.fixture
def remote():
    return MagicMock()


@pytest.fixture
def storage():
    return MemoryKeyValueStorage()


@pytest.fixture
def cache(storage):
    return LocalCacheStore(storage)


@pytest.fixture
def repo(remote, cache):
    return PortfolioRepository(remote, cache)


class TestLoad:
    """Remote first, then local cache, then defaults."""

    def test_remote_success_is_merged_and_cached(self, repo, remote, cache):
        remote.fetch_document.return_value = Success(
            coerce_partial({"personalInfo": {"social": {"github": "https://github.com/ada"}}})
        )

        loaded = repo.load_with_source()

        assert loaded.source == DocumentSource.REMOTE
        assert loaded.error is None
        assert loaded.document.personal_info.social.github == "https://github.com/ada"
        assert loaded.document.personal_info.social.linkedin == default_document().personal_info.social.linkedin
        assert merge(cache.read()) == loaded.document

    def test_local_cache_fallback(self, repo, remote, cache):
        remote.fetch_document.return_value = UNAVAILABLE
        cached = merge({"personalInfo": {"name": "Cached Ada"}})
        cache.write(cached)

        loaded = repo.load_with_source()

        assert loaded.source == DocumentSource.LOCAL
        assert loaded.document == merge(cached)
        assert loaded.error.kind == ErrorKind.REMOTE_UNAVAILABLE

    def test_double_fallback_absent_cache(self, repo, remote):
        remote.fetch_document.return_value = UNAVAILABLE

        loaded = repo.load_with_source()

        assert loaded.source == DocumentSource.DEFAULT
        assert loaded.document == default_document()

    def test_double_fallback_corrupt_cache(self, repo, remote, storage):
        remote.fetch_document.return_value = UNAVAILABLE
        storage.set_item(PORTFOLIO_CACHE_KEY, "{{{ definitely not json")

        assert repo.load() == default_document()

    def test_not_configured_uses_cache(self, repo, remote, cache):
        remote.fetch_document.return_value = Fail(RemoteError(ErrorKind.NOT_CONFIGURED, "missing url"))
        cache.write(merge({"skills": [{"name": "Rust", "level": 99}]}))

        doc = repo.load()

        assert [s.name for s in doc.skills] == ["Rust"]

    def test_failed_load_does_not_touch_cache(self, repo, remote, storage):
        remote.fetch_document.return_value = UNAVAILABLE
        repo.load()
        assert storage.get_item(PORTFOLIO_CACHE_KEY) is None

    def test_unusable_cache_key_never_raises(self, remote, tmp_path):
        remote.fetch_document.return_value = UNAVAILABLE
        remote.upsert_document.return_value = UNAVAILABLE
        repo = PortfolioRepository(remote, LocalCacheStore(FileKeyValueStorage(tmp_path), key="portfolio data"))

        assert repo.load() == default_document()
        result = repo.save(merge({"personalInfo": {"name": "Ada"}}))
        assert result.saved_locally_only is True


class TestSave:
    """Remote upsert, then an unconditional local write."""

    def test_save_success(self, repo, remote, cache):
        remote.upsert_document.return_value = Success(None)
        doc = merge({"personalInfo": {"name": "Ada"}})

        result = repo.save(doc)

        assert result.success is True
        assert result.saved_locally_only is False
        assert bool(result) is True
        remote.upsert_document.assert_called_once_with(doc)
        assert merge(cache.read()) == doc

    def test_save_remote_failure_still_writes_cache(self, repo, remote, cache):
        remote.upsert_document.return_value = UNAVAILABLE
        doc = merge({"gallery": []})

        result = repo.save(doc)

        assert result.success is False
        assert result.saved_locally_only is True
        assert result.error.kind == ErrorKind.REMOTE_UNAVAILABLE
        assert cache.read() == doc.as_partial()

    def test_save_result_dict(self, repo, remote):
        remote.upsert_document.return_value = UNAVAILABLE
        data = repo.save(default_document()).to_dict()
        assert data["saved"] is False
        assert data["saved_locally_only"] is True
        assert data["error"]["kind"] == "remote_unavailable"

    def test_save_then_offline_load_returns_saved(self, repo, remote):
        remote.upsert_document.return_value = UNAVAILABLE
        remote.fetch_document.return_value = UNAVAILABLE
        doc = merge({"personalInfo": {"title": "Staff Engineer"}})

        repo.save(doc)

        assert repo.load() == doc


class TestUploadAndReset:
    """Uploads never save; reset only touches the local copy."""

    def test_upload_delegates_without_saving(self, repo, remote):
        remote.upload_object.return_value = Success("https://cdn.example.com/avatar/1-a.png")

        result = repo.upload_and_attach(b"img", "me.png", UploadCategory.AVATAR, "image/png")

        assert result.value == "https://cdn.example.com/avatar/1-a.png"
        remote.upload_object.assert_called_once_with(b"img", "me.png", UploadCategory.AVATAR, "image/png")
        remote.upsert_document.assert_not_called()

    def test_upload_failure_is_returned(self, repo, remote):
        remote.upload_object.return_value = Fail(RemoteError(ErrorKind.REMOTE_REJECTED, "bucket not found", 404))
        result = repo.upload_and_attach(b"img", "me.png", UploadCategory.GALLERY)
        assert isinstance(result, Fail)
        assert result.error.status_code == 404

    def test_reset(self, repo, remote, cache):
        cache.write(merge({"personalInfo": {"name": "Ada"}}))

        doc = repo.reset()

        assert doc == default_document()
        assert merge(cache.read()) == default_document()
        remote.upsert_document.assert_not_called()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
