"""Unit tests for the filesystem blob store."""

import os
import time

import pytest

from novafolio_api.infrastructure.storage import BlobStore, sanitize_filename


@pytest.fixture
def store(tmp_path):
    return BlobStore(str(tmp_path / "uploads"), "/files")


@pytest.mark.unit
class TestSanitizeFilename:

    def test_keeps_safe_names(self):
        assert sanitize_filename("report-2024.v2.pdf") == "report-2024.v2.pdf"

    def test_strips_posix_directories(self):
        assert sanitize_filename("../../etc/passwd") == "passwd"

    def test_strips_windows_directories(self):
        assert sanitize_filename("C:\\Users\\me\\contract.docx") == "contract.docx"

    def test_collapses_unsafe_runs(self):
        assert sanitize_filename("my file (final)!!.pdf") == "my_file_final_.pdf"

    def test_empty_name_falls_back(self):
        assert sanitize_filename("") == "document"
        assert sanitize_filename(None) == "document"
        assert sanitize_filename("..") == "document"


@pytest.mark.unit
class TestBlobStore:

    def test_relative_root_resolves_against_cwd(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        assert BlobStore("data/uploads").resolve_root() == tmp_path / "data" / "uploads"

    def test_ensure_root_is_idempotent(self, store):
        first = store.ensure_root()
        second = store.ensure_root()
        assert first == second
        assert first.is_dir()

    async def test_write_returns_public_locator(self, store):
        blob = await store.write_bytes(b"%PDF-1.4 test", "my contract.pdf")

        assert blob.locator.startswith("/files/")
        assert blob.locator.endswith("_my_contract.pdf")
        assert blob.size == 13
        assert blob.path.read_bytes() == b"%PDF-1.4 test"
        assert store.resolve_path(blob.locator) == blob.path

    async def test_same_name_never_collides(self, store):
        first = await store.write_bytes(b"one", "a.pdf")
        second = await store.write_bytes(b"two", "a.pdf")
        assert first.locator != second.locator

    async def test_read_round_trip(self, store):
        blob = await store.write_bytes(b"content", "a.pdf")
        assert await store.read(blob.locator) == b"content"

    def test_resolve_path_uses_basename_only(self, store):
        path = store.resolve_path("/files/../../secret.txt")
        assert path == store.resolve_root() / "secret.txt"

    def test_resolve_path_rejects_empty(self, store):
        with pytest.raises(ValueError):
            store.resolve_path("")
        with pytest.raises(ValueError):
            store.resolve_path("/files/..")

    async def test_remove(self, store):
        blob = await store.write_bytes(b"x", "a.pdf")
        assert await store.remove(blob.locator) is True
        assert not blob.path.exists()

    async def test_remove_missing_file_does_not_raise(self, store):
        store.ensure_root()
        assert await store.remove("/files/missing.pdf") is False

    async def test_orphans_respects_known_and_age(self, store):
        kept = await store.write_bytes(b"a", "kept.pdf")
        orphan = await store.write_bytes(b"b", "orphan.pdf")
        fresh = await store.write_bytes(b"c", "fresh.pdf")
        old = time.time() - 7200
        os.utime(kept.path, (old, old))
        os.utime(orphan.path, (old, old))

        found = store.orphans({kept.locator}, min_age_seconds=3600)

        assert found == [orphan.locator]
        assert fresh.locator not in found

    def test_orphans_without_root(self, store):
        assert store.orphans(set()) == []
