"""Tests for metadata stores."""

import pytest

from slugkeep.core.io import FakeFileSystem, absolute_path
from slugkeep.core.metadata import FSMetadataStore, InMemoryMetadataStore, MetadataKey

ROOT = "/cache/vendor/heroku"


@pytest.fixture
def store(fs: FakeFileSystem) -> FSMetadataStore:
    return FSMetadataStore(fs, absolute_path(ROOT))


class TestFSMetadataStore:
    """Tests for the one-file-per-key store."""

    async def test_missing_key(self, store: FSMetadataStore):
        assert not await store.exists(MetadataKey.ASSETS_VERSION)
        assert await store.read(MetadataKey.ASSETS_VERSION) is None

    async def test_write_creates_directory_and_file(
        self, store: FSMetadataStore, fs: FakeFileSystem
    ):
        await store.write(MetadataKey.SCHEMA_VERSION, 20130412151201)

        assert await fs.read_text(absolute_path(f"{ROOT}/schema_version")) == "20130412151201"
        assert await store.read(MetadataKey.SCHEMA_VERSION) == "20130412151201"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("abc\n", "abc"),
            ("abc\r\n", "abc"),
            ("abc\n\n", "abc\n"),
            ("abc", "abc"),
        ],
    )
    async def test_read_strips_one_line_ending(
        self, store: FSMetadataStore, fs: FakeFileSystem, raw: str, expected: str
    ):
        """Test values written by other tools keep all but one trailing newline."""
        await fs.write_text(absolute_path(f"{ROOT}/assets_version"), raw)

        assert await store.read(MetadataKey.ASSETS_VERSION) == expected


class TestInMemoryMetadataStore:
    """Tests for the dict-backed store."""

    async def test_write_stringifies(self):
        store = InMemoryMetadataStore()
        await store.write(MetadataKey.SCHEMA_VERSION, 7)

        assert await store.exists(MetadataKey.SCHEMA_VERSION)
        assert await store.read(MetadataKey.SCHEMA_VERSION) == "7"

    async def test_initial_values(self):
        store = InMemoryMetadataStore({"assets_version": "abc\n"})

        assert await store.read(MetadataKey.ASSETS_VERSION) == "abc"
        assert await store.read(MetadataKey.SCHEMA_VERSION) is None
