"""Tests for TreeFingerprinter."""

import pytest

from slugkeep.core.caching import TreeFingerprinter
from slugkeep.core.io import FakeFileSystem, absolute_path

SOURCES = ["vendor/assets/", "app/assets/", "config/javascript.yml"]


@pytest.fixture
async def app(fs: FakeFileSystem):
    await fs.write_text(absolute_path("/app/app/assets/stylesheets/app.css"), "body{}")
    await fs.write_text(absolute_path("/app/app/assets/javascripts/app.js"), "run()")
    await fs.write_text(absolute_path("/app/config/javascript.yml"), "x: 1")
    return TreeFingerprinter(fs, absolute_path("/app"))


class TestTreeFingerprinter:
    """Tests for fingerprint stability and sensitivity."""

    async def test_identical_inputs_identical_fingerprint(self, app: TreeFingerprinter):
        first = await app.compute(SOURCES)
        second = await app.compute(SOURCES)

        assert first == second
        assert len(first) == 64

    async def test_content_change_changes_fingerprint(
        self, app: TreeFingerprinter, fs: FakeFileSystem
    ):
        before = await app.compute(SOURCES)
        await fs.write_text(absolute_path("/app/app/assets/javascripts/app.js"), "run(1)")

        assert await app.compute(SOURCES) != before

    async def test_rename_changes_fingerprint(self, app: TreeFingerprinter, fs: FakeFileSystem):
        """Test moving a file with unchanged content changes the fingerprint."""
        before = await app.compute(SOURCES)
        await fs.remove(absolute_path("/app/app/assets/javascripts/app.js"))
        await fs.write_text(absolute_path("/app/app/assets/javascripts/main.js"), "run()")

        assert await app.compute(SOURCES) != before

    async def test_missing_paths_contribute_nothing(
        self, app: TreeFingerprinter, fs: FakeFileSystem
    ):
        """Test an absent source path gives the same result as omitting it."""
        assert await app.compute(SOURCES) == await app.compute(SOURCES[1:])

    async def test_new_file_in_missing_source_changes_fingerprint(
        self, app: TreeFingerprinter, fs: FakeFileSystem
    ):
        before = await app.compute(SOURCES)
        await fs.write_text(absolute_path("/app/vendor/assets/lib.js"), "lib()")

        assert await app.compute(SOURCES) != before

    async def test_empty_inputs(self, fs: FakeFileSystem):
        fingerprinter = TreeFingerprinter(fs, absolute_path("/empty"))

        assert await fingerprinter.compute(SOURCES) == await fingerprinter.compute([])
