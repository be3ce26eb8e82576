"""Tests for schema version extraction."""

import pytest

from slugkeep.core.build import SchemaVersionReader
from slugkeep.core.build.schema import parse_schema_version
from slugkeep.core.io import FakeFileSystem, absolute_path

SCHEMA = """\
# This file is auto-generated from the current state of the database.

ActiveRecord::Schema.define(version: 2013_04_12_151201) do
  create_table "users", force: :cascade do |t|
  end
end
"""


class TestParseSchemaVersion:
    """Tests for parse_schema_version."""

    @pytest.mark.parametrize(
        ("content", "expected"),
        [
            (SCHEMA, 20130412151201),
            ("ActiveRecord::Schema.define(:version => 20130412151201) do", 20130412151201),
            ("ActiveRecord::Schema[7.1].define(version: 2024_01_02_030405) do", 20240102030405),
            ("ActiveRecord::Schema.define(version: 7) do", 7),
        ],
    )
    def test_versions(self, content: str, expected: int):
        assert parse_schema_version(content) == expected

    def test_no_define_is_zero(self):
        assert parse_schema_version("# empty schema\n") == 0


class TestSchemaVersionReader:
    async def test_missing_file_is_zero(self, fs: FakeFileSystem):
        reader = SchemaVersionReader(fs, absolute_path("/app/db/schema.rb"))

        assert await reader.read() == 0

    async def test_reads_file(self, fs: FakeFileSystem):
        path = absolute_path("/app/db/schema.rb")
        await fs.write_text(path, SCHEMA)

        assert await SchemaVersionReader(fs, path).read() == 20130412151201
