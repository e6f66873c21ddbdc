# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Tests for the json-schema-complete command."""

import json

import pytest

from json_schema_completion.cli import locate_cursor, main


@pytest.fixture
def schema_file(tmp_path, person_schema):
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(person_schema))
    return path


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return path


class TestLocateCursor:
    def test_marker_is_removed(self):
        assert locate_cursor('{"na|', None, "|") == ('{"na', 4)

    def test_explicit_offset_is_clamped(self):
        assert locate_cursor("abc", 10, "|") == ("abc", 3)

    def test_missing_marker_means_end_of_text(self):
        assert locate_cursor("abc", None, "|") == ("abc", 3)


class TestMain:
    def test_json_output(self, tmp_path, schema_file, capsys):
        document = _write(tmp_path, "doc.json", '{"na|')

        assert main([str(schema_file), str(document), "--format", "json"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["from_offset"] == 1
        assert [p["label"] for p in output["proposals"]] == ["name"]
        assert output["proposals"][0]["insert_text"] == '"name": "${x}"'

    def test_table_output(self, tmp_path, schema_file, capsys):
        document = _write(tmp_path, "doc.json", '{"color": "|')

        assert main([str(schema_file), str(document), "--explicit"]) == 0
        assert '"green"' in capsys.readouterr().out

    def test_json5_flag(self, tmp_path, schema_file, capsys):
        document = _write(tmp_path, "doc.json5", "{ag|")

        assert main([str(schema_file), str(document), "--json5", "--format", "json"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["proposals"][0]["insert_text"] == "age: #{0}"

    def test_tree_sitter_parser(self, tmp_path, schema_file, capsys):
        document = _write(tmp_path, "doc.json", '{"age": 1, "color": ""}')

        args = [str(schema_file), str(document), "--offset", "21"]
        assert main(args + ["--parser", "tree-sitter", "--format", "json"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert len(output["proposals"]) == 3

    def test_missing_schema_file(self, tmp_path, capsys):
        document = _write(tmp_path, "doc.json", "{}")

        assert main([str(tmp_path / "nope.json"), str(document)]) == 2
        assert "Error" in capsys.readouterr().out

    def test_invalid_config(self, tmp_path, schema_file):
        document = _write(tmp_path, "doc.json", "{}")
        config = _write(tmp_path, "config.yaml", "max_depth: 0\n")

        assert main([str(schema_file), str(document), "--config", str(config)]) == 2
