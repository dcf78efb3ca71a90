import json
from pathlib import Path

from click.testing import CliRunner

from json_schema_to_classes.json_schema_to_classes import json_schema_to_classes

SCHEMAS = Path(__file__).parent / "test_data" / "schemas"


class TestCli:
    """Command line interface"""

    def test_single_file(self, tmp_path):
        output = tmp_path / "task.dart"
        result = CliRunner().invoke(json_schema_to_classes, [str(SCHEMAS / "task.schema.json"), str(output)])
        assert result.exit_code == 0, result.output
        assert f"Generated {output}" in result.output
        code = output.read_text()
        assert code.startswith("// GENERATED CODE - DO NOT MODIFY MANUALLY\n")
        assert "part 'task.freezed.dart';" in code

    def test_split_output(self, tmp_path):
        template = tmp_path / "models" / "*" / "*.dart"
        result = CliRunner().invoke(json_schema_to_classes, [str(SCHEMAS / "project.schema.json"), str(template)])
        assert result.exit_code == 0, result.output
        for stem in ["project", "user", "sync_adapter"]:
            assert (tmp_path / "models" / stem / f"{stem}.dart").exists()

    def test_split_parts_name_written_files(self, tmp_path):
        template = tmp_path / "lib" / "*_model.dart"
        result = CliRunner().invoke(json_schema_to_classes, [str(SCHEMAS / "project.schema.json"), str(template)])
        assert result.exit_code == 0, result.output
        code = (tmp_path / "lib" / "project_model.dart").read_text()
        assert "part 'project_model.freezed.dart';" in code
        assert "part 'project.freezed.dart';" not in code

    def test_python_plain(self, tmp_path):
        output = tmp_path / "models.py"
        args = [str(SCHEMAS / "project.schema.json"), str(output), "--language", "python", "--plain"]
        result = CliRunner().invoke(json_schema_to_classes, args)
        assert result.exit_code == 0, result.output
        code = output.read_text()
        assert "def from_dict" in code
        assert "dataclass_json" not in code

    def test_no_serialization(self, tmp_path):
        output = tmp_path / "task.dart"
        result = CliRunner().invoke(json_schema_to_classes, [str(SCHEMAS / "task.schema.json"), str(output), "--no-serialization"])
        assert result.exit_code == 0, result.output
        assert "fromJson" not in output.read_text()

    def test_config_file(self, tmp_path):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"language": "python", "add_generation_comment": False}))
        output = tmp_path / "task.py"
        result = CliRunner().invoke(json_schema_to_classes, [str(SCHEMAS / "task.schema.json"), str(output), "--config", str(config)])
        assert result.exit_code == 0, result.output
        assert output.read_text().startswith("from __future__ import annotations\n")

    def test_check_references(self, tmp_path):
        schema = tmp_path / "schema.json"
        schema.write_text(json.dumps({"task": {"properties": {"owner": {"$ref": "#/definitions/user"}}}}))
        output = tmp_path / "task.dart"
        result = CliRunner().invoke(json_schema_to_classes, [str(schema), str(output), "--check-references"])
        assert result.exit_code == 1
        assert "Task.owner -> User" in result.output
        assert not output.exists()

    def test_schema_error(self, tmp_path):
        schema = tmp_path / "schema.json"
        schema.write_text(json.dumps({"properties": {"tags": {"type": "array"}}}))
        result = CliRunner().invoke(json_schema_to_classes, [str(schema), str(tmp_path / "out.dart")])
        assert result.exit_code == 1
        assert "Missing 'items' keyword" in result.output

    def test_missing_source(self, tmp_path):
        result = CliRunner().invoke(json_schema_to_classes, [str(tmp_path / "missing.json"), str(tmp_path / "out.dart")])
        assert result.exit_code == 1
        assert "Cannot read schema file" in result.output

    def test_invalid_header(self, tmp_path):
        args = [str(SCHEMAS / "task.schema.json"), str(tmp_path / "out.dart"), "--header", "no-colon"]
        result = CliRunner().invoke(json_schema_to_classes, args)
        assert result.exit_code == 2
        assert "Key:Value" in result.output
