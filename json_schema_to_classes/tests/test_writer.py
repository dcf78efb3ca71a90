from pathlib import Path

import pytest

from json_schema_to_classes.pipeline.errors import OutputError
from json_schema_to_classes.pipeline.writer import OutputWriter, is_split_output, output_path


class TestOutputWriter:
    def test_write_creates_parent_directories(self, tmp_path):
        path = tmp_path / "a" / "b" / "task.dart"
        OutputWriter().write(path, "class Task {}\n", "dart")
        assert path.read_text() == "class Task {}\n"
        assert list(path.parent.iterdir()) == [path]

    def test_invalid_python_is_not_written(self, tmp_path):
        path = tmp_path / "models.py"
        path.write_text("old = 1\n")
        with pytest.raises(OutputError):
            OutputWriter().write(path, "class :\n", "python")
        assert path.read_text() == "old = 1\n"
        assert list(tmp_path.iterdir()) == [path]

    def test_write_all_split(self, tmp_path):
        template = tmp_path / "*" / "*.py"
        reports = OutputWriter().write_all({"task": "x = 1\n", "user": "def (\n"}, template, "python")
        assert [r.ok for r in reports] == [True, False]
        assert reports[0].path == tmp_path / "task" / "task.py"
        assert (tmp_path / "task" / "task.py").read_text() == "x = 1\n"
        assert not (tmp_path / "user" / "user.py").exists()
        assert "not valid" in reports[1].error

    def test_write_all_single(self, tmp_path):
        output = tmp_path / "models.dart"
        reports = OutputWriter().write_all({"models": "class A {}\n"}, output, "dart")
        assert reports[0].ok
        assert output.read_text() == "class A {}\n"


def test_output_path():
    assert is_split_output("lib/*/*.dart")
    assert not is_split_output(Path("lib/models.dart"))
    assert output_path("lib/*/*.dart", "task") == Path("lib/task/task.dart")
