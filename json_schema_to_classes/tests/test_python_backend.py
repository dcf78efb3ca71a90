import ast
import importlib
import sys
import types
from datetime import datetime

import pytest

from json_schema_to_classes.pipeline.analyzer import Field, FieldType, Model, TypeKind, UnionVariant
from json_schema_to_classes.pipeline.ast_backends import PythonAstBackend
from json_schema_to_classes.pipeline.ast_backends.python_ast_backend import python_attribute_name
from json_schema_to_classes.pipeline.config import CodeGeneratorConfig
from json_schema_to_classes.pipeline.errors import RenderError

STRING = FieldType(kind=TypeKind.STRING)
BOOL = FieldType(kind=TypeKind.BOOLEAN)


def user_model():
    return Model(name="User", fields=[Field(name="login", type=STRING), Field(name="score", type=FieldType(kind=TypeKind.FLOAT), is_nullable=True)])


def project_model():
    return Model(
        name="Project",
        fields=[
            Field(name="name", type=STRING),
            Field(name="createdAt", type=FieldType(kind=TypeKind.DATE_TIME), is_nullable=True),
            Field(name="owner", type=FieldType(kind=TypeKind.REFERENCE, reference="User")),
            Field(name="members", type=FieldType(kind=TypeKind.ARRAY, item_type=FieldType(kind=TypeKind.REFERENCE, reference="User"))),
            Field(name="settings", type=FieldType(kind=TypeKind.REFERENCE, reference="SyncAdapterParams"), is_nullable=True),
            Field(name="extra", type=FieldType(kind=TypeKind.MAP), is_nullable=True),
        ],
    )


def task_model():
    return Model(
        name="Task",
        fields=[Field(name="id", type=STRING)],
        description="A task.",
        union_key="isPriority",
        union_variants=[
            UnionVariant(
                variant_name="priority_task",
                union_value=True,
                fields=[Field(name="isPriority", type=BOOL), Field(name="priority", type=FieldType(kind=TypeKind.INTEGER))],
            ),
            UnionVariant(
                variant_name="default_task",
                union_value=False,
                fields=[Field(name="isPriority", type=BOOL), Field(name="note", type=STRING, is_nullable=True)],
                is_default_variant=True,
            ),
        ],
    )


@pytest.fixture
def load_module(monkeypatch):
    """Execute generated code as a registered module."""

    def load(code, name="generated_models"):
        module = types.ModuleType(name)
        monkeypatch.setitem(sys.modules, name, module)
        exec(compile(code, f"<{name}>", "exec"), module.__dict__)
        return module

    return load


class TestPythonAttributeName:
    def test_names(self):
        assert python_attribute_name("createdAt") == "createdAt"
        assert python_attribute_name("created-at") == "created_at"
        assert python_attribute_name("3d") == "_3d"
        assert python_attribute_name("class") == "class_"


class TestPythonDataclassJson:
    """Discriminated-union style: dataclasses_json does the (de)serialization"""

    def setup_method(self):
        self.backend = PythonAstBackend(CodeGeneratorConfig(language="python"))

    def test_flat_model(self):
        code = self.backend.render_file([project_model()], "project", {"Project"})
        expected = '''# GENERATED CODE - DO NOT MODIFY MANUALLY

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, cast

from dataclasses_json import config, dataclass_json


@dataclass_json
@dataclass(kw_only=True)
class Project:
    name: str
    createdAt: datetime | None = field(default=None, metadata=config(encoder=lambda v: v.isoformat() if v is not None else None, decoder=lambda v: datetime.fromisoformat(cast(str, v))))
    owner: User
    members: list[User]
    settings: SyncAdapterParams | None = None
    extra: dict[str, Any] | None = None


from .user import User
from .sync_adapter import SyncAdapterParams
'''
        assert code == expected

    def test_date_time_array_codec(self):
        model = Model(
            name="Event",
            fields=[Field(name="times", type=FieldType(kind=TypeKind.ARRAY, item_type=FieldType(kind=TypeKind.DATE_TIME)))],
        )
        code = self.backend.render_file([model], "event", {"Event"})
        assert (
            "    times: list[datetime] = field(metadata=config("
            "encoder=lambda v: [e.isoformat() for e in v] if v is not None else None, "
            "decoder=lambda v: [datetime.fromisoformat(cast(str, e)) for e in cast(list, v)]))\n"
        ) in code

    def test_round_trip_date_time(self, load_module):
        pytest.importorskip("dataclasses_json")
        model = Model(
            name="Event",
            fields=[
                Field(name="at", type=FieldType(kind=TypeKind.DATE_TIME)),
                Field(name="ended-at", type=FieldType(kind=TypeKind.DATE_TIME), is_nullable=True),
                Field(name="times", type=FieldType(kind=TypeKind.ARRAY, item_type=FieldType(kind=TypeKind.DATE_TIME))),
            ],
        )
        module = load_module(self.backend.render_file([model], "event", {"Event"}))

        data = {"at": "2024-01-02T03:04:05", "ended-at": None, "times": ["2024-01-02T00:00:00", "2024-01-03T00:00:00"]}
        event = module.Event.from_dict(data)
        assert event.at == datetime(2024, 1, 2, 3, 4, 5)
        assert event.ended_at is None
        assert event.times == [datetime(2024, 1, 2), datetime(2024, 1, 3)]
        assert event.to_dict() == data

        finished = module.Event.from_dict({**data, "ended-at": "2024-01-02T04:00:00"})
        assert finished.ended_at == datetime(2024, 1, 2, 4)
        assert finished.to_dict()["ended-at"] == "2024-01-02T04:00:00"

    def test_union_round_trip_date_time(self, load_module):
        pytest.importorskip("dataclasses_json")
        model = task_model()
        model.fields.append(Field(name="due", type=FieldType(kind=TypeKind.DATE_TIME), is_nullable=True))
        module = load_module(self.backend.render_file([model], "task", {"Task"}))

        task = module.Task.from_dict({"id": "t1", "isPriority": True, "priority": 1, "due": "2024-06-01T12:00:00"})
        assert task.due == datetime(2024, 6, 1, 12)
        assert task.to_dict()["due"] == "2024-06-01T12:00:00"

    def test_union_model(self):
        code = self.backend.render_file([task_model()], "task", {"Task"})
        expected_contains = [
            "from abc import ABC\n",
            '@dataclass(kw_only=True)\nclass Task(ABC):\n    """A task."""\n\n    id: str\n\n    @classmethod\n    def from_dict(cls, data: dict[str, Any]) -> Task:\n',
            "        variants = {True: TaskPriorityTask, False: TaskDefaultTask}\n",
            "        return variants[data.get('isPriority', False)].from_dict(data)\n",
            "@dataclass_json\n@dataclass(kw_only=True)\nclass TaskPriorityTask(Task):\n    isPriority: bool = True\n    priority: int\n",
            "class TaskDefaultTask(Task):\n    isPriority: bool = False\n    note: str | None = None\n",
        ]
        for expected in expected_contains:
            assert expected in code
        ast.parse(code)

    def test_union_without_default_variant(self):
        model = task_model()
        model.union_variants[1].is_default_variant = False
        code = self.backend.render_file([model], "task", {"Task"})
        assert "return variants[data['isPriority']].from_dict(data)" in code

    def test_variant_without_discriminator_field(self):
        model = task_model()
        model.union_variants[1].fields = model.union_variants[1].fields[1:]
        with pytest.raises(RenderError):
            self.backend.render_file([model], "task", {"Task"})

    def test_renamed_attribute_keeps_json_key(self):
        model = Model(name="Event", fields=[Field(name="created-at", type=STRING, is_nullable=True)])
        code = self.backend.render_file([model], "event", {"Event"})
        assert "from dataclasses import dataclass, field\n" in code
        assert "from dataclasses_json import config, dataclass_json\n" in code
        assert "    created_at: str | None = field(default=None, metadata=config(field_name='created-at'))\n" in code

    def test_round_trip(self, load_module):
        pytest.importorskip("dataclasses_json")
        code = self.backend.render_file([task_model()], "task", {"Task"})
        module = load_module(code)

        task = module.Task.from_dict({"id": "t1", "isPriority": True, "priority": 3})
        assert isinstance(task, module.TaskPriorityTask)
        assert task.priority == 3
        assert task.to_dict() == {"id": "t1", "isPriority": True, "priority": 3}

        fallback = module.Task.from_dict({"id": "t2", "note": "later"})
        assert isinstance(fallback, module.TaskDefaultTask)
        assert fallback.isPriority is False


class TestPythonPlain:
    """Plain style: hand-written from_dict/to_dict"""

    def setup_method(self):
        self.backend = PythonAstBackend(CodeGeneratorConfig(language="python", generate_discriminated_union=False))

    def test_from_dict_and_to_dict(self):
        code = self.backend.render_file([project_model()], "project", {"Project"})
        assert "from typing import Any, cast\n" in code
        assert "dataclasses_json" not in code
        assert "    @classmethod\n    def from_dict(cls, data: dict[str, Any]) -> Project:\n        return cls(" in code
        assert "name=cast(str, data['name'])" in code
        assert "createdAt=datetime.fromisoformat(cast(str, data.get('createdAt'))) if data.get('createdAt') is not None else None" in code
        assert "members=[User.from_dict(cast(dict, e)) for e in cast(list, data['members'])]" in code
        assert "\n\n    def to_dict(self) -> dict[str, Any]:\n" in code
        assert "'members': [e.to_dict() for e in self.members]" in code
        assert "'settings': self.settings.to_dict() if self.settings is not None else None" in code

    def test_union_model_is_flattened(self):
        code = self.backend.render_file([task_model()], "task", {"Task"})
        assert "class Task:\n" in code
        assert "    isPriority: bool\n    priority: int | None = None\n    note: str | None = None\n" in code
        assert "ABC" not in code

    def test_without_serialization(self):
        backend = PythonAstBackend(
            CodeGeneratorConfig(language="python", generate_discriminated_union=False, include_serialization=False, use_future_annotations=False)
        )
        code = backend.render_file([user_model()], "user", {"User"})
        assert "from_dict" not in code
        assert "__future__" not in code
        assert "typing" not in code

    def test_round_trip_primitives(self, load_module):
        model = Model(
            name="Sample",
            fields=[
                Field(name="text", type=STRING),
                Field(name="count", type=FieldType(kind=TypeKind.INTEGER)),
                Field(name="ratio", type=FieldType(kind=TypeKind.FLOAT)),
                Field(name="enabled", type=BOOL),
                Field(name="when", type=FieldType(kind=TypeKind.DATE_TIME)),
                Field(name="maybe", type=FieldType(kind=TypeKind.DATE_TIME), is_nullable=True),
            ],
        )
        module = load_module(self.backend.render_file([model], "sample", {"Sample"}))

        sample = module.Sample(text="a", count=2, ratio=0.5, enabled=True, when=datetime(2024, 5, 6, 7, 8, 9))
        data = sample.to_dict()
        assert data["when"] == "2024-05-06T07:08:09"
        assert data["maybe"] is None
        assert module.Sample.from_dict(data) == sample

    def test_round_trip_references(self, load_module):
        code = self.backend.render_file([user_model(), project_model()], "models", {"User", "Project", "SyncAdapterParams"})
        assert "from ." not in code
        module = load_module(code)

        data = {
            "name": "apollo",
            "createdAt": "2024-01-01T00:00:00",
            "owner": {"login": "ada", "score": 1.5},
            "members": [{"login": "bob", "score": None}],
            "settings": None,
            "extra": {"k": [1, 2]},
        }
        project = module.Project.from_dict(data)
        assert project.owner == module.User(login="ada", score=1.5)
        assert project.members[0].login == "bob"
        assert project.to_dict() == data


class TestPythonSplitModules:
    """One module per model, written into a package and imported for real"""

    @pytest.mark.parametrize("union_style", [True, False])
    def test_mutually_referencing_modules(self, tmp_path, monkeypatch, union_style):
        if union_style:
            pytest.importorskip("dataclasses_json")
        config = CodeGeneratorConfig(language="python", generate_discriminated_union=union_style)
        models = [
            Model(
                name="Author",
                fields=[
                    Field(name="name", type=STRING),
                    Field(name="books", type=FieldType(kind=TypeKind.ARRAY, item_type=FieldType(kind=TypeKind.REFERENCE, reference="Book"))),
                ],
            ),
            Model(
                name="Book",
                fields=[Field(name="title", type=STRING), Field(name="author", type=FieldType(kind=TypeKind.REFERENCE, reference="Author"), is_nullable=True)],
            ),
        ]

        package = tmp_path / ("library_union" if union_style else "library_plain")
        package.mkdir()
        (package / "__init__.py").write_text("")
        for model in models:
            backend = PythonAstBackend(config)
            stem = backend.name_formatter.format_file_name_stem(model.name)
            (package / f"{stem}.py").write_text(backend.render_file([model], stem, {model.name}))

        monkeypatch.syspath_prepend(str(tmp_path))
        importlib.invalidate_caches()
        try:
            module = importlib.import_module(f"{package.name}.author")
            data = {"name": "Ada", "books": [{"title": "Notes", "author": None}]}
            author = module.Author.from_dict(data)
            assert author.books[0].title == "Notes"
            assert author.to_dict() == data
        finally:
            for name in [n for n in sys.modules if n == package.name or n.startswith(package.name + ".")]:
                del sys.modules[name]
