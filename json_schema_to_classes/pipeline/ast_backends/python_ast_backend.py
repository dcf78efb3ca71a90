"""
Python AST-based code generation backend.

Generates Python dataclass code from the model IR using the built-in ast
module. The discriminated-union style delegates (de)serialization to
dataclasses_json; the plain style writes from_dict/to_dict by hand.
"""

from __future__ import annotations

import ast
import collections
import keyword
import re

from ..analyzer.ir_nodes import Field, FieldType, Model, TypeKind, UnionVariant
from ..config import CodeGeneratorConfig
from .base import AstBackend
from .python_expressions import cast_expr, dump_expr, python_type

GENERATION_COMMENT = "# GENERATED CODE - DO NOT MODIFY MANUALLY"

STDLIB_MODULES = {"abc", "dataclasses", "datetime", "typing"}


def python_attribute_name(name: str) -> str:
    """A valid Python identifier for a JSON property name."""
    attr = re.sub(r"\W", "_", name)
    if not attr or attr[0].isdigit():
        attr = "_" + attr
    if keyword.iskeyword(attr):
        attr += "_"
    return attr


class PythonAstBackend(AstBackend):
    """Python code generation backend using AST."""

    FILE_EXTENSION = "py"

    def __init__(self, config: CodeGeneratorConfig):
        super().__init__(config)
        self.python_imports: set[tuple[str, str]] = set()

    def render_file(self, models: list[Model], file_stem: str, local_names: set[str]) -> str:
        """Render the models of one output unit as a Python module."""
        # Reset import tracking
        self.python_imports = {("dataclasses", "dataclass")}
        if self.config.use_future_annotations:
            self.python_imports.add(("__future__", "annotations"))

        class_nodes: list[ast.ClassDef] = []
        for model in models:
            class_nodes.extend(self.generate_classes(model))

        imported = self.imported_names(models, local_names)
        groups = self._generate_import_groups()
        local = self._generate_local_imports(imported)
        # Sibling imports follow the class definitions when annotations are postponed
        trailing_local = bool(local) and self.config.use_future_annotations
        if local and not trailing_local:
            groups.append(local)

        sections: list[str] = []
        if self.config.add_generation_comment:
            sections.append(GENERATION_COMMENT)
        sections.extend(self._unparse(group) for group in groups)

        code = "\n\n".join(sections)
        classes = "\n\n\n".join(self._post_process_class(self._unparse([node])) for node in class_nodes)
        if classes:
            code += "\n\n\n" + classes
        if trailing_local:
            code += "\n\n\n" + self._unparse(local)
        return code + "\n"

    def generate_classes(self, model: Model) -> list[ast.ClassDef]:
        """Generate the class definitions of one model."""
        if self.union_style:
            if model.is_union:
                return self._generate_union_classes(model)
            return [self._generate_dataclass(model, model.fields)]
        return [self._generate_plain_class(model)]

    def translate_type(self, field_type: FieldType, nullable: bool = False) -> str:
        """Translate IR type to Python type string."""
        self._register_type_imports(field_type)
        result = python_type(field_type)
        if nullable and result != "Any":
            result = f"{result} | None"
        return result

    def _register_type_imports(self, field_type: FieldType) -> None:
        if field_type.kind == TypeKind.DATE_TIME:
            self.python_imports.add(("datetime", "datetime"))
        elif field_type.kind == TypeKind.ARRAY and field_type.item_type is not None:
            self._register_type_imports(field_type.item_type)
        elif field_type.kind in (TypeKind.MAP, TypeKind.ENUM, TypeKind.UNKNOWN):
            self.python_imports.add(("typing", "Any"))

    def _generate_import_groups(self) -> list[list[ast.stmt]]:
        """Generate import statements grouped as future / stdlib / third party."""
        import_groups: dict[str, set[str]] = collections.defaultdict(set)
        for module, name in self.python_imports:
            import_groups[module].add(name)

        future = [_import_from(m, import_groups[m]) for m in import_groups if m == "__future__"]
        stdlib = [_import_from(m, import_groups[m]) for m in sorted(import_groups) if m in STDLIB_MODULES]
        third_party = [_import_from(m, import_groups[m]) for m in sorted(import_groups) if m not in STDLIB_MODULES and m != "__future__"]
        return [group for group in (future, stdlib, third_party) if group]

    def _generate_local_imports(self, imported: list[str]) -> list[ast.stmt]:
        """Relative imports of the models rendered into sibling modules."""
        return [_import_from(self.name_formatter.format_file_name_stem(name), [name], level=1) for name in imported]

    def _decorators(self, with_json: bool) -> list[ast.expr]:
        decorators: list[ast.expr] = []
        if with_json and self.config.include_serialization:
            self.python_imports.add(("dataclasses_json", "dataclass_json"))
            decorators.append(ast.Name(id="dataclass_json", ctx=ast.Load()))
        decorators.append(
            ast.Call(
                func=ast.Name(id="dataclass", ctx=ast.Load()),
                args=[],
                keywords=[ast.keyword(arg="kw_only", value=ast.Constant(value=True))],
            )
        )
        return decorators

    def _class_def(self, name: str, bases: list[str], body: list[ast.stmt], decorators: list[ast.expr]) -> ast.ClassDef:
        return ast.ClassDef(
            name=name,
            bases=[ast.Name(id=base, ctx=ast.Load()) for base in bases],
            keywords=[],
            body=body or [ast.Pass()],
            decorator_list=decorators,
            type_params=[],
        )

    def _docstring(self, text: str | None) -> list[ast.stmt]:
        if not text:
            return []
        return [ast.Expr(value=ast.Constant(value=text.strip()))]

    def _generate_dataclass(self, model: Model, fields: list[Field]) -> ast.ClassDef:
        body = self._docstring(model.description)
        body.extend(self._generate_field(f) for f in fields)
        return self._class_def(model.name, [], body, self._decorators(with_json=True))

    def _generate_field(self, f: Field, default: ast.expr | None = None) -> ast.AnnAssign:
        """Generate a field definition as annotated assignment."""
        attr = python_attribute_name(f.name)
        annotation = ast.parse(self.translate_type(f.type, f.is_nullable), mode="eval").body

        value = default
        if value is None and f.is_nullable:
            value = ast.Constant(value=None)

        config_keywords: list[ast.keyword] = []
        if self.union_style and self.config.include_serialization:
            # Keep the JSON key when the attribute had to be renamed
            if attr != f.name:
                config_keywords.append(ast.keyword(arg="field_name", value=ast.Constant(value=f.name)))
            if _has_date_time(f.type):
                config_keywords.extend(self._date_time_codec(f.type))

        if config_keywords:
            self.python_imports.add(("dataclasses", "field"))
            self.python_imports.add(("dataclasses_json", "config"))
            keywords = []
            if value is not None:
                keywords.append(ast.keyword(arg="default", value=value))
            metadata = ast.Call(func=ast.Name(id="config", ctx=ast.Load()), args=[], keywords=config_keywords)
            keywords.append(ast.keyword(arg="metadata", value=metadata))
            value = ast.Call(func=ast.Name(id="field", ctx=ast.Load()), args=[], keywords=keywords)

        return ast.AnnAssign(
            target=ast.Name(id=attr, ctx=ast.Store()),
            annotation=annotation,
            value=value,
            simple=1,
        )

    def _date_time_codec(self, field_type: FieldType) -> list[ast.keyword]:
        """dataclasses_json encoder/decoder keywords for ISO-8601 date-time values.

        The decoder is never called with None, the encoder is.
        """
        value = ast.Name(id="v", ctx=ast.Load())
        encoder = dump_expr(field_type, True)(value)
        decoder = cast_expr(field_type, False)(value)
        if _uses_cast(decoder):
            self.python_imports.add(("typing", "cast"))
        return [
            ast.keyword(arg="encoder", value=ast.Lambda(args=_arguments(["v"]), body=encoder)),
            ast.keyword(arg="decoder", value=ast.Lambda(args=_arguments(["v"]), body=decoder)),
        ]

    def _generate_union_classes(self, model: Model) -> list[ast.ClassDef]:
        """Abstract base holding the shared fields, plus one subclass per variant."""
        self.check_union(model)
        self.python_imports.add(("abc", "ABC"))

        body = self._docstring(model.description)
        body.extend(self._generate_field(f) for f in model.fields)
        if self.config.include_serialization:
            body.append(self._union_from_dict(model))
        classes = [self._class_def(model.name, ["ABC"], body, self._decorators(with_json=False))]

        for variant in model.union_variants:
            classes.append(self._generate_variant_class(model, variant))
        return classes

    def _generate_variant_class(self, model: Model, variant: UnionVariant) -> ast.ClassDef:
        body: list[ast.stmt] = []
        for f in variant.fields:
            if f.name == model.union_key:
                body.append(self._generate_field(f, default=ast.Constant(value=variant.union_value)))
            else:
                body.append(self._generate_field(f))
        return self._class_def(self.variant_class_name(model, variant), [model.name], body, self._decorators(with_json=True))

    def _union_from_dict(self, model: Model) -> ast.FunctionDef:
        """from_dict on the base, dispatching on the discriminator value."""
        self.python_imports.add(("typing", "Any"))
        cases = ast.Dict(
            keys=[ast.Constant(value=v.union_value) for v in model.union_variants],
            values=[ast.Name(id=self.variant_class_name(model, v), ctx=ast.Load()) for v in model.union_variants],
        )
        default_variant = self.default_variant(model)
        data = ast.Name(id="data", ctx=ast.Load())
        if default_variant is not None:
            key = ast.Call(
                func=ast.Attribute(value=data, attr="get", ctx=ast.Load()),
                args=[ast.Constant(value=model.union_key), ast.Constant(value=default_variant.union_value)],
                keywords=[],
            )
        else:
            key = ast.Subscript(value=data, slice=ast.Constant(value=model.union_key), ctx=ast.Load())

        body: list[ast.stmt] = [
            ast.Assign(targets=[ast.Name(id="variants", ctx=ast.Store())], value=cases),
            ast.Return(
                value=ast.Call(
                    func=ast.Attribute(
                        value=ast.Subscript(value=ast.Name(id="variants", ctx=ast.Load()), slice=key, ctx=ast.Load()),
                        attr="from_dict",
                        ctx=ast.Load(),
                    ),
                    args=[data],
                    keywords=[],
                )
            ),
        ]
        return self._classmethod("from_dict", body, model.name)

    def _generate_plain_class(self, model: Model) -> ast.ClassDef:
        """Dataclass with hand-written from_dict/to_dict."""
        fields = self.flattened_fields(model)
        body = self._docstring(model.description)
        body.extend(self._generate_field(f) for f in fields)
        if self.config.include_serialization:
            self.python_imports.add(("typing", "Any"))
            body.append(self._plain_from_dict(model, fields))
            body.append(self._plain_to_dict(fields))
        return self._class_def(model.name, [], body, self._decorators(with_json=False))

    def _plain_from_dict(self, model: Model, fields: list[Field]) -> ast.FunctionDef:
        data = ast.Name(id="data", ctx=ast.Load())
        keywords = []
        for f in fields:
            key = ast.Constant(value=f.name)
            if f.is_nullable:
                source: ast.expr = ast.Call(func=ast.Attribute(value=data, attr="get", ctx=ast.Load()), args=[key], keywords=[])
            else:
                source = ast.Subscript(value=data, slice=key, ctx=ast.Load())
            value = cast_expr(f.type, f.is_nullable)(source)
            if _uses_cast(value):
                self.python_imports.add(("typing", "cast"))
            keywords.append(ast.keyword(arg=python_attribute_name(f.name), value=value))

        call = ast.Call(func=ast.Name(id="cls", ctx=ast.Load()), args=[], keywords=keywords)
        return self._classmethod("from_dict", [ast.Return(value=call)], model.name)

    def _plain_to_dict(self, fields: list[Field]) -> ast.FunctionDef:
        keys: list[ast.expr | None] = []
        values: list[ast.expr] = []
        for f in fields:
            attribute = ast.Attribute(value=ast.Name(id="self", ctx=ast.Load()), attr=python_attribute_name(f.name), ctx=ast.Load())
            keys.append(ast.Constant(value=f.name))
            values.append(dump_expr(f.type, f.is_nullable)(attribute))
        return ast.FunctionDef(
            name="to_dict",
            args=_arguments(["self"]),
            body=[ast.Return(value=ast.Dict(keys=keys, values=values))],
            decorator_list=[],
            returns=ast.parse("dict[str, Any]", mode="eval").body,
            type_params=[],
        )

    def _classmethod(self, name: str, body: list[ast.stmt], returns: str) -> ast.FunctionDef:
        data_arg = ast.arg(arg="data", annotation=ast.parse("dict[str, Any]", mode="eval").body)
        arguments = _arguments(["cls"])
        arguments.args.append(data_arg)
        return ast.FunctionDef(
            name=name,
            args=arguments,
            body=body,
            decorator_list=[ast.Name(id="classmethod", ctx=ast.Load())],
            returns=ast.Name(id=returns, ctx=ast.Load()),
            type_params=[],
        )

    def _unparse(self, body: list[ast.stmt]) -> str:
        module = ast.Module(body=body, type_ignores=[])
        ast.fix_missing_locations(module)
        return ast.unparse(module)

    def _post_process_class(self, code: str) -> str:
        """Add blank lines after the class docstring and between methods."""
        lines = code.split("\n")
        result: list[str] = []
        in_docstring = False
        for line in lines:
            stripped = line.strip()
            is_member_start = line.startswith("    @") or line.startswith("    def ")
            if is_member_start and result and not result[-1].startswith("    @"):
                result.append("")
            result.append(line)

            # Close of a one-line or multi-line class docstring
            if line.startswith('    """'):
                in_docstring = not (stripped.endswith('"""') and len(stripped) > 3)
                if not in_docstring:
                    result.append("")
            elif in_docstring and stripped.endswith('"""'):
                in_docstring = False
                result.append("")

        return re.sub(r"\n{3,}", "\n\n", "\n".join(result)).rstrip("\n")


def _arguments(names: list[str]) -> ast.arguments:
    return ast.arguments(
        posonlyargs=[],
        args=[ast.arg(arg=name, annotation=None) for name in names],
        vararg=None,
        kwonlyargs=[],
        kw_defaults=[],
        kwarg=None,
        defaults=[],
    )


def _import_from(module: str, names: set[str] | list[str], level: int = 0) -> ast.ImportFrom:
    return ast.ImportFrom(module=module, names=[ast.alias(name=n, asname=None) for n in sorted(names)], level=level)


def _has_date_time(field_type: FieldType) -> bool:
    if field_type.kind == TypeKind.ARRAY and field_type.item_type is not None:
        return _has_date_time(field_type.item_type)
    return field_type.kind == TypeKind.DATE_TIME


def _uses_cast(node: ast.expr) -> bool:
    return any(isinstance(n, ast.Call) and isinstance(n.func, ast.Name) and n.func.id == "cast" for n in ast.walk(node))
