import json
import logging
import sys
from pathlib import Path

import click

from .loader import load_schema, parse_headers
from .pipeline import CodeGeneratorConfig, OutputWriter, PipelineGenerator, SchemaError
from .pipeline.writer import is_split_output


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--language", "-l", default=None, type=click.Choice(["dart", "python"]))
@click.option("--plain", is_flag=True, default=False, help="Plain classes instead of discriminated unions")
@click.option("--no-serialization", is_flag=True, default=False, help="Do not emit fromJson/toJson (from_dict/to_dict)")
@click.option("--check-references", is_flag=True, default=False, help="Fail when a $ref names no model of the schema")
@click.option("--header", "-H", multiple=True, help="HTTP header for URL sources, as Key:Value")
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("source", type=str)
@click.argument("output", type=click.Path())
def json_schema_to_classes(config, language, plain, no_serialization, check_references, header, verbose, source, output):
    """Generate data classes from the JSON Schema SOURCE (file or URL) into OUTPUT.

    A '*' in OUTPUT writes one file per model, the '*' being replaced by the
    model's file stem (e.g. 'lib/models/*/*.dart').
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if config is not None:
        with open(config) as f:
            config = CodeGeneratorConfig.from_dict(json.load(f))
    else:
        config = CodeGeneratorConfig()

    # CLI flags override the config file
    if language is not None:
        config.language = language
    if plain:
        config.generate_discriminated_union = False
    if no_serialization:
        config.include_serialization = False
    if check_references:
        config.validate_references = True

    try:
        headers = parse_headers(header)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--header") from e

    split = is_split_output(output)
    try:
        schema = load_schema(source, headers=headers)
        codegen = PipelineGenerator(Path(output).stem, schema, config)
        result = codegen.render(split=split, output=output)
    except SchemaError as e:
        raise click.ClickException(str(e)) from e

    for model_name, error in result.errors.items():
        click.echo(f"Error: {model_name}: {error}", err=True)

    reports = OutputWriter().write_all(result.files, output, config.language)
    for report in reports:
        if report.ok:
            click.echo(f"Generated {report.path}")
        else:
            click.echo(f"Failed {report.path}: {report.error}", err=True)

    if not result.ok or not all(report.ok for report in reports):
        sys.exit(1)
