"""CLI entry point for petstore-openapi."""

import logging
from pathlib import Path

import click

from petstore_openapi.config import OpenApiSettings
from petstore_openapi.petstore.app import PetStoreApp, build_document
from petstore_openapi.registry.errors import DispatchError, RegistryError


def _parse_query(pairs: tuple[str, ...]) -> dict[str, list[str]]:
    """Turn ('status=available', 'status=sold') into {'status': ['available', 'sold']}."""
    query: dict[str, list[str]] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep:
            raise click.BadParameter(f"expected key=value, got '{pair}'", param_hint="--query")
        query.setdefault(key, []).append(value)
    return query


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """Pet store mock API: emit its OpenAPI document and call its operations."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write the document to this file.")
@click.option("--format", "fmt", default="json", type=click.Choice(["json", "yaml"]), help="Document format.")
def spec(output: Path | None, fmt: str):
    """Compile the OpenAPI document."""
    settings = OpenApiSettings.from_env()
    try:
        document = build_document(settings)
    except RegistryError as e:
        raise click.ClickException(str(e)) from e

    text = document.to_json() if fmt == "json" else document.to_yaml()
    if output is None:
        click.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Document saved to {output}")


@main.command()
def routes():
    """List registered routes in registration order."""
    app = PetStoreApp(OpenApiSettings.from_env())
    for route in app.routes:
        flags = []
        if route.deprecated:
            flags.append("deprecated")
        if route.security:
            flags.append("auth:" + ",".join(r.name for r in route.security))
        click.echo(
            f"{route.method.value:<7} {route.path_template:<45} {route.operation_id:<26} "
            f"{','.join(route.tags):<6} {' '.join(flags)}".rstrip()
        )


@main.command()
@click.argument("method")
@click.argument("path")
@click.option("-q", "--query", multiple=True, help="Query parameter as key=value; repeatable.")
@click.option("--seed", default=None, type=int, help="Seed for generated data.")
def call(method: str, path: str, query: tuple[str, ...], seed: int | None):
    """Dispatch METHOD PATH to the mock handlers and print the response."""
    settings = OpenApiSettings.from_env()
    if seed is not None:
        settings = settings.model_copy(update={"mock_seed": seed})
    app = PetStoreApp(settings)
    try:
        response = app.dispatcher.call(method, path, query=_parse_query(query))
    except (DispatchError, RegistryError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"HTTP {response.status} {response.media_type}")
    for name, value in response.headers.items():
        click.echo(f"{name}: {value}")
    body = response.render()
    if body:
        click.echo(body)
