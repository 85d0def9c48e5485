"""
Document Generator Client CLI

Command-line interface for rendering documents through the service.

Usage:
    docgen png --url https://example.com --output page.png
    docgen pdf --html-file invoice.html --encode --output invoice.pdf
    docgen pdf --url https://example.com --encrypt -p format='"A4"' -o page.pdf
"""

import json
from pathlib import Path
from typing import Any, Optional, List

import typer
from pydantic import ValidationError as SettingsError
from rich.console import Console
from rich.table import Table

from .config import AppConfig, GeneratorConfig, load_config
from .exceptions import DocumentGeneratorError
from .generator import DocumentGenerator
from .logging_config import configure_logging
from .models import OutputType

app = typer.Typer(
    name="docgen",
    help="Render URLs and HTML to PNG or PDF with the document generator service",
    add_completion=False
)

console = Console()


def build_generator(config: GeneratorConfig) -> DocumentGenerator:
    """Create the generator used by the commands."""
    return DocumentGenerator.from_config(config)


def parse_page_options(values: Optional[List[str]]) -> dict[str, Any]:
    """Parse repeated `key=value` pairs, values read as JSON when possible."""
    page_options: dict[str, Any] = {}
    for item in values or []:
        key, sep, raw = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got '{item}'")
        try:
            page_options[key] = json.loads(raw)
        except json.JSONDecodeError:
            page_options[key] = raw
    return page_options


def _load_config(env_file: Optional[str], base_uri: Optional[str]) -> AppConfig:
    overrides = {"base_uri": base_uri} if base_uri else {}
    try:
        return load_config(env_file, **overrides)
    except SettingsError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        console.print(f"[red]✗ Invalid configuration ({field}): {error['msg']}[/red]")
        raise typer.Exit(1)


def _render(
    output_type: OutputType,
    url: Optional[str],
    html_file: Optional[Path],
    output: Path,
    encrypt: Optional[bool],
    encode: bool,
    decode: bool,
    page_option: Optional[List[str]],
    scenario: Optional[str],
    env_file: Optional[str],
    base_uri: Optional[str],
) -> None:
    if bool(url) == bool(html_file):
        console.print("[red]✗ Give exactly one of --url or --html-file[/red]")
        raise typer.Exit(1)

    options: dict[str, Any] = {"decode": decode, "pageOptions": parse_page_options(page_option)}
    if scenario:
        options["scenario"] = scenario

    config = _load_config(env_file, base_uri)
    configure_logging(config.log)

    with build_generator(config.generator) as generator:
        try:
            if url:
                method = (
                    generator.generate_png_from_url
                    if output_type == OutputType.PNG
                    else generator.generate_pdf_from_url
                )
                payload = method(url, options, encrypted=encrypt)
            else:
                method = (
                    generator.generate_png_from_html
                    if output_type == OutputType.PNG
                    else generator.generate_pdf_from_html
                )
                try:
                    html = html_file.read_text(encoding="utf-8")
                except UnicodeDecodeError as e:
                    console.print(f"[red]✗ HTML file is not valid UTF-8: {e.reason}[/red]")
                    raise typer.Exit(1)
                payload = method(html, options, encode=encode, encrypted=encrypt)
        except DocumentGeneratorError as e:
            console.print(f"[red]✗ {e.kind}: {e.message}[/red]")
            raise typer.Exit(1)
        encrypted = generator.encryption_enabled if encrypt is None else encrypt

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(payload)

    table = Table(title="Document generated")
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Type", output_type.value)
    table.add_row("Source", url or str(html_file))
    table.add_row("Encrypted", "yes" if encrypted else "no")
    table.add_row("Size", f"{len(payload)} bytes")
    table.add_row("Output", str(output))
    console.print(table)


def _command(output_type: OutputType):
    def command(
        url: Optional[str] = typer.Option(None, "--url", "-u", help="URL of the page to render"),
        html_file: Optional[Path] = typer.Option(
            None, "--html-file", "-f", exists=True, dir_okay=False, help="HTML file to render"
        ),
        output: Path = typer.Option(..., "--output", "-o", help="Output file"),
        encrypt: Optional[bool] = typer.Option(
            None, "--encrypt/--no-encrypt", help="Encrypt the message (default from config)"
        ),
        encode: bool = typer.Option(False, "--encode", help="Base64-encode the HTML before sending"),
        decode: bool = typer.Option(False, "--decode", help="Ask the service to decode the source"),
        page_option: Optional[List[str]] = typer.Option(
            None, "--page-option", "-p", help="Page option as key=value, repeatable"
        ),
        scenario: Optional[str] = typer.Option(None, "--scenario", "-s", help="Scenario name"),
        env_file: Optional[str] = typer.Option(".env", "--env-file", help="Environment file"),
        base_uri: Optional[str] = typer.Option(None, "--base-uri", help="Override the service base URI"),
    ):
        _render(
            output_type, url, html_file, output, encrypt, encode, decode,
            page_option, scenario, env_file, base_uri,
        )

    command.__doc__ = f"Render a {output_type.value.upper()} document."
    return command


app.command("png")(_command(OutputType.PNG))
app.command("pdf")(_command(OutputType.PDF))


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
