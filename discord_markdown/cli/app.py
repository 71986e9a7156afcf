"""CLI application - parse and render Discord markdown from the command line."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import IO, TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from discord_markdown.core.markdown.nodes import MarkdownNode

console = Console(stderr=True)

# Common options
input_argument = click.argument(
    "input_file", type=click.File("r", encoding="utf-8"), default="-", metavar="[INPUT]"
)
alt_text_links_option = click.option(
    "--alt-text-links",
    is_flag=True,
    default=False,
    help="Also recognise [label](url) links, as Discord does in embeds.",
)


def _read_and_parse(input_file: IO[str], alt_text_links: bool) -> list[MarkdownNode]:
    from discord_markdown.core.markdown.parser import parse, parse_with_alt_text_links

    # Files usually end with a newline that is not part of the message
    text = input_file.read().rstrip("\n")
    return parse_with_alt_text_links(text) if alt_text_links else parse(text)


@click.group()
@click.version_option(package_name="discord-markdown")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Discord Markdown - turn Discord message markup into HTML."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


@cli.command("parse")
@input_argument
@alt_text_links_option
def parse_command(input_file: IO[str], alt_text_links: bool) -> None:
    """Print the syntax tree of INPUT as JSON."""
    from discord_markdown.core.markdown.nodes import to_dict

    nodes = _read_and_parse(input_file, alt_text_links)
    click.echo(json.dumps([to_dict(node) for node in nodes], indent=2, ensure_ascii=False))


@cli.command("render")
@input_argument
@alt_text_links_option
@click.option(
    "--resolvers",
    "resolvers_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="JSON file mapping emoji, user, role and channel ids to display data.",
)
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(["html", "text"], case_sensitive=False),
    default="html",
    help="Output format.",
)
@click.option(
    "--standalone",
    is_flag=True,
    default=False,
    help="Wrap the HTML in a complete page with a stylesheet.",
)
@click.option("-o", "--output", type=click.Path(dir_okay=False), default=None, help="Output file path.")
def render_command(
    input_file: IO[str],
    alt_text_links: bool,
    resolvers_path: str | None,
    output_format: str,
    standalone: bool,
    output: str | None,
) -> None:
    """Render INPUT (a file, or - for stdin) as HTML or plain text."""
    from discord_markdown.core.exceptions import ResolverConfigError
    from discord_markdown.core.markdown.html_visitor import HtmlMarkdownVisitor
    from discord_markdown.core.markdown.plaintext_visitor import render_plain_text
    from discord_markdown.core.markdown.resolvers import DEFAULT_RESOLVERS
    from discord_markdown.core.page import render_page
    from discord_markdown.core.resolver_table import ResolverTable

    output_format = output_format.lower()
    if standalone and output_format != "html":
        raise click.UsageError("--standalone only applies to the html format.")

    resolvers = DEFAULT_RESOLVERS
    if resolvers_path is not None:
        try:
            resolvers = ResolverTable.load(resolvers_path).resolvers()
        except ResolverConfigError as exc:
            raise click.UsageError(str(exc)) from exc

    nodes = _read_and_parse(input_file, alt_text_links)

    if output_format == "text":
        result = render_plain_text(nodes, resolvers)
    else:
        result = HtmlMarkdownVisitor.format(nodes, resolvers)
        if standalone:
            result = render_page(result)

    if output is None:
        click.echo(result)
        return

    Path(output).write_text(result, encoding="utf-8")
    console.print(f"Wrote: {output}")
