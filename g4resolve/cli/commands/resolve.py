"""Import resolution CLI commands."""

import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from g4resolve.errors import ImportResolutionError
from g4resolve.resolution import ImportResolver

console = Console()


def _build_resolver(config, file, allow, max_depth):
    """Create a resolver for one grammar file.

    Without configured allowed paths, the grammar's own directory is allowed.
    """
    allowed = list(config.allowed_base_paths) + list(allow)
    if not allowed:
        allowed = [str(Path(file).resolve().parent)]
    config = config.with_overrides(allowed_base_paths=allowed, max_import_depth=max_depth)
    return ImportResolver(config)


def _fail(error):
    click.echo(f"Error: {error}", err=True)
    raise click.Abort from None


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def imports(config, file) -> None:
    """List the grammars a file imports directly."""
    resolver = _build_resolver(config, file, (), None)
    try:
        content = resolver.load_grammar(file)
    except ImportResolutionError as e:
        _fail(e)

    names = resolver.extract_imports(content)
    if not names:
        click.echo(f"{resolver.extract_grammar_name(content)} has no imports")
        return

    for name in names:
        click.echo(name)


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--allow",
    "-I",
    multiple=True,
    type=click.Path(file_okay=False),
    help="Additional allowed base directory",
)
@click.option("--max-depth", type=click.IntRange(min=0), help="Maximum import depth")
@click.option(
    "--format",
    "-f",
    type=click.Choice(["text", "json", "tree"]),
    default="text",
    help="Output format",
)
@click.pass_obj
def resolve(config, file, allow, max_depth, format) -> None:
    """Resolve all transitive imports of a grammar file."""
    resolver = _build_resolver(config, file, allow, max_depth)

    try:
        if format == "tree":
            content = resolver.load_grammar(file)
            _print_tree(resolver.get_import_tree(content, Path(file)))
            return
        report = resolver.resolve_file(file)
    except ImportResolutionError as e:
        _fail(e)

    if format == "json":
        click.echo(json.dumps(report.to_dict(), indent=2))
        return

    if not report.imports:
        click.echo(f"{report.root_name}: no imports")
        return

    table = Table(title=f"Imports of {report.root_name}")
    table.add_column("Grammar", style="cyan")
    table.add_column("Path")
    table.add_column("Size", justify="right")
    for name in report.order:
        if name in report.imports:
            grammar = report.imports[name]
            table.add_row(name, str(grammar.source_path), str(len(grammar.content)))
    console.print(table)
    click.echo(f"Resolved {len(report.imports)} imports")


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--allow",
    "-I",
    multiple=True,
    type=click.Path(file_okay=False),
    help="Additional allowed base directory",
)
@click.option("--output", "-o", type=click.Path(), help="Output file for graph")
@click.option(
    "--format",
    "-f",
    type=click.Choice(["dot", "json", "order"]),
    default="dot",
    help="Output format",
)
@click.pass_obj
def graph(config, file, allow, output, format) -> None:
    """Generate the import dependency graph of a grammar file."""
    resolver = _build_resolver(config, file, allow, None)

    try:
        report = resolver.resolve_file(file)
    except ImportResolutionError as e:
        _fail(e)

    if format == "dot":
        output_text = report.graph.export_dot()
    elif format == "json":
        output_text = json.dumps(
            {
                "dependencies": report.graph.to_dict(),
                "statistics": report.graph.get_statistics(),
            },
            indent=2,
        )
    else:  # order
        output_text = "\n".join(report.order)

    if output:
        Path(output).write_text(output_text, encoding="utf-8")
        click.echo(f"Graph written to: {output}")
        if format == "dot":
            click.echo(f"Visualize with: dot -Tpng {output} -o graph.png")
    else:
        click.echo(output_text)


def _print_tree(tree) -> None:
    """Print import tree."""
    root = Tree(f"[bold]{tree['name']}[/bold]")
    _add_branches(root, tree["imports"])
    console.print(root)


def _add_branches(node, children) -> None:
    for child in children:
        branch = node.add(f"{child['name']} [dim]{Path(child['path']).name}[/dim]")
        _add_branches(branch, child["imports"])
