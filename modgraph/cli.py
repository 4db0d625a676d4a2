"""Click CLI with analyze, serve, and summary subcommands."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from modgraph import __version__
from modgraph.analysis.graph_models import GraphResult
from modgraph.models import DEFAULT_DEPTH, AnalyzeConfig, CycleMode
from modgraph.pipeline import InvalidProjectError, run_analysis, summarize, write_json

_CYCLE_CHOICES = [mode.value for mode in CycleMode]


def _analysis_options(func):
    """Options shared by every subcommand that builds a graph."""
    options = [
        click.argument("root_dir", required=False, type=click.Path(path_type=Path)),
        click.option("-d", "--dir", "dir_option", type=click.Path(path_type=Path),
                     help="Project directory (alternative to DIR)"),
        click.option("-p", "--depth", type=int, default=DEFAULT_DEPTH, show_default=True,
                     help="Depth of analysis (clamped to 1..64)"),
        click.option("-e", "--dev-dependencies", "dev_dependencies", is_flag=True,
                     help="Include devDependencies"),
        click.option("--cycles", "cycle_mode", type=click.Choice(_CYCLE_CHOICES), default="peel",
                     show_default=True, help="Circular edge detection strategy"),
        click.option("-v", "--verbose", is_flag=True, help="Enable debug logging"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _server_options(func):
    func = click.option("--open/--no-open", "open_browser", default=False,
                        help="Open browser automatically")(func)
    func = click.option("--host", default="127.0.0.1", help="Host address")(func)
    func = click.option("--port", default=3000, help="Port number")(func)
    return func


def _project_dir(root_dir: Path | None, dir_option: Path | None) -> Path:
    """DIR argument or -d/--dir option, defaulting to the current directory."""
    return dir_option or root_dir or Path(".")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _build(config: AnalyzeConfig) -> GraphResult:
    try:
        return run_analysis(config)
    except InvalidProjectError as e:
        raise click.ClickException(str(e))


def _serve(result: GraphResult, host: str, port: int, open_browser: bool) -> None:
    from modgraph.web import serve

    click.echo(f"Try http://{host}:{port}/graph on your browser.")
    click.echo("Press Ctrl+C to quit.")
    serve(result, host=host, port=port, open_browser=open_browser)


@click.group()
@click.version_option(version=__version__)
def cli():
    """modgraph: visualize the installed dependency graph of a node_modules tree."""


@cli.command()
@_analysis_options
@click.option("-j", "--json-path", type=click.Path(dir_okay=False, path_type=Path),
              help="Path to save JSON output (otherwise the graph is served)")
@_server_options
def analyze(
    root_dir: Path | None,
    dir_option: Path | None,
    depth: int,
    dev_dependencies: bool,
    cycle_mode: str,
    verbose: bool,
    json_path: Path | None,
    host: str,
    port: int,
    open_browser: bool,
):
    """Analyze a project and write JSON, or serve the graph viewer."""
    _configure_logging(verbose)
    config = AnalyzeConfig(
        root_dir=_project_dir(root_dir, dir_option),
        depth=depth,
        include_dev_dependencies=dev_dependencies,
        json_path=json_path,
        cycle_mode=CycleMode(cycle_mode),
        host=host,
        port=port,
    )
    result = _build(config)

    if config.json_path is None:
        _serve(result, config.host, config.port, open_browser)
        return

    try:
        write_json(result, config.json_path)
    except OSError as e:
        raise click.ClickException(f"could not write {config.json_path}: {e}")
    click.echo(f"Json written to {config.json_path}.")


@cli.command()
@_analysis_options
@_server_options
def serve(
    root_dir: Path | None,
    dir_option: Path | None,
    depth: int,
    dev_dependencies: bool,
    cycle_mode: str,
    verbose: bool,
    host: str,
    port: int,
    open_browser: bool,
):
    """Analyze a project and serve the graph viewer."""
    _configure_logging(verbose)
    config = AnalyzeConfig(
        root_dir=_project_dir(root_dir, dir_option),
        depth=depth,
        include_dev_dependencies=dev_dependencies,
        cycle_mode=CycleMode(cycle_mode),
        host=host,
        port=port,
    )
    _serve(_build(config), config.host, config.port, open_browser)


@cli.command()
@_analysis_options
def summary(
    root_dir: Path | None,
    dir_option: Path | None,
    depth: int,
    dev_dependencies: bool,
    cycle_mode: str,
    verbose: bool,
):
    """Print graph counts, duplicated packages and circular edges."""
    _configure_logging(verbose)
    config = AnalyzeConfig(
        root_dir=_project_dir(root_dir, dir_option),
        depth=depth,
        include_dev_dependencies=dev_dependencies,
        cycle_mode=CycleMode(cycle_mode),
    )
    info = summarize(_build(config))

    click.echo(f"nodes: {info['nodes']}  edges: {info['edges']}")
    if info["multiple_versions"]:
        click.echo(click.style("Multiple versions:", fg="yellow"))
        for name in info["multiple_versions"]:
            click.echo(f"  {name}")
    if info["circular_edges"]:
        click.echo(click.style("Circular edges:", fg="red"))
        for source, target in sorted(info["circular_edges"]):
            click.echo(f"  {source} -> {target}")


if __name__ == "__main__":
    cli()
