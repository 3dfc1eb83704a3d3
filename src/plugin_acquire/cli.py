"""``plugin-acquire`` command line: install and list plugins.

Entry point: ``plugin-acquire`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .cache import LocalFilesystemPluginCache
from .config import Settings
from .errors import AcquisitionError, ContextResolutionError, LoadError
from .observers import ConsoleReporter, RichProgressObserver
from .orchestrator import InstallOptions, make_orchestrator, make_resolver

app = typer.Typer(
    name="plugin-acquire",
    help="Install the plugins and dependencies a program or policy pack needs.",
    no_args_is_help=True,
    add_completion=False,
)

console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _settings(plugin_dir: Optional[Path]) -> Settings:
    if plugin_dir is None:
        return Settings()
    return Settings(plugin_dir=plugin_dir)


def _working_directory(cwd: Optional[Path]) -> Path:
    if cwd is not None:
        return cwd.resolve()
    try:
        return Path.cwd()
    except OSError as e:
        raise ContextResolutionError(f"getting the working directory: {e}") from e


@app.command(name="install", help="Install packages and plugins for the current program or policy pack.")
def install_cmd(
    reinstall: bool = typer.Option(
        False, "--reinstall", help="Reinstall a plugin even if it already exists."
    ),
    no_plugins: bool = typer.Option(False, "--no-plugins", help="Skip installing plugins."),
    no_dependencies: bool = typer.Option(
        False, "--no-dependencies", help="Skip installing dependencies."
    ),
    use_language_version_tools: bool = typer.Option(
        False,
        "--use-language-version-tools",
        help="Use language version tools to setup and install the language runtime.",
    ),
    cwd: Optional[Path] = typer.Option(
        None, "--cwd", help="Directory to install for (defaults to the current directory)."
    ),
    plugin_dir: Optional[Path] = typer.Option(
        None, "--plugin-dir", help="Plugin cache directory (overrides PLUGIN_ACQUIRE_PLUGIN_DIR)."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Install packages and plugins for the current program or policy pack."""
    settings = _settings(plugin_dir)
    _configure_logging("DEBUG" if verbose else settings.log_level)

    orchestrator = make_orchestrator(
        settings,
        reporter=ConsoleReporter(console),
        progress=RichProgressObserver(console),
    )
    options = InstallOptions(
        force=reinstall,
        skip_plugins=no_plugins,
        skip_dependencies=no_dependencies,
        use_version_tools=use_language_version_tools,
    )
    try:
        report = orchestrator.install_for_directory(
            _working_directory(cwd), options, make_resolver(settings)
        )
    except (AcquisitionError, LoadError) as e:
        console.print(f"[red]error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(code=1) from e

    if report.outcomes:
        console.print(
            f"[green]{len(report.installed)} installed[/green], {len(report.skipped)} already present",
            highlight=False,
        )


@app.command(name="list", help="List plugins in the plugin cache.")
def list_cmd(
    plugin_dir: Optional[Path] = typer.Option(
        None, "--plugin-dir", help="Plugin cache directory (overrides PLUGIN_ACQUIRE_PLUGIN_DIR)."
    ),
) -> None:
    settings = _settings(plugin_dir)
    plugins = LocalFilesystemPluginCache(settings.plugin_dir).list_installed()
    out = Console()
    if not plugins:
        out.print(f"No plugins installed in {settings.plugin_dir}", highlight=False)
        return
    table = Table(title="Installed plugins")
    table.add_column("Kind")
    table.add_column("Name")
    table.add_column("Version")
    table.add_column("Path")
    for plugin in plugins:
        version = str(plugin.version) if plugin.version is not None else "-"
        table.add_row(plugin.kind.value, plugin.name, version, str(plugin.path))
    out.print(table)
