"""
afx CLI — Declarative package manager for shell environments.

Usage:
    afx init --config ~/.config/afx >> ~/.zshrc.afx
    afx install --config ~/.config/afx/main.yaml
    afx list
    afx check --verbose
"""

import logging

import click

logger = logging.getLogger("afx")

config_option = click.option(
    "--config",
    "-c",
    "config_paths",
    multiple=True,
    type=click.Path(),
    help="Config file or directory (default: $AFX_CONFIG_PATH or ~/.config/afx).",
)
verbose_option = click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging.")


def _configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _resolve_packages(config_paths):
    """Load, normalize, validate and order packages; fatal errors become ClickExceptions."""
    from pathlib import Path

    from afx.core.errors import AfxError
    from afx.core.loader import load
    from afx.core.normalizer import parse
    from afx.core.resolver import sort
    from afx.core.validator import validate

    try:
        config = load([Path(p) for p in config_paths])
        pkgs = parse(config)
        validate(pkgs)
        return sort(pkgs)
    except AfxError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(package_name="afx")
def cli():
    """afx — Declarative package manager for shell environments."""
    pass


@cli.command()
@config_option
@verbose_option
def init(config_paths, verbose):
    """Print the shell script that loads installed packages."""
    from afx.core.gate import ShellGate
    from afx.core.script import build_script

    _configure_logging(verbose)
    pkgs = _resolve_packages(config_paths)

    result = build_script(pkgs, gate=ShellGate())
    click.echo(result.script, nl=False)


@cli.command()
@config_option
@click.option("--token", "-t", type=str, default=None, help="GitHub API token.")
@verbose_option
def install(config_paths, token, verbose):
    """Install packages that are not installed yet, dependencies first."""
    import httpx
    from rich.console import Console
    from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

    from afx.core.errors import InstallError
    from afx.installers import install as install_package

    _configure_logging(verbose)
    pkgs = _resolve_packages(config_paths)
    console = Console(stderr=True)

    pending = [pkg for pkg in pkgs if not pkg.installed()]
    if not pending:
        console.print("[green]All packages are already installed[/green]")
        return

    failed = []
    timeout = httpx.Timeout(30.0, connect=60.0)
    with httpx.Client(timeout=timeout, follow_redirects=True) as client:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
        ) as progress:
            task_id = progress.add_task("[green]Installing...[/green]", total=len(pending))
            for pkg in pending:
                progress.update(task_id, description=f"[green]Installing {pkg.name}...[/green]")
                try:
                    install_package(pkg, client, token)
                except InstallError as e:
                    logger.error(str(e))
                    failed.append(pkg.name)
                finally:
                    progress.advance(task_id)

    console.print(
        f"Installed: {len(pending) - len(failed)}/{len(pending)}"
        + (f" | [red]Failed: {', '.join(failed)}[/red]" if failed else "")
    )
    if failed:
        raise SystemExit(1)


@cli.command(name="list")
@config_option
@verbose_option
def list_packages(config_paths, verbose):
    """Show configured packages in dependency order."""
    from rich.console import Console
    from rich.table import Table

    _configure_logging(verbose)
    pkgs = _resolve_packages(config_paths)

    table = Table(title="Packages")
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Installed")
    table.add_column("Depends on")
    table.add_column("Home", overflow="fold")
    for pkg in pkgs:
        installed = "[green]yes[/green]" if pkg.installed() else "[red]no[/red]"
        table.add_row(pkg.name, pkg.kind, installed, ", ".join(pkg.depends_on), pkg.home)

    Console().print(table)


@cli.command()
@config_option
@verbose_option
def check(config_paths, verbose):
    """Validate configuration and dependencies without touching anything."""
    _configure_logging(verbose)
    pkgs = _resolve_packages(config_paths)
    click.echo(f"OK: {len(pkgs)} packages")


if __name__ == "__main__":
    cli()
