"""Command-line interface for release preparation.

Provides commands for:
- prepare: Update version and changelog, then commit and tag
- next: Show the version the next release would get
- init-config: Generate configuration
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from release_prep import __version__
from release_prep.artifacts import FileArtifactWriter
from release_prep.config.defaults import write_default_config
from release_prep.config.loader import load_config
from release_prep.config.models import ReleasePrepConfig
from release_prep.core.resolver import VersionResolver
from release_prep.core.version import ReleaseKind
from release_prep.exceptions import NotARepositoryError, ReleaseError
from release_prep.git import GitIdentity, GitRepository
from release_prep.workflow import (
    PreparationReport,
    ReleaseOrchestrator,
    ReleasePreparationRequest,
)

# Create Typer app
app = typer.Typer(
    name="release-prep",
    help="Prepare a release: version bump, changelog, commit and tag",
    add_completion=False,
    no_args_is_help=True,
)

# Rich console for formatted output
console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"release-prep version {__version__}")
        raise typer.Exit()


def build_repository(project_root: Path, cfg: ReleasePrepConfig) -> GitRepository:
    """Create the git adapter from configuration."""
    identity = None
    if cfg.git.user_name and cfg.git.user_email:
        identity = GitIdentity(name=cfg.git.user_name, email=cfg.git.user_email)
    return GitRepository(
        project_root,
        identity=identity,
        sign_commits=cfg.git.sign_commits,
        sign_tags=cfg.git.sign_tags,
        timeout=cfg.timeouts.git_operations,
    )


def build_orchestrator(project_root: Path, cfg: ReleasePrepConfig) -> ReleaseOrchestrator:
    """Wire the git and file adapters into an orchestrator.

    Args:
        project_root: Repository root
        cfg: Loaded configuration

    Returns:
        Orchestrator writing progress to the CLI console
    """
    artifacts = FileArtifactWriter(
        project_root,
        changelog=cfg.paths.changelog,
        config=cfg.paths.config,
        env=cfg.paths.env,
        version_variable=cfg.version.variable,
    )
    return ReleaseOrchestrator(
        build_repository(project_root, cfg),
        artifacts,
        tracked_files=cfg.paths.tracked_files(),
        output=console,
    )


def display_report(report: PreparationReport, cfg: ReleasePrepConfig) -> None:
    """Display the step outcomes and what to do next.

    Args:
        report: Result of the preparation
        cfg: Configuration (for the changelog path)
    """
    table = Table(title=f"Release {report.tag_name}")
    table.add_column("Status", style="bold", width=8)
    table.add_column("Step", style="cyan")
    table.add_column("Message")

    for outcome in report.outcomes:
        if not outcome.success:
            status = "[yellow]WARN[/yellow]"
        elif outcome.skipped:
            status = "[dim]SKIP[/dim]"
        else:
            status = "[green]OK[/green]"
        table.add_row(status, outcome.stage.value, escape(outcome.message))

    console.print()
    console.print(table)

    if report.dry_run:
        if report.changelog_entry:
            console.print(Panel(escape(report.changelog_entry), title="Changelog preview"))
        console.print("\n[yellow]Dry run: no files or git state were changed[/yellow]")
        return

    if report.has_warnings:
        console.print("\n[yellow]Release prepared with warnings[/yellow]")
    else:
        console.print("\n[bold green]Release prepared successfully![/bold green]")

    console.print("\nNext steps:")
    console.print(f"  1. Review {escape(cfg.paths.changelog)}")
    console.print("  2. git push origin main")
    console.print(f"  3. git push origin {report.tag_name}")


@app.callback()
def main(
    version: bool = typer.Option(  # noqa: B008
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Prepare a new release for a git repository.

    Computes the next semantic version, writes a changelog entry from
    the commits since the last tag, updates the version in the config
    and env files, and commits and tags the result.
    """
    pass


@app.command()
def prepare(
    version: str | None = typer.Argument(  # noqa: B008
        None,
        help="Version number (e.g., 1.2.3); computed from the last tag if omitted",
    ),
    release_type: str | None = typer.Option(  # noqa: B008
        None,
        "--type",
        "-t",
        help="Release type: major, minor, patch (default from config: minor)",
    ),
    no_tag: bool = typer.Option(  # noqa: B008
        False,
        "--no-tag",
        help="Do not create a git tag",
    ),
    no_commit: bool = typer.Option(  # noqa: B008
        False,
        "--no-commit",
        help="Do not commit changes",
    ),
    dry_run: bool = typer.Option(  # noqa: B008
        False,
        "--dry-run",
        "-n",
        help="Show what would be done without making changes",
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
    project_root: Path | None = typer.Option(  # noqa: B008
        None,
        "--project-root",
        "-C",
        help="Repository root (defaults to the current directory)",
    ),
) -> None:
    """Update version and changelog, then commit and tag the release.

    Examples:
        release-prep prepare                 # v1.4.2 -> v1.5.0
        release-prep prepare --type patch    # v1.4.2 -> v1.4.3
        release-prep prepare 2.0.0           # Set specific version
        release-prep prepare --no-tag        # Skip tag creation
        release-prep prepare --dry-run       # Preview without changes
    """
    try:
        root = (project_root or Path.cwd()).resolve()
        cfg = load_config(config, project_root=root)
        kind = ReleaseKind.from_string(release_type or cfg.version.default_type)

        request = ReleasePreparationRequest(
            version=version,
            kind=kind,
            create_tag=cfg.git.create_tag and not no_tag,
            commit_changes=cfg.git.commit_changes and not no_commit,
            dry_run=dry_run,
        )

        console.print(
            Panel(
                f"[bold]Preparing release[/bold]\n"
                f"Project: {escape(str(root))}\n"
                f"{'[yellow]DRY RUN[/yellow]' if dry_run else ''}",
                title="release-prep",
                border_style="cyan",
            )
        )

        report = build_orchestrator(root, cfg).prepare(request)

    except ReleaseError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=e.exit_code) from None

    display_report(report, cfg)


@app.command("next")
def next_version(
    release_type: str | None = typer.Option(  # noqa: B008
        None,
        "--type",
        "-t",
        help="Release type: major, minor, patch (default from config: minor)",
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
    project_root: Path | None = typer.Option(  # noqa: B008
        None,
        "--project-root",
        "-C",
        help="Repository root (defaults to the current directory)",
    ),
) -> None:
    """Print the version the next release would get, without changing anything."""
    try:
        root = (project_root or Path.cwd()).resolve()
        cfg = load_config(config, project_root=root)
        kind = ReleaseKind.from_string(release_type or cfg.version.default_type)

        repository = build_repository(root, cfg)
        if not repository.is_repository():
            raise NotARepositoryError(
                "Not a git repository",
                details=f"No .git directory found in {root}",
            )

        resolved = VersionResolver(repository).resolve_next(None, kind)
    except ReleaseError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=e.exit_code) from None

    console.print(resolved.format())


@app.command("init-config")
def init_config(
    output: Path = typer.Option(  # noqa: B008
        Path("release_prep.yml"),
        "--output",
        "-o",
        help="Output path for configuration file",
    ),
    force: bool = typer.Option(  # noqa: B008
        False,
        "--force",
        "-f",
        help="Overwrite existing configuration file",
    ),
) -> None:
    """Generate a configuration file with the default settings."""
    try:
        path = write_default_config(output, force=force)
    except ReleaseError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=e.exit_code) from None

    console.print(f"[green]Configuration written to {escape(str(path))}[/green]")


if __name__ == "__main__":
    app()
