"""Release preparation orchestration.

Coordinates one release preparation:
1. Check the project is a git repository
2. Resolve the next version
3. Generate the changelog entry
4. Write the version into the config and env files
5. Commit the changed files
6. Create the release tag

Steps run forward only. Validation and version resolution happen before
anything is touched; a failed artifact write aborts the run; a failed
commit or tag is reported as a warning and nothing is rolled back.
Runs against the same repository must not overlap.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from rich.console import Console
from rich.markup import escape

from release_prep.core.changelog import classify_commits, render_changelog_entry
from release_prep.core.ports import ArtifactWriterPort, VersionControlPort
from release_prep.core.resolver import VersionResolver
from release_prep.core.version import ReleaseKind, SemanticVersion
from release_prep.exceptions import (
    ArtifactWriteError,
    NotARepositoryError,
    ReleaseError,
    VcsOperationError,
)

console = Console()

DEFAULT_TRACKED_FILES = ("CHANGELOG.md", "config/app.php", ".env")


class ReleaseStage(Enum):
    """Stages of a release preparation, in execution order."""

    VALIDATING = "Validating repository"
    RESOLVING_VERSION = "Resolving version"
    GENERATING_CHANGELOG = "Generating changelog"
    WRITING_ARTIFACTS = "Writing version to artifacts"
    COMMITTING = "Committing changes"
    TAGGING = "Creating tag"
    DONE = "Done"
    FAILED = "Failed"


@dataclass(frozen=True)
class ReleasePreparationRequest:
    """Input for a single release preparation.

    Attributes:
        version: Explicit version (e.g., "1.5.0"); computed from tags if None
        kind: Component to bump when no explicit version is given
        create_tag: Create an annotated tag for the release
        commit_changes: Commit the changed artifacts
        dry_run: Resolve and render only, without touching files or git
    """

    version: str | None = None
    kind: ReleaseKind = ReleaseKind.MINOR
    create_tag: bool = True
    commit_changes: bool = True
    dry_run: bool = False


@dataclass
class StepOutcome:
    """Result of a workflow step."""

    stage: ReleaseStage
    success: bool
    message: str
    details: str | None = None
    skipped: bool = False


@dataclass
class PreparationReport:
    """What a release preparation produced."""

    version: SemanticVersion
    previous_tag: str | None = None
    changelog_entry: str | None = None
    stage: ReleaseStage = ReleaseStage.DONE
    dry_run: bool = False
    outcomes: list[StepOutcome] = field(default_factory=list)

    @property
    def tag_name(self) -> str:
        return self.version.format()

    @property
    def warnings(self) -> list[StepOutcome]:
        """Steps that did not complete but did not abort the run."""
        return [o for o in self.outcomes if not o.success]

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def succeeded(self) -> bool:
        return self.stage is ReleaseStage.DONE

    def outcome(self, stage: ReleaseStage) -> StepOutcome | None:
        """Return the outcome recorded for a stage, if that stage ran."""
        for o in self.outcomes:
            if o.stage is stage:
                return o
        return None


class ReleaseOrchestrator:
    """Sequences version resolution, changelog, artifact writes, commit and tag.

    Holds no state between calls to prepare(); everything about a run
    lives in the returned PreparationReport.
    """

    def __init__(
        self,
        vcs: VersionControlPort,
        artifacts: ArtifactWriterPort,
        tracked_files: Sequence[str] = DEFAULT_TRACKED_FILES,
        output: Console | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            vcs: Version control port
            artifacts: Artifact writer port
            tracked_files: Files staged in the release commit
            output: Console for progress output (module console if None)
            today: Clock used for the changelog date
        """
        self.vcs = vcs
        self.artifacts = artifacts
        self.tracked_files = list(tracked_files)
        self.console = output if output is not None else console
        self.today = today
        self.resolver = VersionResolver(vcs)

    def prepare(self, request: ReleasePreparationRequest) -> PreparationReport:
        """Run a release preparation.

        Args:
            request: What to release and which git steps to run

        Returns:
            Report with the resolved version and the outcome of each step

        Raises:
            NotARepositoryError: If the project is not a git repository
            InvalidFormatError: If the version or latest tag is malformed
            ArtifactWriteError: If the changelog, config or env file could
                not be written
            GitError: If the commit history could not be read
        """
        stage = ReleaseStage.VALIDATING
        try:
            self._announce(stage)
            self._validate()

            stage = ReleaseStage.RESOLVING_VERSION
            self._announce(stage)
            version = self.resolver.resolve_next(request.version, request.kind)
            report = PreparationReport(version=version, dry_run=request.dry_run)
            self._record(
                report,
                StepOutcome(stage, True, f"Next version: {version.format()}"),
            )

            stage = ReleaseStage.GENERATING_CHANGELOG
            self._announce(stage)
            self._record(report, self._generate_changelog(report))

            stage = ReleaseStage.WRITING_ARTIFACTS
            self._announce(stage)
            self._record(report, self._write_artifacts(report))

            if request.commit_changes:
                stage = ReleaseStage.COMMITTING
                self._announce(stage)
                self._record(report, self._commit(report))

            if request.create_tag:
                stage = ReleaseStage.TAGGING
                self._announce(stage)
                self._record(report, self._tag(report))

        except ReleaseError as e:
            self.console.print(
                f"[red]  {ReleaseStage.FAILED.value} while {stage.value.lower()}: {escape(e.message)}[/red]"
            )
            if e.details:
                self.console.print(f"[dim]  {escape(e.details)}[/dim]")
            raise

        report.stage = ReleaseStage.DONE
        return report

    def _validate(self) -> None:
        if not self.vcs.is_repository():
            raise NotARepositoryError(
                "Not a git repository",
                details="No .git directory found in the project root",
                fix_hint="Run the command from the repository root or pass --project-root",
            )

    def _generate_changelog(self, report: PreparationReport) -> StepOutcome:
        stage = ReleaseStage.GENERATING_CHANGELOG
        report.previous_tag = self.vcs.get_last_tag()
        commits = self.vcs.get_commits_since_tag(report.previous_tag)

        if not commits:
            since = report.previous_tag or "the first commit"
            return StepOutcome(
                stage,
                True,
                f"No new commits since {since}, changelog unchanged",
                skipped=True,
            )

        entry = render_changelog_entry(
            classify_commits(commits), report.version, self.today()
        )
        report.changelog_entry = entry

        if report.dry_run:
            return StepOutcome(
                stage, True, f"Would add {report.version.format()} to the changelog"
            )

        try:
            self.artifacts.prepend_to_changelog(entry)
        except OSError as e:
            raise ArtifactWriteError("Failed to update changelog", details=str(e)) from e

        return StepOutcome(
            stage,
            True,
            f"Added {report.version.format()} to the changelog ({len(commits)} commits)",
        )

    def _write_artifacts(self, report: PreparationReport) -> StepOutcome:
        stage = ReleaseStage.WRITING_ARTIFACTS
        version = report.version.without_prefix()

        if report.dry_run:
            return StepOutcome(stage, True, f"Would set version {version} in config and env")

        try:
            self.artifacts.update_version_in_config(version)
            self.artifacts.update_version_in_env(version)
        except OSError as e:
            raise ArtifactWriteError("Failed to write version", details=str(e)) from e

        return StepOutcome(stage, True, f"Version set to {version} in config and env")

    def _commit(self, report: PreparationReport) -> StepOutcome:
        stage = ReleaseStage.COMMITTING
        message = f"chore: prepare release {report.version.format()}"

        if report.dry_run:
            return StepOutcome(stage, True, f"Would commit: {message}")

        try:
            self.vcs.commit(self.tracked_files, message)
        except VcsOperationError as e:
            return StepOutcome(stage, False, e.message, details=e.details)

        return StepOutcome(stage, True, "Changes committed")

    def _tag(self, report: PreparationReport) -> StepOutcome:
        stage = ReleaseStage.TAGGING
        tag_name = report.tag_name

        if report.dry_run:
            return StepOutcome(stage, True, f"Would create tag {tag_name}")

        try:
            self.vcs.create_tag(tag_name, f"Release {tag_name}")
        except VcsOperationError as e:
            return StepOutcome(stage, False, e.message, details=e.details)

        return StepOutcome(stage, True, f"Tag {tag_name} created")

    def _announce(self, stage: ReleaseStage) -> None:
        self.console.print(f"\n[bold cyan]>[/bold cyan] {stage.value}...")

    def _record(self, report: PreparationReport, outcome: StepOutcome) -> None:
        report.outcomes.append(outcome)
        report.stage = outcome.stage
        if not outcome.success:
            self.console.print(f"[yellow]  Warning: {escape(outcome.message)}[/yellow]")
            if outcome.details:
                self.console.print(f"[dim]  {escape(outcome.details)}[/dim]")
        elif outcome.skipped:
            self.console.print(f"[yellow]  {escape(outcome.message)}[/yellow]")
        else:
            self.console.print(f"[green]  {escape(outcome.message)}[/green]")


def prepare_release(
    vcs: VersionControlPort,
    artifacts: ArtifactWriterPort,
    request: ReleasePreparationRequest,
    tracked_files: Sequence[str] = DEFAULT_TRACKED_FILES,
    output: Console | None = None,
) -> PreparationReport:
    """Prepare a release and return its report.

    This is the main entry point for running a release preparation.
    """
    orchestrator = ReleaseOrchestrator(
        vcs,
        artifacts,
        tracked_files=tracked_files,
        output=output,
    )
    return orchestrator.prepare(request)
