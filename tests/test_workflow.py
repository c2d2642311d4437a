"""Tests for the release preparation orchestrator.

Uses in-memory fakes for version control and artifact writes, so each
test can see exactly which port operations ran and in what order.
"""

from datetime import date

import pytest

from release_prep.core.version import ReleaseKind, SemanticVersion
from release_prep.exceptions import (
    ArtifactWriteError,
    InvalidFormatError,
    NotARepositoryError,
    VcsOperationError,
)
from release_prep.workflow import (
    PreparationReport,
    ReleaseOrchestrator,
    ReleasePreparationRequest,
    ReleaseStage,
    StepOutcome,
    prepare_release,
)

RELEASE_DAY = date(2024, 1, 15)


@pytest.fixture
def orchestrator(fake_vcs, fake_artifacts, quiet_console) -> ReleaseOrchestrator:
    """Orchestrator wired to the fakes with a fixed clock."""
    return ReleaseOrchestrator(
        fake_vcs,
        fake_artifacts,
        output=quiet_console,
        today=lambda: RELEASE_DAY,
    )


def console_text(console) -> str:
    return console.file.getvalue()


class TestHappyPath:
    """Full runs where every step succeeds."""

    def test_minor_release_from_tag(
        self, orchestrator, fake_vcs, fake_artifacts, commit_record
    ) -> None:
        """Tag v1.2.0 plus a feat commit yields v1.3.0 everywhere."""
        fake_vcs.tags = ["v1.2.0"]
        fake_vcs.commits = [commit_record("feat: login", short_hash="abc123")]

        report = orchestrator.prepare(ReleasePreparationRequest(kind=ReleaseKind.MINOR))

        assert report.version == SemanticVersion(1, 3, 0)
        assert report.previous_tag == "v1.2.0"
        assert report.succeeded
        assert not report.has_warnings
        assert fake_artifacts.config_versions == ["1.3.0"]
        assert fake_artifacts.env_versions == ["1.3.0"]
        assert fake_artifacts.changelog_entries == [
            "## [1.3.0] - 2024-01-15\n\n### Added\n\n- feat: login ([abc123])\n\n"
        ]
        assert fake_vcs.committed == [
            (
                ["CHANGELOG.md", "config/app.php", ".env"],
                "chore: prepare release v1.3.0",
            )
        ]
        assert fake_vcs.created_tags == [("v1.3.0", "Release v1.3.0")]

    def test_steps_run_in_order(self, orchestrator, fake_vcs, commit_record) -> None:
        """Validation, tags, history, commit and tag happen in sequence."""
        fake_vcs.tags = ["v1.0.0"]
        fake_vcs.commits = [commit_record("fix: bug")]

        orchestrator.prepare(ReleasePreparationRequest(kind=ReleaseKind.PATCH))

        assert fake_vcs.calls == [
            "is_repository",
            "get_last_tag",
            "get_last_tag",
            "get_commits_since_tag",
            "commit",
            "create_tag",
        ]

    def test_outcomes_recorded_per_stage(self, orchestrator, fake_vcs, commit_record) -> None:
        """Each stage that ran leaves exactly one outcome."""
        fake_vcs.commits = [commit_record("feat: x")]

        report = orchestrator.prepare(ReleasePreparationRequest())

        assert [o.stage for o in report.outcomes] == [
            ReleaseStage.RESOLVING_VERSION,
            ReleaseStage.GENERATING_CHANGELOG,
            ReleaseStage.WRITING_ARTIFACTS,
            ReleaseStage.COMMITTING,
            ReleaseStage.TAGGING,
        ]
        assert report.stage is ReleaseStage.DONE

    def test_explicit_version(self, orchestrator, fake_vcs, fake_artifacts) -> None:
        """An explicit version is used verbatim regardless of kind."""
        fake_vcs.tags = ["v9.0.0"]

        report = orchestrator.prepare(
            ReleasePreparationRequest(version="2.5.3", kind=ReleaseKind.MAJOR)
        )

        assert report.tag_name == "v2.5.3"
        assert fake_artifacts.config_versions == ["2.5.3"]
        assert fake_vcs.created_tags[0][0] == "v2.5.3"

    def test_first_release_without_tags(self, orchestrator, fake_vcs) -> None:
        """A repository without tags is released as v1.0.0."""
        report = orchestrator.prepare(ReleasePreparationRequest())
        assert report.version == SemanticVersion.initial()
        assert report.previous_tag is None

    def test_progress_is_printed(self, orchestrator, quiet_console) -> None:
        """Each stage is announced on the console."""
        orchestrator.prepare(ReleasePreparationRequest())
        output = console_text(quiet_console)
        assert "> Validating repository..." in output
        assert "> Creating tag..." in output
        assert "Tag v1.0.0 created" in output

    def test_prepare_release_function(self, fake_vcs, fake_artifacts, quiet_console) -> None:
        """The module-level entry point runs the same workflow."""
        report = prepare_release(
            fake_vcs,
            fake_artifacts,
            ReleasePreparationRequest(version="3.0.0"),
            tracked_files=["CHANGELOG.md"],
            output=quiet_console,
        )
        assert report.version == SemanticVersion(3, 0, 0)
        assert fake_vcs.committed[0][0] == ["CHANGELOG.md"]


class TestChangelogStep:
    """Tests for changelog generation inside the workflow."""

    def test_no_commits_skips_changelog(
        self, orchestrator, fake_vcs, fake_artifacts, quiet_console
    ) -> None:
        """With nothing new since the last tag the changelog is left alone."""
        fake_vcs.tags = ["v1.0.0"]

        report = orchestrator.prepare(ReleasePreparationRequest(kind=ReleaseKind.PATCH))

        outcome = report.outcome(ReleaseStage.GENERATING_CHANGELOG)
        assert outcome is not None
        assert outcome.skipped
        assert "No new commits since v1.0.0" in outcome.message
        assert report.changelog_entry is None
        assert fake_artifacts.changelog_entries == []
        # Version files are still written
        assert fake_artifacts.config_versions == ["1.0.1"]

    def test_changelog_failure_aborts(
        self, orchestrator, fake_vcs, fake_artifacts, commit_record
    ) -> None:
        """An I/O error on the changelog is fatal and later steps never run."""
        fake_vcs.commits = [commit_record("feat: x")]
        fake_artifacts.changelog_error = OSError("disk full")

        with pytest.raises(ArtifactWriteError) as exc_info:
            orchestrator.prepare(ReleasePreparationRequest())

        assert "disk full" in exc_info.value.details
        assert fake_artifacts.config_versions == []
        assert "commit" not in fake_vcs.calls
        assert "create_tag" not in fake_vcs.calls


class TestArtifactFailures:
    """Artifact write failures stop the run before git is touched."""

    def test_config_error_propagates(self, orchestrator, fake_vcs, fake_artifacts) -> None:
        """ArtifactWriteError from the port is raised unchanged."""
        error = ArtifactWriteError("Config file not found: config/app.php")
        fake_artifacts.config_error = error

        with pytest.raises(ArtifactWriteError) as exc_info:
            orchestrator.prepare(ReleasePreparationRequest())

        assert exc_info.value is error
        assert fake_artifacts.env_versions == []
        assert "commit" not in fake_vcs.calls
        assert "create_tag" not in fake_vcs.calls

    def test_env_os_error_is_wrapped(self, orchestrator, fake_artifacts) -> None:
        """Raw OSErrors are converted into ArtifactWriteError."""
        fake_artifacts.env_error = PermissionError("read-only")

        with pytest.raises(ArtifactWriteError, match="Failed to write version"):
            orchestrator.prepare(ReleasePreparationRequest())

        # Config was already written; nothing is rolled back
        assert fake_artifacts.config_versions == ["1.0.0"]

    def test_failure_is_reported(self, orchestrator, fake_artifacts, quiet_console) -> None:
        """The failing stage is named in the console output."""
        fake_artifacts.config_error = ArtifactWriteError("boom")

        with pytest.raises(ArtifactWriteError):
            orchestrator.prepare(ReleasePreparationRequest())

        assert "Failed while writing version to artifacts: boom" in console_text(quiet_console)


class TestVcsWarnings:
    """Commit and tag failures are warnings, not errors."""

    def test_commit_failure_is_warning(
        self, orchestrator, fake_vcs, fake_artifacts, quiet_console
    ) -> None:
        """A failed commit is recorded and tagging still runs."""
        fake_vcs.commit_error = VcsOperationError("No changes to commit or commit failed")

        report = orchestrator.prepare(ReleasePreparationRequest())

        assert report.succeeded
        assert report.has_warnings
        assert [w.stage for w in report.warnings] == [ReleaseStage.COMMITTING]
        assert fake_artifacts.touched
        assert fake_vcs.created_tags == [("v1.0.0", "Release v1.0.0")]
        assert "Warning: No changes to commit" in console_text(quiet_console)

    def test_tag_failure_is_warning(self, orchestrator, fake_vcs) -> None:
        """A failed tag leaves the version and commit in place."""
        fake_vcs.tag_error = VcsOperationError(
            "Failed to create git tag 'v1.0.0'", details="already exists"
        )

        report = orchestrator.prepare(ReleasePreparationRequest())

        tag_outcome = report.outcome(ReleaseStage.TAGGING)
        assert tag_outcome is not None
        assert not tag_outcome.success
        assert tag_outcome.details == "already exists"
        assert len(fake_vcs.committed) == 1
        assert report.version == SemanticVersion(1, 0, 0)

    def test_both_fail(self, orchestrator, fake_vcs) -> None:
        """Both warnings are collected."""
        fake_vcs.commit_error = VcsOperationError("commit failed")
        fake_vcs.tag_error = VcsOperationError("tag failed")

        report = orchestrator.prepare(ReleasePreparationRequest())

        assert [w.message for w in report.warnings] == ["commit failed", "tag failed"]


class TestOptionalSteps:
    """Tests for the create_tag and commit_changes flags."""

    def test_no_tag(self, orchestrator, fake_vcs) -> None:
        """create_tag=False never calls create_tag."""
        report = orchestrator.prepare(ReleasePreparationRequest(create_tag=False))
        assert "create_tag" not in fake_vcs.calls
        assert report.outcome(ReleaseStage.TAGGING) is None

    def test_no_commit(self, orchestrator, fake_vcs, fake_artifacts) -> None:
        """commit_changes=False never calls commit, but files are written."""
        orchestrator.prepare(ReleasePreparationRequest(commit_changes=False))
        assert "commit" not in fake_vcs.calls
        assert fake_artifacts.config_versions == ["1.0.0"]
        assert fake_vcs.created_tags

    def test_neither(self, orchestrator, fake_vcs, fake_artifacts) -> None:
        """Only artifact writes happen when both git steps are disabled."""
        orchestrator.prepare(
            ReleasePreparationRequest(create_tag=False, commit_changes=False)
        )
        assert fake_vcs.committed == []
        assert fake_vcs.created_tags == []
        assert fake_artifacts.env_versions == ["1.0.0"]


class TestValidation:
    """Nothing is touched when validation or resolution fails."""

    def test_not_a_repository(self, orchestrator, fake_vcs, fake_artifacts) -> None:
        """A missing repository aborts before version resolution."""
        fake_vcs.repository = False

        with pytest.raises(NotARepositoryError) as exc_info:
            orchestrator.prepare(ReleasePreparationRequest())

        assert exc_info.value.exit_code == 4
        assert fake_vcs.calls == ["is_repository"]
        assert not fake_artifacts.touched

    def test_invalid_explicit_version(self, orchestrator, fake_vcs, fake_artifacts) -> None:
        """A malformed explicit version leaves files and git untouched."""
        with pytest.raises(InvalidFormatError):
            orchestrator.prepare(ReleasePreparationRequest(version="1.0"))

        assert not fake_artifacts.touched
        assert fake_vcs.committed == []
        assert fake_vcs.created_tags == []

    def test_malformed_last_tag(self, orchestrator, fake_vcs, fake_artifacts) -> None:
        """A tag that is not a version aborts the run."""
        fake_vcs.tags = ["nightly"]

        with pytest.raises(InvalidFormatError):
            orchestrator.prepare(ReleasePreparationRequest())

        assert not fake_artifacts.touched


class TestDryRun:
    """Dry runs resolve and render without side effects."""

    def test_dry_run_touches_nothing(
        self, orchestrator, fake_vcs, fake_artifacts, commit_record
    ) -> None:
        """No artifact writes, commits or tags happen."""
        fake_vcs.tags = ["v0.4.1"]
        fake_vcs.commits = [commit_record("fix: crash", short_hash="def456")]

        report = orchestrator.prepare(
            ReleasePreparationRequest(kind=ReleaseKind.PATCH, dry_run=True)
        )

        assert report.dry_run
        assert report.version == SemanticVersion(0, 4, 2)
        assert report.changelog_entry == (
            "## [0.4.2] - 2024-01-15\n\n### Fixed\n\n- fix: crash ([def456])\n\n"
        )
        assert not fake_artifacts.touched
        assert "commit" not in fake_vcs.calls
        assert "create_tag" not in fake_vcs.calls

    def test_dry_run_messages(self, orchestrator) -> None:
        """Each skipped mutation is described."""
        report = orchestrator.prepare(ReleasePreparationRequest(dry_run=True))

        messages = [o.message for o in report.outcomes]
        assert "Would set version 1.0.0 in config and env" in messages
        assert "Would commit: chore: prepare release v1.0.0" in messages
        assert "Would create tag v1.0.0" in messages


class TestPreparationReport:
    """Tests for PreparationReport helpers."""

    def test_warnings_and_lookup(self) -> None:
        """warnings lists failed outcomes and outcome() finds by stage."""
        report = PreparationReport(version=SemanticVersion(1, 0, 0))
        ok = StepOutcome(ReleaseStage.COMMITTING, True, "Changes committed")
        bad = StepOutcome(ReleaseStage.TAGGING, False, "tag failed")
        report.outcomes.extend([ok, bad])

        assert report.warnings == [bad]
        assert report.outcome(ReleaseStage.COMMITTING) is ok
        assert report.outcome(ReleaseStage.VALIDATING) is None
        assert report.tag_name == "v1.0.0"
