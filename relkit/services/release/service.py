from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from relkit.core.result import Err, Ok, Result
from relkit.git.repository import Repository
from relkit.output.console import ConsoleProtocol, Style
from relkit.services.release.build import run_build
from relkit.services.release.checkout import (
    bump_version_file,
    clean_release_dir,
    clone_release,
    commit_version_bump,
    last_release_version,
    release_dir_for,
    sync_tags,
)
from relkit.services.release.errors import ReleaseError
from relkit.services.release.github_release import publish_release
from relkit.services.release.model import ReleaseConfig, UploadReport, WorkingCheckout
from relkit.services.release.notes import ReleaseNotes, compose_release_notes
from relkit.services.release.tags import ensure_prod_remote, publish_tag
from relkit.services.release.validate import ensure_tools_available

Confirm = Callable[[str], bool]
StepAction = Callable[[], Result[None, ReleaseError]]


@dataclass(frozen=True, slots=True)
class ReleaseStep:
    title: str
    action: StepAction


@dataclass(slots=True)
class ReleaseRun:
    """State handed from one step to the next during a single run."""

    last_version: str | None = None
    release_dir: Path | None = None
    checkout: WorkingCheckout | None = None
    notes: ReleaseNotes | None = None
    uploads: UploadReport | None = None
    cancelled: bool = False


def run_steps(
    steps: Sequence[ReleaseStep], *, console: ConsoleProtocol
) -> Result[None, ReleaseError]:
    """Execute steps in order, stopping at the first failure."""
    for step in steps:
        console.header(step.title)
        result = step.action()
        if isinstance(result, Err):
            return result
    return Ok(None)


class ReleaseOrchestrator:
    """Cuts one release of ``config`` from the repository at ``source_root``."""

    def __init__(
        self,
        *,
        config: ReleaseConfig,
        source_root: Path,
        console: ConsoleProtocol,
        confirm: Confirm,
    ) -> None:
        self._config = config
        self._source = Repository(source_root)
        self._console = console
        self._confirm = confirm
        self.state = ReleaseRun()

    def run(self) -> Result[ReleaseRun, ReleaseError]:
        preflight = run_steps(self.preflight_steps(), console=self._console)
        if isinstance(preflight, Err):
            return preflight

        if not self._confirm_start():
            self.state.cancelled = True
            return Ok(self.state)

        result = run_steps(self.release_steps(), console=self._console)
        if isinstance(result, Err):
            return result

        self._cleanup()
        return Ok(self.state)

    def preflight_steps(self) -> list[ReleaseStep]:
        return [
            ReleaseStep("Checking required tools", ensure_tools_available),
            ReleaseStep("Synchronizing tags", self._sync_tags),
            ReleaseStep("Looking up last release", self._find_last_release),
        ]

    def release_steps(self) -> list[ReleaseStep]:
        cfg = self._config
        return [
            ReleaseStep("Cleaning up release directory", self._clean_release_dir),
            ReleaseStep(f"Cloning {cfg.project_url}", self._clone),
            ReleaseStep(f"Bump version number to {cfg.version}", self._bump_version),
            ReleaseStep("Building in-container style", self._build),
            ReleaseStep("Generating github release notes", self._compose_notes),
            ReleaseStep("Tagging and pushing tags", self._publish_tag),
            ReleaseStep("Publishing release on github", self._publish_release),
        ]

    # -- preflight ------------------------------------------------------------

    def _sync_tags(self) -> Result[None, ReleaseError]:
        synced = sync_tags(repo=self._source, console=self._console)
        if isinstance(synced, Err):
            return synced
        release_dir = release_dir_for(repo=self._source, version=self._config.version)
        if isinstance(release_dir, Err):
            return release_dir
        self.state.release_dir = release_dir.value
        return Ok(None)

    def _find_last_release(self) -> Result[None, ReleaseError]:
        last = last_release_version(repo=self._source)
        if isinstance(last, Err):
            return last
        self.state.last_version = last.value
        return Ok(None)

    def _confirm_start(self) -> bool:
        cfg = self._config
        self._console.info(
            f"Starting release from {self.state.last_version} to {cfg.tag} "
            f"on {cfg.project_url} with token {cfg.masked_token}"
        )
        return self._confirm("Do you want to proceed with this release?")

    # -- release --------------------------------------------------------------

    def _clean_release_dir(self) -> Result[None, ReleaseError]:
        assert self.state.release_dir is not None
        return clean_release_dir(path=self.state.release_dir, console=self._console)

    def _clone(self) -> Result[None, ReleaseError]:
        assert self.state.release_dir is not None
        cloned = clone_release(
            url=self._config.project_url,
            dest=self.state.release_dir,
            console=self._console,
        )
        if isinstance(cloned, Err):
            return cloned
        self.state.checkout = cloned.value
        return Ok(None)

    def _bump_version(self) -> Result[None, ReleaseError]:
        checkout = self._require_checkout()
        layout = self._config.layout
        bumped = bump_version_file(
            checkout=checkout,
            rel_path=layout.version_file,
            pattern=layout.version_pattern,
            replacement=layout.replacement_for(self._config.version),
            console=self._console,
        )
        if isinstance(bumped, Err):
            return bumped
        return commit_version_bump(
            checkout=checkout,
            rel_path=layout.version_file,
            version=self._config.version,
            console=self._console,
        )

    def _build(self) -> Result[None, ReleaseError]:
        return run_build(
            checkout=self._require_checkout(),
            layout=self._config.layout,
            console=self._console,
        )

    def _compose_notes(self) -> Result[None, ReleaseError]:
        assert self.state.last_version is not None
        notes = compose_release_notes(
            checkout=self._require_checkout(),
            layout=self._config.layout,
            version=self._config.version,
            tag=self._config.tag,
            last_version=self.state.last_version,
            console=self._console,
        )
        if isinstance(notes, Err):
            return notes
        self.state.notes = notes.value
        return Ok(None)

    def _publish_tag(self) -> Result[None, ReleaseError]:
        repo = Repository(self._require_checkout().root)
        remote = self._config.layout.prod_remote
        ok = ensure_prod_remote(
            repo=repo, name=remote, url=self._config.project_url, console=self._console
        )
        if isinstance(ok, Err):
            return ok
        return publish_tag(repo=repo, remote=remote, tag=self._config.tag, console=self._console)

    def _publish_release(self) -> Result[None, ReleaseError]:
        checkout = self._require_checkout()
        assert self.state.notes is not None
        report = publish_release(
            config=self._config,
            description=self.state.notes.text,
            output_dir=checkout.output_dir(self._config.layout),
            cwd=checkout.root,
            console=self._console,
        )
        if isinstance(report, Err):
            return report
        self.state.uploads = report.value
        return Ok(None)

    def _cleanup(self) -> None:
        checkout = self._require_checkout()
        removed = Repository(checkout.root).remove_remote(self._config.layout.prod_remote)
        if isinstance(removed, Err):
            self._console.warning(f"could not remove remote: {removed.error.message}")

        if self.state.notes is not None:
            try:
                self.state.notes.path.unlink(missing_ok=True)
            except OSError as e:
                self._console.warning(f"could not remove {self.state.notes.path.name}: {e}")

    def _require_checkout(self) -> WorkingCheckout:
        assert self.state.checkout is not None, "checkout step has not run"
        return self.state.checkout


def follow_up_tasks(config: ReleaseConfig) -> list[str]:
    return [
        f"Open the release notes created for you on github {config.release_url()}, "
        "you'll have a chance to enhance commit details a bit",
        "Once you're happy with your release notes on github, "
        "copy the list of changes to the CHANGELOG.md",
        "Update the documentation branch",
        "Test the binaries linked from the github release page",
        f"Change {config.layout.version_file} to the next dev version",
        "Party !!",
    ]


def print_follow_up(config: ReleaseConfig, run: ReleaseRun, *, console: ConsoleProtocol) -> None:
    if run.uploads is not None and run.uploads.failed:
        console.warning(f"assets not uploaded: {', '.join(run.uploads.failed)}")

    console.header("There are a couple of tasks you still need to do manually:")
    for i, task in enumerate(follow_up_tasks(config), start=1):
        console.print(f"  {i}. {task}")
    console.newline()
    console.print(
        f"The full details of these tasks are described in the RELEASE.md document, "
        f"available at {config.release_doc_url()}",
        Style.DIM,
    )
