"""Wrappers around the ``github-release`` CLI.

Every call is keyed by owner, repository and tag. The access token is handed
over through the ``GITHUB_TOKEN`` environment variable, which github-release
reads natively, so it never shows up in a process listing or a diagnostic.
"""

from __future__ import annotations

from pathlib import Path

from relkit.core.result import Err, Ok, Result
from relkit.output.console import ConsoleProtocol, Style
from relkit.platform.process import ProcessError
from relkit.platform.process import run as run_process
from relkit.services.release.checksums import list_artifacts
from relkit.services.release.errors import ReleaseError
from relkit.services.release.model import ReleaseConfig, UploadReport
from relkit.services.release.timeouts import (
    GITHUB_RELEASE_TIMEOUT_SECONDS,
    GITHUB_RELEASE_UPLOAD_TIMEOUT_SECONDS,
)


def _cmd(config: ReleaseConfig, verb: str, *extra: str) -> list[str]:
    return [
        "github-release",
        verb,
        "--user",
        config.owner,
        "--repo",
        config.repo,
        "--tag",
        config.tag,
        *extra,
    ]


def _run(
    config: ReleaseConfig,
    cmd: list[str],
    *,
    cwd: Path,
    timeout: float = GITHUB_RELEASE_TIMEOUT_SECONDS,
) -> Result[str, ProcessError]:
    return run_process(cmd, cwd=cwd, env={"GITHUB_TOKEN": config.token}, timeout=timeout)


def release_exists(*, config: ReleaseConfig, cwd: Path) -> bool:
    """True if the host already has a release for the tag."""
    result = _run(config, _cmd(config, "info"), cwd=cwd)
    return isinstance(result, Ok)


def delete_release(*, config: ReleaseConfig, cwd: Path) -> Result[None, ReleaseError]:
    result = _run(config, _cmd(config, "delete"), cwd=cwd)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="release_delete_failed",
                message=f"could not delete release {config.tag}",
                hint=result.error.detail,
            )
        )
    return Ok(None)


def create_release(
    *,
    config: ReleaseConfig,
    description: str,
    cwd: Path,
) -> Result[None, ReleaseError]:
    cmd = _cmd(
        config,
        "release",
        "--name",
        config.tag,
        "--description",
        description,
        "--pre-release",
    )
    result = _run(config, cmd, cwd=cwd)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="release_create_failed",
                message=f"could not create release {config.tag}",
                hint=result.error.detail,
            )
        )
    return Ok(None)


def upload_asset(*, config: ReleaseConfig, path: Path, cwd: Path) -> Result[None, ReleaseError]:
    cmd = _cmd(config, "upload", "--name", path.name, "--file", str(path))
    result = _run(config, cmd, cwd=cwd, timeout=GITHUB_RELEASE_UPLOAD_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="asset_upload_failed",
                message=f"could not upload {path.name}",
                hint=result.error.detail,
            )
        )
    return Ok(None)


def upload_assets(
    *,
    config: ReleaseConfig,
    output_dir: Path,
    cwd: Path,
    console: ConsoleProtocol,
) -> UploadReport:
    """Upload every artifact; a failed upload is reported and skipped."""
    uploaded: list[str] = []
    failed: list[str] = []
    for path in list_artifacts(output_dir):
        console.print(f"uploading {path.name}...", Style.DIM)
        result = upload_asset(config=config, path=path, cwd=cwd)
        if isinstance(result, Err):
            console.warning(f"{result.error.pretty()}, continuing with others")
            failed.append(path.name)
            continue
        uploaded.append(path.name)
    return UploadReport(uploaded=tuple(uploaded), failed=tuple(failed))


def publish_release(
    *,
    config: ReleaseConfig,
    description: str,
    output_dir: Path,
    cwd: Path,
    console: ConsoleProtocol,
) -> Result[UploadReport, ReleaseError]:
    """Replace any existing release for the tag and attach the build output."""
    if release_exists(config=config, cwd=cwd):
        console.print(f"release {config.tag} already exists, cleaning it up", Style.DIM)
        deleted = delete_release(config=config, cwd=cwd)
        if isinstance(deleted, Err):
            return deleted

    console.print(f"creating pre-release {config.tag} on {config.slug}", Style.DIM)
    created = create_release(config=config, description=description, cwd=cwd)
    if isinstance(created, Err):
        return created

    return Ok(upload_assets(config=config, output_dir=output_dir, cwd=cwd, console=console))
