from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer

from relkit import __version__
from relkit.core.errors import ErrorCode
from relkit.core.result import Err
from relkit.output.console import ConsoleProtocol, RichConsole
from relkit.services.release.errors import ReleaseError
from relkit.services.release.service import ReleaseOrchestrator, print_follow_up
from relkit.services.release.validate import resolve_config

_USAGE_HINT = (
    "GITHUB_TOKEN=XXXXX GITHUB_USER=HewlettPackard "
    "GITHUB_REPO=docker-machine-oneview relkit 0.5.1"
)


def release_error_code(kind: str) -> ErrorCode:
    if kind in {"configuration_error", "invalid_version"}:
        return ErrorCode.USER_ERROR
    if kind in {"tool_missing", "no_prior_tag"}:
        return ErrorCode.ENV_ERROR
    if kind in {"build_failed"}:
        return ErrorCode.BUILD_ERROR
    if kind in {
        "clone_failed",
        "tag_push_failed",
        "release_delete_failed",
        "release_create_failed",
        "asset_upload_failed",
    }:
        return ErrorCode.NETWORK_ERROR
    return ErrorCode.IO_ERROR


def exit_release(error: ReleaseError, *, console: ConsoleProtocol) -> NoReturn:
    console.error(error.pretty())
    if error.kind == "configuration_error":
        console.print(f"usage: {_USAGE_HINT}")
    raise typer.Exit(code=int(release_error_code(error.kind)))


def ask_yes_no(question: str) -> bool:
    """Block until the operator answers yes or no."""
    while True:
        answer = typer.prompt(f"{question} (y/n)", default="", show_default=False)
        answer = answer.strip().lower()
        if answer.startswith("y"):
            return True
        if answer.startswith("n"):
            return False
        typer.echo("Please answer yes or no.")


def release(
    version: str | None = typer.Argument(
        None, help="Version to release: 0.5.1, 0.6 or 0.5.1-rc2", show_default=False
    ),
    owner: str | None = typer.Option(
        None, "--owner", envvar="GITHUB_USER", help="GitHub account owning the repository."
    ),
    repo: str | None = typer.Option(
        None, "--repo", envvar="GITHUB_REPO", help="GitHub repository name."
    ),
    token: str | None = typer.Option(
        None, "--token", envvar="GITHUB_TOKEN", help="GitHub access token.", show_default=False
    ),
    project_url: str | None = typer.Option(
        None, "--project-url", help="Clone URL (default: git@github.com:OWNER/REPO.git)."
    ),
    config_path: Path | None = typer.Option(
        None, "--config", help="Project layout file (default: ./relkit.toml if present)."
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
    show_version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    """Cut a release: bump, build, tag and publish a GitHub pre-release."""
    if show_version:
        typer.echo(__version__)
        raise typer.Exit(code=int(ErrorCode.OK))

    console = RichConsole()
    source_root = Path.cwd()

    config = resolve_config(
        owner=owner,
        repo=repo,
        token=token,
        version=version,
        project_url=project_url,
        source_root=source_root,
        config_path=config_path,
    )
    if isinstance(config, Err):
        exit_release(config.error, console=console)

    orchestrator = ReleaseOrchestrator(
        config=config.value,
        source_root=source_root,
        console=console,
        confirm=(lambda _question: True) if yes else ask_yes_no,
    )
    outcome = orchestrator.run()
    if isinstance(outcome, Err):
        exit_release(outcome.error, console=console)

    if outcome.value.cancelled:
        console.print("release cancelled")
        raise typer.Exit(code=int(ErrorCode.OK))

    console.success(f"released {config.value.tag}")
    print_follow_up(config.value, outcome.value, console=console)
