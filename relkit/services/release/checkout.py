from __future__ import annotations

import re
import shutil
from pathlib import Path

from relkit.core.result import Err, Ok, Result
from relkit.git.repository import GitError, Repository, clone
from relkit.output.console import ConsoleProtocol, Style
from relkit.services.release.errors import ReleaseError
from relkit.services.release.model import WorkingCheckout


def sync_tags(
    *,
    repo: Repository,
    console: ConsoleProtocol,
    remote: str = "origin",
) -> Result[bool, ReleaseError]:
    """Fetch tags only when ``remote`` has some the local repository lacks.

    Returns whether a fetch happened. A failed comparison falls back to an
    unconditional fetch.
    """
    remote_tags = repo.remote_tags(remote)
    local_tags = repo.local_tags()
    if isinstance(remote_tags, Ok) and isinstance(local_tags, Ok):
        if remote_tags.value <= local_tags.value:
            return Ok(False)

    console.print("fetching latest tags", Style.DIM)
    fetched = repo.fetch_tags()
    if isinstance(fetched, Err):
        console.warning(f"could not fetch tags: {fetched.error.message}")
        return Ok(False)
    return Ok(True)


def last_release_version(*, repo: Repository) -> Result[str, ReleaseError]:
    return repo.describe_last_tag().map_err(
        lambda e: ReleaseError(
            kind="no_prior_tag",
            message="unable to find current version tag",
            hint=e.message,
        )
    )


def release_dir_for(*, repo: Repository, version: str) -> Result[Path, ReleaseError]:
    """``release-<version>`` next to the repository's top level directory."""
    return (
        repo.toplevel()
        .map(lambda top: top.parent / f"release-{version}")
        .map_err(
            lambda e: ReleaseError(
                kind="configuration_error",
                message="not inside a git repository",
                hint=e.message,
            )
        )
    )


def clean_release_dir(*, path: Path, console: ConsoleProtocol) -> Result[None, ReleaseError]:
    if not path.exists():
        return Ok(None)

    console.print(f"cleaning up {path}", Style.DIM)
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()
    except OSError as e:
        return Err(
            ReleaseError(
                kind="cleanup_failed",
                message=f"can't clean up {path}: {e}",
                hint="Remove it manually and retry.",
            )
        )

    if path.exists():
        return Err(
            ReleaseError(
                kind="cleanup_failed",
                message=f"can't clean up {path}",
                hint="Remove it manually and retry.",
            )
        )
    return Ok(None)


def clone_release(
    *,
    url: str,
    dest: Path,
    console: ConsoleProtocol,
) -> Result[WorkingCheckout, ReleaseError]:
    console.print(f"git clone {url} {dest}", Style.DIM)
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return Err(ReleaseError(kind="clone_failed", message=f"can't create {dest.parent}: {e}"))

    return (
        clone(url, dest, cwd=dest.parent)
        .map(lambda _repo: WorkingCheckout(root=dest))
        .map_err(
            lambda e: ReleaseError(
                kind="clone_failed",
                message=f"can't clone into {dest}",
                hint=e.message,
            )
        )
    )


def replace_first(*, path: Path, pattern: str, value: str) -> Result[None, ReleaseError]:
    """Replace the first match of ``pattern`` in ``path`` with the literal ``value``."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(ReleaseError(kind="version_bump_failed", message=f"can't read {path}: {e}"))

    updated, count = re.subn(pattern, lambda _m: value, text, count=1)
    if count == 0:
        return Err(
            ReleaseError(
                kind="version_bump_failed",
                message=f"version marker not found in {path}",
                hint=f"expected a match for: {pattern}",
            )
        )

    try:
        path.write_text(updated, encoding="utf-8")
    except OSError as e:
        return Err(ReleaseError(kind="version_bump_failed", message=f"can't write {path}: {e}"))
    return Ok(None)


def bump_version_file(
    *,
    checkout: WorkingCheckout,
    rel_path: str,
    pattern: str,
    replacement: str,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    console.print(f"update {rel_path}: {replacement}", Style.DIM)
    return replace_first(path=checkout.root / rel_path, pattern=pattern, value=replacement)


def commit_version_bump(
    *,
    checkout: WorkingCheckout,
    rel_path: str,
    version: str,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    repo = Repository(checkout.root)
    message = f"Bump version to {version}"
    console.print(f'git commit -s -m "{message}"', Style.DIM)

    def commit_failed(e: GitError) -> ReleaseError:
        return ReleaseError(
            kind="commit_failed",
            message="can't git commit the version upgrade",
            hint=e.message,
        )

    added = repo.add(rel_path).map_err(commit_failed)
    if isinstance(added, Err):
        return added
    return repo.commit(message, signoff=True).map_err(commit_failed)
