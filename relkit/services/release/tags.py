from __future__ import annotations

from collections.abc import Callable

from relkit.core.result import Err, Ok, Result
from relkit.git.repository import GitError, Repository
from relkit.output.console import ConsoleProtocol, Style
from relkit.services.release.errors import ReleaseError


def _tag_push_failed(message: str) -> Callable[[GitError], ReleaseError]:
    def translate(e: GitError) -> ReleaseError:
        return ReleaseError(kind="tag_push_failed", message=message, hint=e.message)

    return translate


def ensure_prod_remote(
    *,
    repo: Repository,
    name: str,
    url: str,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    if name in repo.remotes().unwrap_or([]):
        return Ok(None)

    console.print(f"adding '{name}' remote git url", Style.DIM)
    return repo.add_remote(name, url).map_err(_tag_push_failed(f"can't add remote {name}"))


def remote_tag_exists(
    *,
    repo: Repository,
    remote: str,
    tag: str,
) -> Result[bool, ReleaseError]:
    """Exact tag-name match against the remote's tag listing."""
    return (
        repo.remote_tags(remote)
        .map(lambda tags: tag in tags)
        .map_err(_tag_push_failed(f"can't list tags on {remote}"))
    )


def publish_tag(
    *,
    repo: Repository,
    remote: str,
    tag: str,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    """Create ``tag`` at HEAD and push it, replacing any remote tag of that name."""
    exists = remote_tag_exists(repo=repo, remote=remote, tag=tag)
    if isinstance(exists, Err):
        return exists

    if exists.value:
        console.print(f"deleting previous tag {tag}", Style.DIM)
        # A fresh clone may carry the tag locally too; absence is fine.
        repo.delete_tag(tag)
        deleted = repo.push(remote, f":refs/tags/{tag}").map_err(
            _tag_push_failed(f"can't delete remote tag {tag}")
        )
        if isinstance(deleted, Err):
            return deleted
    else:
        console.print(f"tag {tag} does not exist... yet", Style.DIM)

    created = repo.create_tag(tag).map_err(_tag_push_failed(f"can't create tag {tag}"))
    if isinstance(created, Err):
        return created

    console.print(f"git push {remote} {tag}", Style.DIM)
    return repo.push(remote, tag).map_err(_tag_push_failed("could not push to remote url"))
