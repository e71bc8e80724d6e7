from __future__ import annotations

from relkit.core.result import Err, Ok, Result
from relkit.git.repository import GitError
from relkit.output.console import MockConsole
from relkit.services.release.errors import ReleaseError
from relkit.services.release.tags import ensure_prod_remote, publish_tag


class FakeRemoteRepo:
    """Records git calls against an in-memory remote tag table."""

    def __init__(
        self,
        *,
        remote_tags: dict[str, str],
        head: str = "new-sha",
        push_fails: bool = False,
        local_tags: set[str] | None = None,
        remotes: list[str] | None = None,
    ) -> None:
        self.remote = dict(remote_tags)
        self.local = set(local_tags or ())
        self.head = head
        self.push_fails = push_fails
        self._remotes = list(remotes or ["origin"])
        self.calls: list[tuple[str, ...]] = []

    def remote_tags(self, remote: str) -> Result[set[str], GitError]:
        self.calls.append(("ls-remote", remote))
        return Ok(set(self.remote))

    def delete_tag(self, name: str) -> Result[None, GitError]:
        self.calls.append(("tag -d", name))
        if name not in self.local:
            return Err(GitError(command="tag -d", message=f"tag '{name}' not found."))
        self.local.discard(name)
        return Ok(None)

    def create_tag(self, name: str) -> Result[None, GitError]:
        self.calls.append(("tag", name))
        self.local.add(name)
        return Ok(None)

    def push(self, remote: str, refspec: str) -> Result[None, GitError]:
        self.calls.append(("push", remote, refspec))
        if refspec.startswith(":refs/tags/"):
            self.remote.pop(refspec.removeprefix(":refs/tags/"), None)
            return Ok(None)
        if self.push_fails or refspec in self.remote:
            return Err(GitError(command="push", message="rejected"))
        self.remote[refspec] = self.head
        return Ok(None)

    def remotes(self) -> Result[list[str], GitError]:
        return Ok(list(self._remotes))

    def add_remote(self, name: str, url: str) -> Result[None, GitError]:
        self.calls.append(("remote add", name, url))
        self._remotes.append(name)
        return Ok(None)


def _publish(repo: FakeRemoteRepo, tag: str) -> Result[None, ReleaseError]:
    console = MockConsole()
    return publish_tag(repo=repo, remote="remote.prod.url", tag=tag, console=console)  # type: ignore[arg-type]


def test_absent_tag_is_created_and_pushed() -> None:
    repo = FakeRemoteRepo(remote_tags={"v1.1.0": "old"})

    result = _publish(repo, "v1.2.0")

    assert result == Ok(None)
    assert repo.remote == {"v1.1.0": "old", "v1.2.0": "new-sha"}
    assert ("tag -d", "v1.2.0") not in repo.calls


def test_existing_tag_is_overwritten() -> None:
    repo = FakeRemoteRepo(remote_tags={"v1.2.0": "old-sha"}, local_tags={"v1.2.0"})

    result = _publish(repo, "v1.2.0")

    assert result == Ok(None)
    assert repo.remote == {"v1.2.0": "new-sha"}
    assert repo.calls[1:] == [
        ("tag -d", "v1.2.0"),
        ("push", "remote.prod.url", ":refs/tags/v1.2.0"),
        ("tag", "v1.2.0"),
        ("push", "remote.prod.url", "v1.2.0"),
    ]


def test_missing_local_tag_does_not_stop_overwrite() -> None:
    repo = FakeRemoteRepo(remote_tags={"v1.2.0": "old-sha"}, local_tags=set())

    result = _publish(repo, "v1.2.0")

    assert result == Ok(None)
    assert repo.remote == {"v1.2.0": "new-sha"}


def test_similar_tag_names_do_not_count_as_existing() -> None:
    repo = FakeRemoteRepo(remote_tags={"v1.20": "other"})

    result = _publish(repo, "v1.2")

    assert result == Ok(None)
    assert repo.remote == {"v1.20": "other", "v1.2": "new-sha"}
    assert not any(call[0] == "tag -d" for call in repo.calls)


def test_push_failure_is_fatal() -> None:
    repo = FakeRemoteRepo(remote_tags={}, push_fails=True)

    result = _publish(repo, "v1.2.0")

    assert isinstance(result, Err)
    assert result.error.kind == "tag_push_failed"
    assert result.error.is_fatal


def test_prod_remote_added_once() -> None:
    repo = FakeRemoteRepo(remote_tags={})
    console = MockConsole()

    ensure_prod_remote(repo=repo, name="remote.prod.url", url="git@x:a/b.git", console=console)  # type: ignore[arg-type]
    ensure_prod_remote(repo=repo, name="remote.prod.url", url="git@x:a/b.git", console=console)  # type: ignore[arg-type]

    assert repo.calls.count(("remote add", "remote.prod.url", "git@x:a/b.git")) == 1
