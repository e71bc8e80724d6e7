"""Git repository abstraction.

This module provides the Repository class for the git operations a release
needs: tag inspection and publication, cloning, committing and log queries.
All operations return Result types for proper error handling.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.describe_last_tag():
        case Ok(tag):
            print(f"Last release: {tag}")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from relkit.core.result import Err, Ok, Result
from relkit.platform.process import ProcessError
from relkit.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0
_NETWORK_COMMANDS = frozenset({"fetch", "pull", "push", "clone", "ls-remote"})

__all__ = [
    "GitError",
    "Repository",
    "clone",
    "parse_ls_remote_tags",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


def _git_error(command: str, e: ProcessError, fallback: str) -> GitError:
    return GitError(command=command, message=e.detail or fallback, returncode=e.returncode)


def parse_ls_remote_tags(output: str) -> set[str]:
    """Extract tag names from ``git ls-remote --tags`` output.

    Peeled entries (``refs/tags/v1.0^{}``) are folded into their tag name.
    """
    tags: set[str] = set()
    for line in output.splitlines():
        parts = line.split()
        if len(parts) != 2 or not parts[1].startswith("refs/tags/"):
            continue
        name = parts[1].removeprefix("refs/tags/").removesuffix("^{}")
        if name:
            tags.add(name)
    return tags


def clone(url: str, dest: Path, *, cwd: Path) -> Result[Repository, GitError]:
    """Clone ``url`` into ``dest`` quietly."""
    result = run_process(
        ["git", "clone", "-q", url, str(dest)],
        cwd=cwd,
        timeout=_GIT_NETWORK_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        return Err(_git_error("clone", result.error, "clone failed"))
    return Ok(Repository(dest))


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the repository root (or any directory inside it)
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def toplevel(self) -> Result[Path, GitError]:
        """Absolute path of the working tree root."""
        result = self._run(["rev-parse", "--show-toplevel"])
        match result:
            case Err(e):
                return Err(_git_error("rev-parse", e, "not a git repository"))
            case Ok(stdout):
                return Ok(Path(stdout.strip()))

    # -- tags -----------------------------------------------------------------

    def local_tags(self) -> Result[set[str], GitError]:
        result = self._run(["tag", "--list"])
        match result:
            case Err(e):
                return Err(_git_error("tag --list", e, "tag listing failed"))
            case Ok(stdout):
                return Ok({line.strip() for line in stdout.splitlines() if line.strip()})

    def remote_tags(self, remote: str) -> Result[set[str], GitError]:
        """Tag names published on ``remote``."""
        result = self._run(["ls-remote", "--tags", remote])
        match result:
            case Err(e):
                return Err(_git_error("ls-remote", e, "ls-remote failed"))
            case Ok(stdout):
                return Ok(parse_ls_remote_tags(stdout))

    def fetch_tags(self) -> Result[None, GitError]:
        result = self._run(["fetch", "--tags"])
        if isinstance(result, Err):
            return Err(_git_error("fetch --tags", result.error, "fetch failed"))
        return Ok(None)

    def describe_last_tag(self) -> Result[str, GitError]:
        """Most recent tag reachable from HEAD."""
        result = self._run(["describe", "--abbrev=0", "--tags"])
        match result:
            case Err(e):
                return Err(_git_error("describe", e, "no tag found"))
            case Ok(stdout):
                tag = stdout.strip()
                if not tag:
                    return Err(GitError(command="describe", message="no tag found"))
                return Ok(tag)

    def create_tag(self, name: str) -> Result[None, GitError]:
        result = self._run(["tag", name])
        if isinstance(result, Err):
            return Err(_git_error("tag", result.error, f"cannot create tag {name}"))
        return Ok(None)

    def delete_tag(self, name: str) -> Result[None, GitError]:
        result = self._run(["tag", "-d", name])
        if isinstance(result, Err):
            return Err(_git_error("tag -d", result.error, f"cannot delete tag {name}"))
        return Ok(None)

    # -- remotes --------------------------------------------------------------

    def remotes(self) -> Result[list[str], GitError]:
        result = self._run(["remote"])
        match result:
            case Err(e):
                return Err(_git_error("remote", e, "remote listing failed"))
            case Ok(stdout):
                return Ok([line.strip() for line in stdout.splitlines() if line.strip()])

    def add_remote(self, name: str, url: str) -> Result[None, GitError]:
        result = self._run(["remote", "add", name, url])
        if isinstance(result, Err):
            return Err(_git_error("remote add", result.error, f"cannot add remote {name}"))
        return Ok(None)

    def remove_remote(self, name: str) -> Result[None, GitError]:
        result = self._run(["remote", "rm", name])
        if isinstance(result, Err):
            return Err(_git_error("remote rm", result.error, f"cannot remove remote {name}"))
        return Ok(None)

    def push(self, remote: str, refspec: str) -> Result[None, GitError]:
        result = self._run(["push", "-q", remote, refspec])
        if isinstance(result, Err):
            return Err(_git_error("push", result.error, f"push of {refspec} failed"))
        return Ok(None)

    # -- commits --------------------------------------------------------------

    def add(self, path: str) -> Result[None, GitError]:
        result = self._run(["add", path])
        if isinstance(result, Err):
            return Err(_git_error("add", result.error, f"cannot stage {path}"))
        return Ok(None)

    def commit(self, message: str, *, signoff: bool = True) -> Result[None, GitError]:
        args = ["commit", "-q", "-m", message]
        if signoff:
            args.append("-s")
        result = self._run(args)
        if isinstance(result, Err):
            return Err(_git_error("commit", result.error, "commit failed"))
        return Ok(None)

    def log_oneline(self, since: str) -> Result[list[str], GitError]:
        """One-line summaries of commits after ``since``, newest first."""
        result = self._run(["log", f"{since}..", "--oneline"])
        match result:
            case Err(e):
                return Err(_git_error("log", e, "log failed"))
            case Ok(stdout):
                return Ok([line for line in stdout.splitlines() if line.strip()])

    def log_authors(self, since: str) -> Result[list[str], GitError]:
        """Author names of commits after ``since``, oldest first, with repeats."""
        result = self._run(["log", f"{since}..", "--format=%aN", "--reverse"])
        match result:
            case Err(e):
                return Err(_git_error("log", e, "log failed"))
            case Ok(stdout):
                return Ok([line.strip() for line in stdout.splitlines() if line.strip()])

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS if command in _NETWORK_COMMANDS else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)
