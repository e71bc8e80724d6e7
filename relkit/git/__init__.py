"""Git operations module.

Usage:
    from relkit.git import Repository

    repo = Repository(Path("/path/to/repo"))
    tags = repo.remote_tags("origin")
"""

from relkit.git.repository import (
    GitError,
    Repository,
    clone,
    parse_ls_remote_tags,
)

__all__ = [
    "GitError",
    "Repository",
    "clone",
    "parse_ls_remote_tags",
]
