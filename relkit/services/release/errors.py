from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "configuration_error",
    "invalid_version",
    "tool_missing",
    "no_prior_tag",
    "cleanup_failed",
    "clone_failed",
    "version_bump_failed",
    "commit_failed",
    "build_failed",
    "template_error",
    "tag_push_failed",
    "release_delete_failed",
    "release_create_failed",
    "asset_upload_failed",
]

# The only kind a run recovers from; every other kind aborts the release.
RECOVERABLE_KINDS: frozenset[str] = frozenset({"asset_upload_failed"})


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    @property
    def is_fatal(self) -> bool:
        return self.kind not in RECOVERABLE_KINDS

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
