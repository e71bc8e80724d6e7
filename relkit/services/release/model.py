from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from relkit.core.config import ProjectLayout


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Everything a single release run needs, resolved once at startup."""

    version: str
    owner: str
    repo: str
    token: str
    project_url: str
    layout: ProjectLayout = field(default_factory=ProjectLayout)

    @property
    def tag(self) -> str:
        return f"v{self.version}"

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def masked_token(self) -> str:
        if len(self.token) <= 4:
            return "****"
        return f"{self.token[:4]}****"

    def release_url(self) -> str:
        return f"https://github.com/{self.slug}/releases/tag/{self.tag}"

    def release_doc_url(self) -> str:
        return f"https://github.com/{self.slug}/blob/master/docs/RELEASE.md"


def default_project_url(owner: str, repo: str) -> str:
    return f"git@github.com:{owner}/{repo}.git"


@dataclass(frozen=True, slots=True)
class ArtifactChecksum:
    filename: str
    sha256: str
    md5: str


@dataclass(frozen=True, slots=True)
class WorkingCheckout:
    """A fresh clone owned by one release run."""

    root: Path

    def output_dir(self, layout: ProjectLayout) -> Path:
        return self.root / layout.output_dir

    def notes_path(self, layout: ProjectLayout, version: str) -> Path:
        return self.root / layout.notes_file_for(version)


@dataclass(frozen=True, slots=True)
class UploadReport:
    uploaded: tuple[str, ...]
    failed: tuple[str, ...]

    @property
    def complete(self) -> bool:
        return not self.failed
