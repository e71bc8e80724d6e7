from __future__ import annotations

import hashlib
from pathlib import Path

from relkit.services.release.model import ArtifactChecksum

_CHUNK_SIZE = 1024 * 1024


def list_artifacts(output_dir: Path) -> list[Path]:
    """Regular files under ``output_dir``, recursively, in path order."""
    if not output_dir.is_dir():
        return []
    return sorted(p for p in output_dir.rglob("*") if p.is_file() and not p.is_symlink())


def checksum_file(path: Path) -> ArtifactChecksum:
    sha256 = hashlib.sha256()
    md5 = hashlib.md5(usedforsecurity=False)
    with path.open("rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            sha256.update(chunk)
            md5.update(chunk)
    return ArtifactChecksum(filename=path.name, sha256=sha256.hexdigest(), md5=md5.hexdigest())


def compute_checksums(output_dir: Path) -> list[ArtifactChecksum]:
    return [checksum_file(p) for p in list_artifacts(output_dir)]


def render_checksum_block(checksum: ArtifactChecksum) -> str:
    return (
        f"\n * **{checksum.filename}**\n"
        f"  * sha256 `{checksum.sha256}`\n"
        f"  * md5 `{checksum.md5}`\n\n"
    )


def render_checksums(checksums: list[ArtifactChecksum]) -> str:
    return "".join(render_checksum_block(c) for c in checksums)
