from __future__ import annotations

import re
from pathlib import Path

from relkit.core.config import CONFIG_FILE_NAME, load_layout, load_layout_or_default
from relkit.core.result import Err, Ok, Result
from relkit.platform.process import find_missing
from relkit.services.release.errors import ReleaseError
from relkit.services.release.model import ReleaseConfig, default_project_url

# 0.5.1, 0.6 or 0.5.1-rc2
VERSION_RE = re.compile(r"^\d\.\d(\.\d)?(-rc[1-9]\d*)?$", re.ASCII)

REQUIRED_TOOLS: tuple[str, ...] = ("git", "github-release")

_TOOL_HINTS = {
    "git": "You obviously need git, please consider installing it.",
    "github-release": "Install it with: go install github.com/github-release/github-release@latest",
}


def is_valid_version(version: str) -> bool:
    return VERSION_RE.fullmatch(version) is not None


def validate_version(version: str) -> Result[str, ReleaseError]:
    if not is_valid_version(version):
        return Err(
            ReleaseError(
                kind="invalid_version",
                message=f"invalid version: {version}",
                hint="It should look like 0.5.1, 0.6 or 0.5.1-rc2",
            )
        )
    return Ok(version)


def validate_inputs(
    *,
    owner: str | None,
    repo: str | None,
    token: str | None,
    version: str | None,
) -> Result[str, ReleaseError]:
    """Check required values are present and the version is well formed.

    Returns the validated version. Has no side effects.
    """
    required = (
        ("owner", owner, "GITHUB_USER"),
        ("repo", repo, "GITHUB_REPO"),
        ("token", token, "GITHUB_TOKEN"),
        ("version", version, "VERSION argument"),
    )
    for name, value, source in required:
        if value is None or not value.strip():
            return Err(
                ReleaseError(
                    kind="configuration_error",
                    message=f"missing {name}",
                    hint=f"Set {source}",
                )
            )

    assert version is not None
    return validate_version(version)


def ensure_tools_available(
    tools: tuple[str, ...] = REQUIRED_TOOLS,
) -> Result[None, ReleaseError]:
    missing = find_missing(tools)
    if missing:
        first = missing[0]
        return Err(
            ReleaseError(
                kind="tool_missing",
                message=f"{', '.join(missing)}: missing",
                hint=_TOOL_HINTS.get(first),
            )
        )
    return Ok(None)


def resolve_config(
    *,
    owner: str | None,
    repo: str | None,
    token: str | None,
    version: str | None,
    project_url: str | None,
    source_root: Path,
    config_path: Path | None,
) -> Result[ReleaseConfig, ReleaseError]:
    """Validate inputs and assemble the configuration for one run."""
    valid = validate_inputs(owner=owner, repo=repo, token=token, version=version)
    if isinstance(valid, Err):
        return valid
    assert owner is not None and repo is not None and token is not None

    if config_path is not None:
        layout = load_layout(config_path)
    else:
        layout = load_layout_or_default(source_root / CONFIG_FILE_NAME)
    if isinstance(layout, Err):
        return Err(
            ReleaseError(
                kind="configuration_error",
                message=layout.error.message,
                hint=str(layout.error.path) if layout.error.path else None,
            )
        )

    owner, repo = owner.strip(), repo.strip()
    return Ok(
        ReleaseConfig(
            version=valid.value,
            owner=owner,
            repo=repo,
            token=token.strip(),
            project_url=(project_url or "").strip() or default_project_url(owner, repo),
            layout=layout.value,
        )
    )
