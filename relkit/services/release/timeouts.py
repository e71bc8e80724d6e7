from __future__ import annotations

# github-release info/delete/release
GITHUB_RELEASE_TIMEOUT_SECONDS = 60.0

# Single asset upload; binaries can be large
GITHUB_RELEASE_UPLOAD_TIMEOUT_SECONDS = 15 * 60.0
