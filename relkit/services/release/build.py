from __future__ import annotations

from relkit.core.config import ProjectLayout
from relkit.core.result import Err, Ok, Result
from relkit.output.console import ConsoleProtocol, Style
from relkit.platform.process import run_silent
from relkit.services.release.errors import ReleaseError
from relkit.services.release.model import WorkingCheckout


def run_build(
    *,
    checkout: WorkingCheckout,
    layout: ProjectLayout,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    """Run the project's own build and tests inside the checkout.

    Output streams to the terminal. Any non-zero exit aborts the release.
    """
    cmd = list(layout.build_command)
    env_prefix = " ".join(f"{k}={v}" for k, v in layout.build_env.items())
    console.print(f"{env_prefix} {' '.join(cmd)}".strip(), Style.DIM)

    result = run_silent(cmd, cwd=checkout.root, env=dict(layout.build_env))
    if isinstance(result, Err):
        e = result.error
        return Err(
            ReleaseError(
                kind="build_failed",
                message=f"build failed (exit {e.returncode})",
                hint=e.stderr.strip() or None,
            )
        )
    return Ok(None)
