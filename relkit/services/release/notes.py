from __future__ import annotations

import re
import shutil
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from relkit.core.config import ProjectLayout
from relkit.core.result import Err, Ok, Result
from relkit.git.repository import Repository
from relkit.output.console import ConsoleProtocol, Style
from relkit.services.release.checksums import compute_checksums, render_checksums
from relkit.services.release.errors import ReleaseError
from relkit.services.release.model import WorkingCheckout


@dataclass(frozen=True, slots=True)
class ReleaseNotes:
    path: Path
    text: str


def placeholder(name: str) -> str:
    return "{{" + name + "}}"


def fill_placeholder(text: str, name: str, value: str) -> str:
    """Replace every ``{{name}}`` in ``text`` with ``value``."""
    return text.replace(placeholder(name), value)


def render_notes(template: str, values: Mapping[str, str]) -> str:
    """Fill every placeholder in a single scan of ``template``.

    Inserted values are never rescanned, so a commit subject mentioning
    ``{{CHECKSUM}}`` stays literal. Absent placeholders are left alone.
    """
    if not values:
        return template
    names = "|".join(re.escape(name) for name in values)
    pattern = re.compile(r"\{\{(" + names + r")\}\}")
    return pattern.sub(lambda m: values[m.group(1)], template)


def render_changelog(lines: Iterable[str]) -> str:
    return "\n".join(lines)


def render_contributors(authors: Iterable[str]) -> str:
    return "\n".join(f"- {name}" for name in sorted(set(authors)))


def _template_error(message: str, hint: str | None = None) -> Err[ReleaseError]:
    return Err(ReleaseError(kind="template_error", message=message, hint=hint))


def compose_release_notes(
    *,
    checkout: WorkingCheckout,
    layout: ProjectLayout,
    version: str,
    tag: str,
    last_version: str,
    console: ConsoleProtocol,
) -> Result[ReleaseNotes, ReleaseError]:
    """Copy the notes template into the checkout and fill it in place."""
    template_path = checkout.root / layout.notes_template
    notes_path = checkout.notes_path(layout, version)

    console.print(f"{layout.notes_template} -> {notes_path.name}", Style.DIM)
    try:
        shutil.copyfile(template_path, notes_path)
        template = notes_path.read_text(encoding="utf-8")
    except OSError as e:
        return _template_error("can't find github release template", hint=str(e))

    repo = Repository(checkout.root)
    changelog = repo.log_oneline(last_version)
    if isinstance(changelog, Err):
        return _template_error("can't read changelog", hint=changelog.error.message)
    authors = repo.log_authors(last_version)
    if isinstance(authors, Err):
        return _template_error("can't read contributors", hint=authors.error.message)

    checksums = compute_checksums(checkout.output_dir(layout))
    if not checksums:
        console.warning(f"no artifacts found under {layout.output_dir}")

    text = render_notes(
        template,
        {
            "VERSION": tag,
            "CHANGELOG": render_changelog(changelog.value),
            "CONTRIBUTORS": render_contributors(authors.value),
            "CHECKSUM": render_checksums(checksums),
        },
    )

    try:
        notes_path.write_text(text, encoding="utf-8")
    except OSError as e:
        return _template_error(f"can't write {notes_path}", hint=str(e))

    return Ok(ReleaseNotes(path=notes_path, text=text))
