"""Find CloudFormation templates in a directory tree."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pathspec

from cfn_metrics_advisor.config import Settings
from cfn_metrics_advisor.errors import TemplateError
from cfn_metrics_advisor.parser import read_document

logger = logging.getLogger(__name__)

# Maximum file size considered during discovery (1 MB).
MAX_FILE_SIZE_BYTES = 1_048_576

DEFAULT_INCLUDE = ["**/*.yaml", "**/*.yml", "**/*.json", "**/*.template"]


def _build_pathspec(patterns: list[str]) -> pathspec.PathSpec:
    return pathspec.PathSpec.from_lines("gitwildmatch", patterns)


def discover_template_files(
    root: Path,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
) -> list[Path]:
    """Walk *root* and return candidate template files, sorted."""
    include = include or DEFAULT_INCLUDE
    exclude = exclude or []

    inc_spec = _build_pathspec(include)
    exc_spec = _build_pathspec(exclude) if exclude else None

    candidates: list[Path] = []
    for p in root.rglob("*"):
        if not p.is_file():
            continue
        try:
            size = p.stat().st_size
        except OSError:
            continue
        if size > MAX_FILE_SIZE_BYTES:
            logger.debug("Skipping oversized file (%d bytes): %s", size, p)
            continue
        rel = p.relative_to(root).as_posix()
        if inc_spec.match_file(rel) and (exc_spec is None or not exc_spec.match_file(rel)):
            candidates.append(p)
    return sorted(candidates)


def looks_like_cloudformation(doc: Any) -> bool:
    """Heuristic: a mapping ``Resources`` whose entries carry a ``Type``."""
    if not isinstance(doc, dict):
        return False
    resources = doc.get("Resources")
    if not isinstance(resources, dict) or not resources:
        return False
    return all(isinstance(r, dict) and "Type" in r for r in resources.values())


def scan_directory(
    root: Path,
    settings: Settings | None = None,
) -> tuple[dict[str, dict[str, Any]], list[str]]:
    """Load every CloudFormation template below *root*.

    Returns ``(templates, errors)`` where *templates* maps the path relative
    to *root* to the parsed template. Files that are not CloudFormation are
    skipped silently; files that fail to parse are reported in *errors*.
    """
    settings = settings or Settings()
    root = Path(root).resolve()
    if not root.is_dir():
        raise TemplateError(f"Directory does not exist: {root}", file_path=str(root))

    files = discover_template_files(
        root,
        include=settings.include_patterns,
        exclude=settings.exclude_patterns,
    )

    templates: dict[str, dict[str, Any]] = {}
    errors: list[str] = []
    for f in files:
        rel = f.relative_to(root).as_posix()
        try:
            doc = read_document(f)
        except TemplateError as exc:
            errors.append(f"{rel}: {exc.message}")
            continue
        if looks_like_cloudformation(doc):
            templates[rel] = doc

    logger.info(
        "Scanned %d files -> %d CloudFormation templates (%d errors)",
        len(files),
        len(templates),
        len(errors),
    )
    return templates, errors
