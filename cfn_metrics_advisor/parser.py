"""Load CloudFormation templates from YAML or JSON."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from cfn_metrics_advisor.errors import ErrorType, TemplateError

logger = logging.getLogger(__name__)

# Templates larger than this are rejected before reading (50 MB).
MAX_TEMPLATE_SIZE_BYTES = 50 * 1024 * 1024

# Short-form tags whose long form is not ``Fn::<Tag>``.
_NON_FN_TAGS = {"Ref": "Ref", "Condition": "Condition"}


# ──────────────────────────── YAML Loader ─────────────────────────────────────


class CloudFormationLoader(yaml.SafeLoader):
    """SafeLoader that understands ``!Ref``, ``!GetAtt``, ``!Sub`` and friends."""


def _construct_intrinsic(loader: CloudFormationLoader, tag_suffix: str, node: yaml.Node) -> dict[str, Any]:
    key = _NON_FN_TAGS.get(tag_suffix, f"Fn::{tag_suffix}")

    if isinstance(node, yaml.ScalarNode):
        value: Any = loader.construct_scalar(node)
        if tag_suffix == "GetAtt" and isinstance(value, str):
            value = value.split(".", 1)
    elif isinstance(node, yaml.SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    else:
        value = loader.construct_mapping(node, deep=True)
    return {key: value}


CloudFormationLoader.add_multi_constructor("!", _construct_intrinsic)


# ──────────────────────────── Parsing ─────────────────────────────────────────


def _detect_format(path: Path) -> str:
    return "json" if path.suffix.lower() == ".json" else "yaml"


def validate_template(template: Any, file_path: str = "") -> dict[str, Any]:
    """Check that *template* has the shape the analyzer relies on."""
    if not isinstance(template, dict):
        raise TemplateError(
            "Template must be a mapping at the top level",
            details={"actualType": type(template).__name__},
            file_path=file_path,
            error_type=ErrorType.PARSE_ERROR,
        )
    resources = template.get("Resources")
    if resources is None:
        raise TemplateError(
            "Template has no Resources section",
            file_path=file_path,
            error_type=ErrorType.PARSE_ERROR,
        )
    if not isinstance(resources, dict):
        raise TemplateError(
            "Resources section must be a mapping",
            details={"actualType": type(resources).__name__},
            file_path=file_path,
            error_type=ErrorType.PARSE_ERROR,
        )
    return template


def parse_document(text: str, fmt: str = "yaml", file_path: str = "") -> Any:
    """Parse *text* as ``json`` or ``yaml`` without checking its shape."""
    try:
        if fmt == "json":
            return json.loads(text)
        return yaml.load(text, Loader=CloudFormationLoader)  # noqa: S506 - SafeLoader subclass
    except json.JSONDecodeError as exc:
        raise TemplateError(
            f"JSON syntax error: {exc.msg}",
            details={"line": exc.lineno, "column": exc.colno},
            file_path=file_path,
            error_type=ErrorType.PARSE_ERROR,
        ) from exc
    except yaml.YAMLError as exc:
        details: dict[str, Any] = {}
        mark = getattr(exc, "problem_mark", None)
        if mark is not None:
            details = {"line": mark.line + 1, "column": mark.column + 1}
        raise TemplateError(
            f"YAML syntax error: {exc}",
            details=details,
            file_path=file_path,
            error_type=ErrorType.PARSE_ERROR,
        ) from exc


def parse_template_text(text: str, fmt: str = "yaml", file_path: str = "") -> dict[str, Any]:
    """Parse template *text* as ``json`` or ``yaml`` and validate its shape."""
    return validate_template(parse_document(text, fmt, file_path), file_path)


def read_document(path: str | Path) -> Any:
    """Read and parse the file at *path* without checking its shape.

    Raises :class:`TemplateError` with ``FILE_ERROR`` for missing, oversized
    or unreadable files and ``PARSE_ERROR`` for syntax errors.
    """
    path = Path(path)
    file_path = str(path)
    if not path.exists():
        raise TemplateError(f"Template not found: {path}", file_path=file_path)
    if not path.is_file():
        raise TemplateError(f"Path is not a file: {path}", file_path=file_path)

    size = path.stat().st_size
    if size > MAX_TEMPLATE_SIZE_BYTES:
        raise TemplateError(
            f"Template too large: {size / 1024 / 1024:.1f} MB (max 50 MB)",
            details={"fileSize": size},
            file_path=file_path,
        )

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateError(
            f"Failed to read template: {exc}",
            file_path=file_path,
        ) from exc

    return parse_document(text, _detect_format(path), file_path)


def load_template(path: str | Path) -> dict[str, Any]:
    """Read, parse and validate the template at *path*."""
    template = validate_template(read_document(path), str(path))
    logger.debug("Loaded %s with %d resources", path, len(template["Resources"]))
    return template
