"""Application configuration and settings."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_MAX_ALARMS = 20
DEFAULT_CONCURRENCY = 6
DEFAULT_OUTPUT_FORMAT = "json"
OUTPUT_FORMATS = ("json", "html", "yaml")

ENV_MAX_ALARMS = "CFN_METRICS_MAX_ALARMS"

_POSITIVE_INTEGER = re.compile(r"\+?[0-9]+")


def resolve_max_alarms(raw: Any) -> int:
    """Turn an override for the per-resource alarm cap into a positive integer.

    Accepts ints and numeric strings. Anything that is not a positive integer
    falls back to :data:`DEFAULT_MAX_ALARMS`; the cap is never zero or negative.
    """
    if raw is None or raw == "":
        return DEFAULT_MAX_ALARMS
    if isinstance(raw, bool):
        value = None
    elif isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and _POSITIVE_INTEGER.fullmatch(raw.strip()):
        value = int(raw.strip())
    else:
        value = None

    if value is None or value <= 0:
        logger.warning(
            "Ignoring invalid max alarms override %r, using default %d", raw, DEFAULT_MAX_ALARMS
        )
        return DEFAULT_MAX_ALARMS
    return value


class Settings(BaseModel):
    """Runtime settings resolved from env vars and CLI flags."""

    # Input
    template_path: str = ""

    # Output
    output_format: str = DEFAULT_OUTPUT_FORMAT  # json | html | yaml
    output_file: str = ""

    # Recommendation behaviour
    max_alarms_per_resource: int = Field(
        default_factory=lambda: resolve_max_alarms(os.environ.get(ENV_MAX_ALARMS)),
        description=f"Cap on recommendations per resource (env {ENV_MAX_ALARMS}).",
    )
    resource_types: list[str] = Field(
        default_factory=list,
        description="Only analyse these CloudFormation types. Empty = all supported types.",
    )
    include_unsupported: bool = True
    include_low_importance: bool = True
    honor_polarity: bool = Field(
        default=False,
        description="Compute lower-is-worse metrics with critical below warning.",
    )

    # Execution
    continue_on_error: bool = True
    concurrency: int = DEFAULT_CONCURRENCY
    verbose: bool = False

    # Template discovery
    include_patterns: list[str] = Field(
        default_factory=lambda: ["**/*.yaml", "**/*.yml", "**/*.json", "**/*.template"],
    )
    exclude_patterns: list[str] = Field(
        default_factory=lambda: [
            "**/node_modules/**",
            "**/.git/**",
            "**/cdk.out/**/*.assets.json",
            "**/__pycache__/**",
            "**/.venv/**",
            "**/venv/**",
            "**/package.json",
            "**/package-lock.json",
            "**/tsconfig.json",
        ],
    )

    @field_validator("max_alarms_per_resource", mode="before")
    @classmethod
    def validate_max_alarms(cls, value: Any) -> int:
        return resolve_max_alarms(value)

    @field_validator("output_format")
    @classmethod
    def validate_output_format(cls, value: str) -> str:
        value = value.lower()
        if value not in OUTPUT_FORMATS:
            raise ValueError(f"output_format must be one of {', '.join(OUTPUT_FORMATS)}")
        return value

    @field_validator("concurrency")
    @classmethod
    def validate_concurrency(cls, value: int) -> int:
        return max(1, value)

    @property
    def resolved_output_file(self) -> Path | None:
        return Path(self.output_file).resolve() if self.output_file else None
