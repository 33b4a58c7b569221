"""Cap the number of alarm recommendations per resource."""

from __future__ import annotations

import logging
import os

from cfn_metrics_advisor.config import ENV_MAX_ALARMS, resolve_max_alarms
from cfn_metrics_advisor.models import MetricDefinition

logger = logging.getLogger(__name__)


def _rank(definition: MetricDefinition) -> tuple[int, int]:
    return (-definition.importance.tier, -definition.threshold.critical)


def limit_alarms(
    definitions: list[MetricDefinition],
    max_count: int | str | None = None,
) -> list[MetricDefinition]:
    """Keep at most *max_count* definitions, most important first.

    Lists already within the cap come back unchanged and in their original
    order. Longer lists are stably sorted by importance tier, then by
    critical threshold (both descending) and truncated. *max_count* goes
    through :func:`resolve_max_alarms`; ``None`` reads the
    ``CFN_METRICS_MAX_ALARMS`` environment variable, and an invalid value
    means the default cap.
    """
    if max_count is None:
        max_count = os.environ.get(ENV_MAX_ALARMS)
    limit = resolve_max_alarms(max_count)
    if len(definitions) <= limit:
        return definitions

    kept = sorted(definitions, key=_rank)[:limit]
    logger.info(
        "Limited alarm recommendations from %d to %d (%d dropped)",
        len(definitions),
        limit,
        len(definitions) - limit,
    )
    return kept
