"""Warning/critical threshold calculation."""

from __future__ import annotations

import logging
import math

from cfn_metrics_advisor.catalog import ThresholdSpec
from cfn_metrics_advisor.models import Polarity, Threshold

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (45.5 -> 46)."""
    return int(math.floor(value + 0.5))


def compute_threshold(
    spec: ThresholdSpec,
    scale: float,
    polarity: Polarity = Polarity.HIGHER_IS_WORSE,
    metric_name: str = "",
) -> Threshold:
    """Scale a catalog threshold and repair it into a usable alarm pair.

    ``warning = round(base * scale * warning_multiplier)`` and likewise for
    critical. For higher-is-worse metrics the result always satisfies
    ``0 < warning < critical``; for lower-is-worse metrics it satisfies
    ``0 < critical < warning``. Never raises.
    """
    warning = round_half_up(spec.base * scale * spec.warning_multiplier)
    critical = round_half_up(spec.base * scale * spec.critical_multiplier)

    if polarity is Polarity.LOWER_IS_WORSE:
        if critical < warning and critical > 0:
            return Threshold(warning=warning, critical=critical)
        fixed_critical = max(critical, 1)
        fixed_warning = max(warning, fixed_critical + 1)
    else:
        if warning < critical and warning > 0:
            return Threshold(warning=warning, critical=critical)
        fixed_warning = max(warning, 1)
        fixed_critical = max(critical, fixed_warning + 1)

    logger.debug(
        "Corrected %s thresholds for %s: warning %d -> %d, critical %d -> %d",
        polarity.value,
        metric_name or "metric",
        warning,
        fixed_warning,
        critical,
        fixed_critical,
    )
    return Threshold(warning=fixed_warning, critical=fixed_critical)
