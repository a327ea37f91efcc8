import logging
from typing import List

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("verity")

from .settings import Settings, split_model_ref
from .constants import (
    JUDGE_CONFIG,
    CLAIM_CONFIG,
    RETRIEVAL_CONFIG,
    CONSENSUS_CONFIG,
    BIAS_CONFIG,
    SCORING_CONFIG,
    API_TIMEOUTS,
    DOMAIN_REPUTATION,
)

settings = Settings()

CAPABILITY_KEYS = {
    "judges": ["JUDGE_API_KEY"],
    "keyword_search": ["GOOGLE_SEARCH_API_KEY", "GOOGLE_SEARCH_ENGINE_ID"],
}


def check_api_keys_on_startup(current: Settings = None) -> List[str]:
    """Log which capabilities run degraded and return the missing key names."""
    current = current or settings
    missing_keys = []
    for capability, key_names in CAPABILITY_KEYS.items():
        absent = [k for k in key_names if not getattr(current, k, None)]
        if absent:
            missing_keys.extend(absent)
            logger.warning(
                f"Capability '{capability}' is degraded, missing: {', '.join(absent)}",
                extra={"capability": capability, "missing": absent}
            )

    if not missing_keys:
        logger.info("All judge and search credentials are configured.")
    return missing_keys


__all__ = [
    "logger",
    "settings",
    "Settings",
    "split_model_ref",
    "check_api_keys_on_startup",
    "CAPABILITY_KEYS",
    "JUDGE_CONFIG",
    "CLAIM_CONFIG",
    "RETRIEVAL_CONFIG",
    "CONSENSUS_CONFIG",
    "BIAS_CONFIG",
    "SCORING_CONFIG",
    "API_TIMEOUTS",
    "DOMAIN_REPUTATION",
]
