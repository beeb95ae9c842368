"""Artist match discovery thresholds."""

from __future__ import annotations

from crosslink.domain.matching.discovery import DiscoveryPolicy
from crosslink.domain.matching.scoring import AutoConfirmThresholds

from .env import env_float, env_int


def get_discovery_policy() -> DiscoveryPolicy:
    defaults = DiscoveryPolicy()
    return DiscoveryPolicy(
        min_tracks_for_discovery=env_int(
            "CROSSLINK_MIN_TRACKS", defaults.min_tracks_for_discovery
        ),
        max_tracks_for_matching=env_int(
            "CROSSLINK_MAX_TRACKS", defaults.max_tracks_for_matching
        ),
        isrc_batch_size=env_int("CROSSLINK_ISRC_BATCH_SIZE", defaults.isrc_batch_size),
        thresholds=AutoConfirmThresholds(
            min_confidence=env_float(
                "CROSSLINK_AUTO_CONFIRM_MIN_CONFIDENCE",
                defaults.thresholds.min_confidence,
            ),
            min_matching_isrcs=env_int(
                "CROSSLINK_AUTO_CONFIRM_MIN_ISRCS",
                defaults.thresholds.min_matching_isrcs,
            ),
        ),
        weights=defaults.weights,
    )
