"""Shared fixtures for Deezer adapter tests."""

from __future__ import annotations

import pytest

from crosslink.config.deezer import DEEZER_BASE_URL, DeezerConfig, get_deezer_config
from crosslink.config.http_resilience import ProviderHttpConfig, RetryPolicy


@pytest.fixture
def deezer_config() -> DeezerConfig:
    return get_deezer_config(
        http=ProviderHttpConfig(
            provider="deezer-test",
            base_url=DEEZER_BASE_URL,
            retry=RetryPolicy(total=0),
            cache=None,
        )
    )
