from __future__ import annotations

import pytest

from crosslink.domain.model import (
    ProviderKey,
    normalize_isrc,
    normalize_upc,
    provider_name,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("USABC2400001", "USABC2400001"),
        ("us-abc-24-00001", "USABC2400001"),
        (" GB A1B 24 12345 ", "GBA1B2412345"),
    ],
)
def test_normalize_isrc_accepts_common_formats(raw: str, expected: str) -> None:
    assert normalize_isrc(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [None, "", "USABC24", "1SABC2400001", "USABC24000012", "US?BC2400001"],
)
def test_normalize_isrc_rejects_malformed_values(raw: str | None) -> None:
    assert normalize_isrc(raw) is None


@pytest.mark.parametrize("raw", ["12345678", "123456789012", "0123456789012", "01234567890123"])
def test_normalize_upc_accepts_known_lengths(raw: str) -> None:
    assert normalize_upc(raw) == raw


def test_normalize_upc_strips_separators_and_rejects_garbage() -> None:
    assert normalize_upc("0-12345-67890-5") == "012345678905"
    assert normalize_upc("1234567890") is None
    assert normalize_upc("ABCDEFGHIJKL") is None


def test_provider_name_normalizes_keys_and_strings() -> None:
    assert provider_name(ProviderKey.APPLE_MUSIC) == "apple_music"
    assert provider_name(" SoundCloud ") == "soundcloud"
