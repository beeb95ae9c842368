"""Domain primitives: scalar aliases and identifier normalization.

Provider metadata is inconsistent about identifier formatting, so normalizers return
``None`` for anything that does not look like a real identifier instead of raising.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from crosslink.domain.model.enums import ProviderKey

type Isrc = str
type Upc = str
type DurationMs = int
type ProviderName = ProviderKey | str

_SEPARATORS: Final = re.compile(r"[\s\-]+")
_ISRC_PATTERN: Final = re.compile(r"^[A-Z]{2}[A-Z0-9]{3}\d{7}$")
_UPC_PATTERN: Final = re.compile(r"^(\d{8}|\d{12,14})$")


def normalize_isrc(value: str | None) -> Isrc | None:
    """Return the compact upper-case ISRC (``CCXXXYYNNNNN``) or ``None`` if malformed."""
    if not value:
        return None
    candidate = _SEPARATORS.sub("", value).upper()
    if not _ISRC_PATTERN.match(candidate):
        return None
    return candidate


def normalize_upc(value: str | None) -> Upc | None:
    """Return the digit-only UPC/EAN (8, 12, 13 or 14 digits) or ``None`` if malformed."""
    if not value:
        return None
    candidate = _SEPARATORS.sub("", value)
    if not _UPC_PATTERN.match(candidate):
        return None
    return candidate


def provider_name(provider: ProviderName) -> str:
    """Plain string form of a provider key, for keyed lookups and persistence."""
    return str(provider).strip().lower()
