"""Identity shared by releases, tracks and artist matches."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from crosslink.domain.model.enums import EntityType


@dataclass(eq=False, kw_only=True)
class Entity:
    """Ids are minted on construction so links can reference unsaved owners."""

    ENTITY_TYPE: ClassVar[EntityType]

    id: UUID = field(default_factory=uuid4)

    @property
    def entity_type(self) -> EntityType:
        """Owner discriminator used when storing link sets."""
        return self.ENTITY_TYPE
