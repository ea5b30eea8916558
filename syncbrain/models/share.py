"""Share-link models.

A :class:`ShareLink` maps a short opaque hash to an owner.  At most one
link exists per owner; links are created and deleted, never mutated.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from syncbrain.models.content import ContentRecord


class ShareLink(BaseModel):
    model_config = ConfigDict(frozen=True)

    hash: str = Field(min_length=1)
    owner: str
    created_at: datetime


class SharedBrain(BaseModel):
    """Everything visible through a resolved share link."""

    model_config = ConfigDict(frozen=True)

    owner: str
    records: list[ContentRecord] = Field(default_factory=list)
