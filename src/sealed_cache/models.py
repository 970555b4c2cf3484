"""Conversation and message records mirrored from the authoritative backend."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Message(BaseModel):
    """A single chat message."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    conversation_id: str = Field(alias="conversationId")
    sender_id: str = Field(alias="senderId")
    body: str = ""
    created_at: datetime = Field(alias="createdAt")


class Conversation(BaseModel):
    """A conversation summary as listed in the owner's inbox."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    participant_ids: list[str] = Field(default_factory=list, alias="participantIds")
    title: str = ""
    last_message: str | None = Field(default=None, alias="lastMessage")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")
