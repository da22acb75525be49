"""
Messaging models: direct and group conversations.
"""

from datetime import datetime
from typing import Literal

from pydantic import Field, model_validator

from fashion_api.schemas.common import CamelModel, Pagination


class ConversationCreate(CamelModel):
    conversation_type: Literal['direct', 'group'] = 'direct'
    participant_ids: list[str] = Field(..., min_length=1)
    name: str | None = Field(default=None, max_length=120)

    @model_validator(mode='after')
    def check_participants(self):
        if self.conversation_type == 'direct' and len(set(self.participant_ids)) != 1:
            raise ValueError('Direct conversations take exactly one other participant')
        if self.conversation_type == 'group' and not self.name:
            raise ValueError('Group conversations require a name')
        return self


class ParticipantResponse(CamelModel):
    user_id: str
    role: str
    joined_at: datetime


class ConversationResponse(CamelModel):
    id: str
    conversation_type: str
    name: str | None
    created_by: str
    participants: list[ParticipantResponse]
    created_at: datetime
    updated_at: datetime


class ConversationList(CamelModel):
    conversations: list[ConversationResponse]


class ParticipantsAdd(CamelModel):
    user_ids: list[str] = Field(..., min_length=1)


class MessageCreate(CamelModel):
    content: str = Field(..., min_length=1, max_length=5000)


class MessageResponse(CamelModel):
    id: str
    conversation_id: str
    sender_id: str
    content: str
    created_at: datetime


class MessageList(CamelModel):
    messages: list[MessageResponse]
    pagination: Pagination
