"""
Messaging Router.

Direct and group conversations; only participants can read or post.
"""

import logging

from fastapi import APIRouter, Query, Response, status

from fashion_api.core.dependencies import DbDep
from fashion_api.core.security import CurrentUserDep
from fashion_api.schemas.messaging import (
    ConversationCreate,
    ConversationList,
    ConversationResponse,
    MessageCreate,
    MessageList,
    MessageResponse,
    ParticipantsAdd,
)
from fashion_api.services.messaging import MessagingService


logger = logging.getLogger(__name__)

router = APIRouter(prefix='/messaging', tags=['Messaging'])


@router.post('/conversations', response_model=ConversationResponse, status_code=status.HTTP_201_CREATED)
def create_conversation(user: CurrentUserDep, db: DbDep, data: ConversationCreate, response: Response):
    """Start a conversation; an existing direct chat with the same user is returned with 200."""
    conversation, created = MessagingService(db).create_conversation(user.id, data)
    if not created:
        response.status_code = status.HTTP_200_OK
    return ConversationResponse.model_validate(conversation)


@router.get('/conversations', response_model=ConversationList)
def list_conversations(user: CurrentUserDep, db: DbDep):
    conversations = MessagingService(db).list_conversations(user.id)
    return ConversationList(conversations=[ConversationResponse.model_validate(c) for c in conversations])


@router.get('/conversations/{conversation_id}', response_model=ConversationResponse)
def get_conversation(conversation_id: str, user: CurrentUserDep, db: DbDep):
    return ConversationResponse.model_validate(MessagingService(db).get_conversation(conversation_id, user.id))


@router.post('/conversations/{conversation_id}/participants', response_model=ConversationResponse)
def add_participants(conversation_id: str, user: CurrentUserDep, db: DbDep, data: ParticipantsAdd):
    conversation = MessagingService(db).add_participants(conversation_id, user.id, data.user_ids)
    return ConversationResponse.model_validate(conversation)


@router.delete('/conversations/{conversation_id}/participants/{participant_id}', response_model=ConversationResponse)
def remove_participant(conversation_id: str, participant_id: str, user: CurrentUserDep, db: DbDep):
    conversation = MessagingService(db).remove_participant(conversation_id, user.id, participant_id)
    return ConversationResponse.model_validate(conversation)


@router.post(
    '/conversations/{conversation_id}/messages',
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def send_message(conversation_id: str, user: CurrentUserDep, db: DbDep, data: MessageCreate):
    return MessageResponse.model_validate(MessagingService(db).send_message(conversation_id, user.id, data.content))


@router.get('/conversations/{conversation_id}/messages', response_model=MessageList)
def list_messages(
    conversation_id: str,
    user: CurrentUserDep,
    db: DbDep,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=100),
):
    messages, pagination = MessagingService(db).list_messages(conversation_id, user.id, page, limit)
    return MessageList(messages=[MessageResponse.model_validate(m) for m in messages], pagination=pagination)
