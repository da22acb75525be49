"""
Direct and group messaging.

Only participants can read or post in a conversation. A direct
conversation between the same two users is reused rather than duplicated.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from fashion_api.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from fashion_api.db.models import Conversation, ConversationParticipant, Message, utcnow
from fashion_api.schemas.common import Pagination
from fashion_api.schemas.messaging import ConversationCreate
from fashion_api.services.pagination import paginate


logger = logging.getLogger(__name__)


class MessagingService:
    def __init__(self, db: Session):
        self.db = db

    def _find_direct(self, user_a: str, user_b: str) -> Conversation | None:
        pair = (
            select(ConversationParticipant.conversation_id)
            .join(Conversation, Conversation.id == ConversationParticipant.conversation_id)
            .where(
                Conversation.conversation_type == 'direct',
                ConversationParticipant.user_id.in_([user_a, user_b]),
            )
            .group_by(ConversationParticipant.conversation_id)
            .having(func.count(ConversationParticipant.id) == 2)
        )
        conversation_id = self.db.scalar(pair.limit(1))
        return self.db.get(Conversation, conversation_id) if conversation_id else None

    def create_conversation(self, user_id: str, data: ConversationCreate) -> tuple[Conversation, bool]:
        """
        Start a conversation.

        Returns:
            (conversation, created) where created is False for a reused direct chat
        """
        others = [pid for pid in dict.fromkeys(data.participant_ids) if pid != user_id]
        if not others:
            raise ValidationError('A conversation needs at least one other participant')

        if data.conversation_type == 'direct':
            existing = self._find_direct(user_id, others[0])
            if existing is not None:
                return existing, False

        conversation = Conversation(
            conversation_type=data.conversation_type,
            name=data.name if data.conversation_type == 'group' else None,
            created_by=user_id,
        )
        owner_role = 'admin' if data.conversation_type == 'group' else 'member'
        conversation.participants.append(ConversationParticipant(user_id=user_id, role=owner_role))
        for other in others:
            conversation.participants.append(ConversationParticipant(user_id=other))

        self.db.add(conversation)
        self.db.commit()
        logger.info(f'{data.conversation_type} conversation {conversation.id} started by {user_id}')
        return conversation, True

    def get_conversation(self, conversation_id: str, user_id: str) -> Conversation:
        conversation = self.db.get(Conversation, conversation_id)
        if conversation is None:
            raise NotFoundError('Conversation', conversation_id)
        if not any(p.user_id == user_id for p in conversation.participants):
            raise PermissionDeniedError('You are not a participant in this conversation')
        return conversation

    def list_conversations(self, user_id: str) -> list[Conversation]:
        stmt = (
            select(Conversation)
            .join(ConversationParticipant, ConversationParticipant.conversation_id == Conversation.id)
            .where(ConversationParticipant.user_id == user_id)
            .order_by(Conversation.updated_at.desc(), Conversation.id)
        )
        return list(self.db.scalars(stmt))

    def add_participants(self, conversation_id: str, user_id: str, user_ids: list[str]) -> Conversation:
        conversation = self.get_conversation(conversation_id, user_id)
        if conversation.conversation_type != 'group':
            raise ValidationError('Participants can only be added to group conversations')
        requester = next(p for p in conversation.participants if p.user_id == user_id)
        if requester.role != 'admin':
            raise PermissionDeniedError('Only group admins can add participants')

        current = {p.user_id for p in conversation.participants}
        for new_id in dict.fromkeys(user_ids):
            if new_id not in current:
                conversation.participants.append(ConversationParticipant(user_id=new_id))
        self.db.commit()
        return conversation

    def remove_participant(self, conversation_id: str, user_id: str, target_id: str) -> Conversation:
        """Leave a group (target == self) or, as a group admin, remove someone."""
        conversation = self.get_conversation(conversation_id, user_id)
        if conversation.conversation_type != 'group':
            raise ValidationError('Participants can only be removed from group conversations')
        requester = next(p for p in conversation.participants if p.user_id == user_id)
        if target_id != user_id and requester.role != 'admin':
            raise PermissionDeniedError('Only group admins can remove participants')

        target = next((p for p in conversation.participants if p.user_id == target_id), None)
        if target is None:
            raise NotFoundError('Participant', target_id)
        conversation.participants.remove(target)
        self.db.commit()
        return conversation

    def send_message(self, conversation_id: str, sender_id: str, content: str) -> Message:
        conversation = self.get_conversation(conversation_id, sender_id)
        message = Message(conversation_id=conversation.id, sender_id=sender_id, content=content.strip())
        self.db.add(message)
        conversation.updated_at = utcnow()
        self.db.commit()
        return message

    def list_messages(
        self, conversation_id: str, user_id: str, page: int, limit: int
    ) -> tuple[list[Message], Pagination]:
        """Messages newest first."""
        self.get_conversation(conversation_id, user_id)
        stmt = (
            select(Message)
            .where(Message.conversation_id == conversation_id)
            .order_by(Message.created_at.desc(), Message.id)
        )
        return paginate(self.db, stmt, page, limit)
