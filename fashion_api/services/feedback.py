"""
Storage for user feedback on AI suggestions.

Corrections and confirmations are kept for later model training.
"""

import logging

from sqlalchemy.orm import Session

from fashion_api.db.models import AIFeedback
from fashion_api.schemas.analysis import FeedbackRequest


logger = logging.getLogger(__name__)


class FeedbackService:
    def __init__(self, db: Session):
        self.db = db

    def store(self, user_id: str, feedback: FeedbackRequest) -> AIFeedback:
        record = AIFeedback(
            user_id=user_id,
            item_id=feedback.item_id,
            feedback_type=feedback.feedback_type,
            ai_suggestions=feedback.ai_suggestions,
            user_corrections=feedback.user_corrections,
        )
        self.db.add(record)
        self.db.commit()
        logger.info(f'Stored AI feedback {record.id} ({feedback.feedback_type}) from user {user_id}')
        return record
