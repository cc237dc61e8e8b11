from sqlalchemy.orm import Session
from typing import List
from teams_timesheet.models.conversation import Conversation
from teams_timesheet.repositories.base import BaseRepository


class ConversationRepository(BaseRepository[Conversation]):
    model = Conversation

    def __init__(self, db: Session):
        super().__init__(db)

    def get_all(self) -> List[Conversation]:
        return self.db.query(Conversation).order_by(Conversation.user_id).all()
