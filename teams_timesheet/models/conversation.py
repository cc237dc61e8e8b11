from sqlalchemy import Column, String, DateTime
from datetime import datetime
from teams_timesheet.database import Base


class Conversation(Base):
    __tablename__ = "conversations"

    user_id = Column(String(36), primary_key=True)
    conversation_id = Column(String(200), nullable=False)
    service_url = Column(String(500), nullable=False)
    created_on = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Conversation(user={self.user_id}, conversation={self.conversation_id})>"
