from sqlalchemy import Column, String, DateTime
from datetime import datetime
from teams_timesheet.database import Base


class User(Base):
    __tablename__ = "users"

    # Azure AD object id
    id = Column(String(36), primary_key=True)
    display_name = Column(String(200), nullable=True)
    manager_id = Column(String(36), nullable=True, index=True)
    created_on = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<User(id={self.id}, name={self.display_name}, manager={self.manager_id})>"
