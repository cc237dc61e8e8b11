from sqlalchemy.orm import Session
from typing import Any, Dict, Iterable, List
from teams_timesheet.models.user import User
from teams_timesheet.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User

    def __init__(self, db: Session):
        super().__init__(db)

    def get_reportee_ids(self, manager_id: str) -> List[str]:
        rows = self.db.query(User.id).filter(User.manager_id == manager_id).all()
        return [row[0] for row in rows]

    def sync_reportees(self, manager_id: str, reportees: Iterable[Dict[str, Any]]) -> None:
        """Point the given directory users at manager_id and detach anyone no longer reporting to them."""
        profiles = {profile["id"]: profile for profile in reportees}

        for user in self.db.query(User).filter(User.manager_id == manager_id, User.id.notin_(list(profiles))):
            user.manager_id = None

        for user_id, profile in profiles.items():
            user = self.get(user_id)
            if user is None:
                user = self.add(User(id=user_id))
            user.manager_id = manager_id
            if profile.get("displayName"):
                user.display_name = profile["displayName"]
