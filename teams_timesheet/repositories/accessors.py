from sqlalchemy import event
from sqlalchemy.orm import Session
from teams_timesheet.repositories.timesheet_repository import TimesheetRepository
from teams_timesheet.repositories.project_repository import ProjectRepository
from teams_timesheet.repositories.user_repository import UserRepository
from teams_timesheet.repositories.conversation_repository import ConversationRepository
import logging

logger = logging.getLogger(__name__)

WRITTEN_ROWS_KEY = "written_rows"


@event.listens_for(Session, "after_flush")
def _count_written_rows(session, flush_context):
    # new/dirty/deleted still hold the pre-flush state here
    changed = [obj for obj in session.dirty if session.is_modified(obj)]
    written = len(session.new) + len(changed) + len(session.deleted)
    session.info[WRITTEN_ROWS_KEY] = session.info.get(WRITTEN_ROWS_KEY, 0) + written


@event.listens_for(Session, "after_rollback")
def _reset_written_rows(session):
    session.info.pop(WRITTEN_ROWS_KEY, None)


class RepositoryAccessors:
    """One repository per entity over a shared session, plus the commit point."""

    def __init__(self, db: Session):
        self.db = db
        self.timesheet_repository = TimesheetRepository(db)
        self.project_repository = ProjectRepository(db)
        self.user_repository = UserRepository(db)
        self.conversation_repository = ConversationRepository(db)

    def save_changes(self) -> int:
        """Commit pending work and return the number of rows written since the last commit."""
        self.db.flush()
        affected = self.db.info.pop(WRITTEN_ROWS_KEY, 0)
        self.db.commit()
        logger.debug(f"Committed {affected} row(s)")
        return affected
