from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
from teams_timesheet.services.reminder_service import ReminderService
from teams_timesheet.repositories.accessors import RepositoryAccessors
from teams_timesheet.database import SessionLocal
from teams_timesheet.config import get_settings
from datetime import date
import logging

logger = logging.getLogger(__name__)
settings = get_settings()


class TaskScheduler:
    def __init__(self):
        self.scheduler = AsyncIOScheduler()

    @property
    def enabled(self) -> bool:
        return bool(settings.teams_webhook_url)

    def start(self):
        if not self.enabled:
            logger.info("Scheduler not started - TEAMS_WEBHOOK_URL is not configured")
            return

        self.scheduler.add_job(
            self.send_weekly_reminder,
            CronTrigger(day_of_week=settings.reminder_day_of_week, hour=settings.reminder_hour, minute=0),
            id='weekly_reminder'
        )
        self.scheduler.start()
        logger.info(f"Scheduler started - weekly reminder on {settings.reminder_day_of_week} at {settings.reminder_hour}:00")

    def stop(self):
        if self.scheduler.running:
            self.scheduler.shutdown()
            logger.info("Scheduler stopped")

    async def send_weekly_reminder(self):
        logger.info("Running weekly timesheet reminder job")
        db = SessionLocal()
        try:
            service = ReminderService(RepositoryAccessors(db), settings.teams_webhook_url)
            try:
                service.send_weekly_reminder(date.today())
            finally:
                service.client.close()
        except Exception as e:
            # A failed run must not stop the scheduler
            logger.error(f"Error in weekly reminder job: {str(e)}")
        finally:
            db.close()
