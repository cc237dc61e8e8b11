from datetime import date, datetime
from typing import Any, Dict, List, Optional
from teams_timesheet.models.conversation import Conversation
from teams_timesheet.repositories.accessors import RepositoryAccessors
from teams_timesheet.utils.dates import week_bounds
import httpx
import logging

logger = logging.getLogger(__name__)


class ReminderService:
    """Weekly "fill your timesheet" reminders posted to a Teams incoming webhook."""

    def __init__(
        self,
        repository_accessors: RepositoryAccessors,
        webhook_url: str,
        client: Optional[httpx.Client] = None
    ):
        self.repository_accessors = repository_accessors
        self.webhook_url = webhook_url
        self.client = client or httpx.Client(timeout=30.0)

    def register_conversation(self, user_id: str, conversation_id: str, service_url: str) -> Conversation:
        if not user_id or not conversation_id or not service_url:
            raise ValueError("User id, conversation id and service url are required")

        repository = self.repository_accessors.conversation_repository
        conversation = repository.get(user_id)
        if conversation is None:
            conversation = repository.add(Conversation(
                user_id=user_id,
                conversation_id=conversation_id,
                service_url=service_url,
                created_on=datetime.utcnow(),
            ))
        else:
            conversation.conversation_id = conversation_id
            conversation.service_url = service_url

        self.repository_accessors.save_changes()
        return conversation

    def get_users_pending_timesheets(self, today: date) -> List[str]:
        """Users with a stored conversation who logged no hours in today's week."""
        week_start, week_end = week_bounds(today)
        filled = set(self.repository_accessors.timesheet_repository.get_user_ids_with_hours(week_start, week_end))
        conversations = self.repository_accessors.conversation_repository.get_all()
        return [c.user_id for c in conversations if c.user_id not in filled]

    @staticmethod
    def build_reminder_card(pending_user_ids: List[str], week_start: date, week_end: date) -> Dict[str, Any]:
        mentions = "\n".join(f"- <at>{user_id}</at>" for user_id in pending_user_ids)
        return {
            "type": "message",
            "attachments": [
                {
                    "contentType": "application/vnd.microsoft.card.adaptive",
                    "content": {
                        "$schema": "http://adaptivecards.io/schemas/adaptive-card.json",
                        "type": "AdaptiveCard",
                        "version": "1.4",
                        "body": [
                            {
                                "type": "TextBlock",
                                "size": "Medium",
                                "weight": "Bolder",
                                "text": "⏰ Timesheet reminder",
                            },
                            {
                                "type": "TextBlock",
                                "wrap": True,
                                "text": f"No hours logged yet for {week_start:%b %d} - {week_end:%b %d}:\n{mentions}",
                            },
                        ],
                    },
                }
            ],
        }

    def send_weekly_reminder(self, today: Optional[date] = None) -> bool:
        today = today or date.today()
        pending = self.get_users_pending_timesheets(today)
        if not pending:
            logger.info("✅ Everyone has logged hours this week, no reminder sent")
            return True

        week_start, week_end = week_bounds(today)
        card = self.build_reminder_card(pending, week_start, week_end)
        try:
            response = self.client.post(self.webhook_url, json=card)
            response.raise_for_status()
            logger.info(f"📨 Reminder posted for {len(pending)} users")
            return True
        except httpx.HTTPError as e:
            logger.error(f"❌ Error posting reminder: {str(e)}")
            return False
