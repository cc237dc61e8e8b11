from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    # Database
    database_url: str = "sqlite:///./timesheet.db"

    # Timesheet policy
    # Day of month after which the previous month's timesheets can no longer be edited
    timesheet_freeze_day_of_month: int = 12
    # Maximum hours a user may log across a Monday-Sunday week
    weekly_efforts_limit: float = 44

    # Microsoft Graph
    graph_base_url: str = "https://graph.microsoft.com/v1.0"
    # Graph rejects $batch payloads with more than 20 requests
    graph_batch_size: int = 20
    graph_timeout_seconds: float = 30.0

    # Reminders (Teams incoming webhook). Leave empty to disable the reminder job.
    teams_webhook_url: str = ""
    reminder_day_of_week: str = "fri"
    reminder_hour: int = 16

    # Application
    app_env: str = "development"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
