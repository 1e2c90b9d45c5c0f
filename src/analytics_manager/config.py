"""Runtime configuration for the analytics manager."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_MANAGER_", env_file=".env", extra="ignore")

    app_name: str = "analytics-manager"
    log_level: str = "INFO"
    strict_transport: bool = Field(
        default=True,
        description="Reject a second set_transport call instead of overwriting the sink.",
    )
    require_registrations: bool = Field(
        default=True,
        description="Refuse to activate a manager that has no registered events.",
    )
    isolate_listener_errors: bool = False
    snapshot_mode: Literal["post_state", "accessor"] = Field(
        default="post_state",
        description="What the transport receives next to the payload: post_state or accessor.",
    )
    event_name_key: str = "name"


settings = Settings()
