"""
Chat Notification Configuration.

An empty webhook URL disables the webhook sink; the bot sink needs both a
token and a chat id.
"""

from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..sinks import DEFAULT_BOT_API_BASE, DEFAULT_WEBHOOK_AVATAR_URL, DEFAULT_WEBHOOK_USERNAME
from .logging import LogLevel


class NotificationSettings(BaseSettings):
    """
    Outbound chat notifications (webhook + messaging bot).
    Prefix: FANLOG_NOTIFY_
    """

    model_config = SettingsConfigDict(
        env_prefix="FANLOG_NOTIFY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Webhook (team-chat channel)
    webhook_url: str = Field(default="", description="Webhook URL; empty disables the sink")
    webhook_username: str = Field(default=DEFAULT_WEBHOOK_USERNAME, description="Display name of posts")
    webhook_avatar_url: str = Field(default=DEFAULT_WEBHOOK_AVATAR_URL, description="Avatar of posts")
    webhook_level: Optional[LogLevel] = Field(default=None, description="Webhook sink minimum level")

    # Messaging bot
    bot_token: Optional[SecretStr] = Field(default=None, description="Bot API token")
    bot_chat_id: Optional[str] = Field(default=None, description="Destination chat id")
    bot_api_base: str = Field(default=DEFAULT_BOT_API_BASE, description="Bot API base URL")
    bot_level: Optional[LogLevel] = Field(default=None, description="Bot sink minimum level")

    # Delivery
    timeout_seconds: Optional[float] = Field(
        default=None,
        description="HTTP timeout; unset keeps the httpx default",
    )
    max_pending: int = Field(
        default=0,
        ge=0,
        description="Per-sink queue depth before dropping the oldest notification; 0 is unbounded",
    )

    @property
    def webhook_enabled(self) -> bool:
        return bool(self.webhook_url)

    @property
    def bot_enabled(self) -> bool:
        token = self.bot_token.get_secret_value() if self.bot_token else ""
        return bool(token) and bool(self.bot_chat_id)
