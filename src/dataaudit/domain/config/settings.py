"""
Application settings domain models.

This module defines the settings that control provider timeouts and the
SMTP transport used for audit notifications.
"""

import logging
from typing import Optional

from pydantic import BaseModel, Field, SecretStr, field_validator

logger = logging.getLogger(__name__)


class RunnerSettings(BaseModel):
    """
    Timeouts handed to providers for every test execution.

    The engine never enforces them itself; providers pass them to the
    native client.
    """

    connection_timeout: int = Field(
        default=15,
        description="Timeout in seconds for opening a database session",
        ge=1,
        le=600
    )

    command_timeout: int = Field(
        default=180,
        description="Timeout in seconds for executing an audit statement",
        ge=1,
        le=3600
    )

    @field_validator('command_timeout')
    @classmethod
    def validate_command_timeout(cls, v: int) -> int:
        """Warn about very long command timeouts."""
        if v > 900:
            logger.warning("Command timeout of %s seconds is very high - consider query complexity", v)
        return v


class SmtpSettings(BaseModel):
    """
    SMTP transport settings.

    Supplied by the host environment; the engine only composes messages.
    """

    host: str = Field(..., description="SMTP relay host")
    port: int = Field(default=25, description="SMTP relay port", ge=1, le=65535)
    sender: str = Field(..., description="Sender email address")
    sender_description: str = Field(default="", description="Display name of the sender")
    use_tls: bool = Field(default=False, description="Upgrade the connection with STARTTLS")
    username: Optional[str] = Field(None, description="SMTP login, if the relay requires one")
    password: Optional[SecretStr] = Field(None, description="SMTP password")
    timeout: int = Field(default=30, description="Socket timeout in seconds", ge=1, le=300)

    @field_validator('sender')
    @classmethod
    def validate_sender(cls, v: str) -> str:
        """Validate sender looks like an address."""
        if "@" not in v:
            raise ValueError(f"Sender must be an email address: {v}")
        return v.strip()

    def get_password(self) -> Optional[str]:
        """Get the plain text password."""
        if self.password is None:
            return None
        return self.password.get_secret_value()  # pylint: disable=no-member


class AppSettings(BaseModel):
    """Top-level settings file model."""

    runner: RunnerSettings = Field(
        default_factory=RunnerSettings,
        description="Provider timeouts"
    )
    smtp: Optional[SmtpSettings] = Field(
        None,
        description="SMTP transport; notifications are only logged when missing"
    )
