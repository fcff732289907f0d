# src/tourcheck_api/infrastructure/external_apis/ivao/settings.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Pydantic settings for the IVAO flight directory transport client."""

from __future__ import annotations

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from tourcheck_api.config.settings import Settings


class IvaoSettings(BaseSettings):
    """Configuration for the IVAO API client.

    Environment variables (with ``model_config.env_prefix``):

    * ``IVAO_BASE_URL``
    * ``IVAO_API_KEY``
    * ``IVAO_CLIENT_ID`` / ``IVAO_CLIENT_SECRET`` / ``IVAO_OAUTH_SCOPE``
    * ``IVAO_TIMEOUT_S``
    * ``IVAO_MAX_RETRIES``
    """

    base_url: str = Field(
        "https://api.ivao.aero",
        description="Base URL for the IVAO API.",
    )
    api_key: SecretStr | None = Field(
        None,
        description="Static API key sent as X-API-Key when set.",
    )
    client_id: str | None = Field(
        None,
        description="OAuth2 client-credentials client id.",
    )
    client_secret: SecretStr | None = Field(
        None,
        description="OAuth2 client-credentials client secret.",
    )
    oauth_scope: str = Field(
        "openid profile email",
        description="Scope requested with the client-credentials grant.",
    )
    timeout_s: float = Field(
        5.0,
        ge=0.1,
        le=60.0,
        description="Per-request timeout in seconds for the transport client.",
    )
    max_retries: int = Field(
        0,
        ge=0,
        le=5,
        description="Retries after the first attempt for retryable failures.",
    )

    model_config: SettingsConfigDict = SettingsConfigDict(
        env_prefix="IVAO_",
        extra="ignore",
    )

    @property
    def has_client_credentials(self) -> bool:
        """True when both client id and secret are configured."""
        return bool(self.client_id and self.client_secret)

    @classmethod
    def from_app_settings(cls, settings: Settings) -> IvaoSettings:
        """Build the transport view from the application settings."""
        return cls(
            base_url=settings.ivao_base_url,
            api_key=settings.ivao_api_key,
            client_id=settings.ivao_client_id,
            client_secret=settings.ivao_client_secret,
            oauth_scope=settings.ivao_oauth_scope or "openid profile email",
            timeout_s=settings.ivao_timeout_s,
            max_retries=settings.ivao_max_retries,
        )
