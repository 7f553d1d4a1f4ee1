"""Process configuration read from environment variables.

Settings are built once at startup with ``Settings.from_env()`` and then
passed to whatever needs them. Nothing else in the package reads the
environment.
"""

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 4242
DEFAULT_MAX_WEBHOOK_BODY_BYTES = 65536


class Settings(BaseModel):
    """Read-only process configuration.

    ``api_key`` and ``price_id`` are not validated here; a missing value
    shows up as a Stripe failure on first use.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(default="", repr=False, description="Stripe secret key")
    price_id: str = Field(default="", description="Price sold by /checkout")
    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    public_url: str | None = Field(
        default=None,
        description="Externally visible base URL; defaults to http://host:port",
    )
    webhook_secret: str | None = Field(
        default=None,
        repr=False,
        description="Webhook signing secret (whsec_xxx); unsigned payloads accepted when unset",
    )
    max_webhook_body_bytes: int = Field(default=DEFAULT_MAX_WEBHOOK_BODY_BYTES, ge=1)
    client_reference_id: str = "MY-CUSTOMER-ID"
    log_level: str = "INFO"

    @property
    def base_url(self) -> str:
        """Base URL used to build the success and cancel redirect targets."""
        if self.public_url:
            return self.public_url.rstrip("/")
        return f"http://{self.host}:{self.port}"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            Settings instance. Unset variables fall back to field defaults.
        """
        env = os.environ if environ is None else environ

        values: dict[str, str] = {}
        for field_name, env_name in ENV_VARS.items():
            value = env.get(env_name)
            if value:
                values[field_name] = value

        return cls.model_validate(values)


# Field name -> environment variable
ENV_VARS: dict[str, str] = {
    "api_key": "API_KEY",
    "price_id": "PRICE_ID",
    "host": "HOST",
    "port": "PORT",
    "public_url": "PUBLIC_URL",
    "webhook_secret": "STRIPE_WEBHOOK_SECRET",
    "max_webhook_body_bytes": "MAX_WEBHOOK_BODY_BYTES",
    "client_reference_id": "CLIENT_REFERENCE_ID",
    "log_level": "LOG_LEVEL",
}
