import os
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BASE_URL = "https://localhost:7163"
DEFAULT_TIMEOUT_MS = 30000
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY_MS = 1000

# Environment variable -> field. Read once, in ClientConfig.from_env
ENV_VARS = {
    "base_url": ("API_BASE_URL", "NEXT_PUBLIC_API_BASE_URL"),
    "timeout_ms": ("API_TIMEOUT_MS",),
    "max_retries": ("API_MAX_RETRIES",),
    "retry_delay_ms": ("API_RETRY_DELAY_MS",),
}


class ClientConfig(BaseModel):
    """Configuration model for the backend API client"""
    model_config = ConfigDict(frozen=True)

    base_url: str = DEFAULT_BASE_URL
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=1)
    retry_delay_ms: int = Field(default=DEFAULT_RETRY_DELAY_MS, ge=0)
    verify_ssl: bool = True
    default_headers: Dict[str, str] = Field(default_factory=dict)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("base_url must not be empty")
        return value

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @property
    def retry_delay_seconds(self) -> float:
        return self.retry_delay_ms / 1000

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "ClientConfig":
        """
        Build a config from the process environment.

        Unset or empty variables fall back to the defaults; explicit keyword
        overrides win over the environment.
        """
        environ = os.environ if environ is None else environ
        values = {}
        for field_name, env_names in ENV_VARS.items():
            for env_name in env_names:
                raw = environ.get(env_name)
                if raw is not None and raw.strip():
                    values[field_name] = raw.strip()
                    break
        values.update(overrides)
        return cls(**values)
