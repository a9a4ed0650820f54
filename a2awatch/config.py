"""Global configuration — loaded from environment variables."""

from pydantic_settings import BaseSettings


class A2AWatchSettings(BaseSettings):
    base_url: str = "http://localhost:8080"
    auth_token: str = ""
    request_timeout: float = 30.0
    log_level: str = "INFO"

    # Monitoring settings
    poll_interval: float = 5.0
    max_wait: float | None = None  # None = wait until the task finishes

    model_config = {"env_prefix": "A2AWATCH_"}


settings = A2AWatchSettings()
