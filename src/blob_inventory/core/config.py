"""Configuration management for blob-inventory."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    log_level: str = "INFO"
    otel_enabled: bool = False
    otel_service_name: str = "blob-inventory"

    # Listing endpoint
    service_host: str = "blob.core.windows.net"
    endpoint_url: Optional[str] = None
    api_version: str = "2020-04-08"
    token_scope: str = "https://storage.azure.com/.default"
    request_timeout: float = 60.0
    max_results: Optional[int] = None

    # Retry policy, counted per target
    max_transport_retries: int = 5
    transport_backoff: float = 1.0
    max_service_retries: int = 10
    service_backoff: float = 2.0

    # Run defaults
    output_prefix: str = ""
    max_in_flight: int = 1

    model_config = {
        "env_prefix": "BLOB_INVENTORY_",
        "case_sensitive": False,
    }


settings = Settings()
