"""
app/core/config.py

Centralised configuration loaded from environment variables.
Use a .env file locally; Docker Compose injects these at runtime.
"""

from typing import Dict

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # ── Application ────────────────────────────────────────────────────────────
    app_name: str = "Invoice / Receipt-Note Intake Relay"
    app_version: str = "1.0.0"
    debug: bool = False

    # ── Downstream webhook ─────────────────────────────────────────────────────
    # Used when the upload form does not name an environment.
    webhook_url: str = "https://n8n.example.com/webhook/document-intake"
    webhook_test_url: str = "https://n8n.example.com/webhook-test/document-intake"
    webhook_production_url: str = "https://n8n.example.com/webhook/document-intake"

    forward_timeout_seconds: float = 120.0          # bounded wait before soft success
    downstream_http_timeout_seconds: float = 300.0  # cap for an abandoned forward

    # ── Upload widget ──────────────────────────────────────────────────────────
    relay_base_url: str = "http://localhost:8000"
    widget_http_timeout_seconds: float = 150.0
    widget_environment_aware: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    def webhook_endpoints(self) -> Dict[str, str]:
        """Environment name → downstream URL table handed to RelayService."""
        return {
            "test": self.webhook_test_url,
            "production": self.webhook_production_url,
        }


# Single shared instance — import this everywhere.
settings = Settings()
