import json
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

from consult_bridge.core.exceptions import ConfigurationError

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseSettings):
    """Runtime settings for the webhook bridge, read once at startup."""

    # Webhook signing
    WEBHOOK_SECRET: str = os.getenv("WEBHOOK_SECRET", "")
    VERIFY_WEBHOOK_SIGNATURE: bool = _env_flag("VERIFY_WEBHOOK_SIGNATURE")

    # Google Sheets persistence
    ENABLE_DATA_STORAGE: bool = _env_flag("ENABLE_DATA_STORAGE")
    GOOGLE_SHEETS_SPREADSHEET_ID: str = os.getenv("GOOGLE_SHEETS_SPREADSHEET_ID", "")
    GOOGLE_SHEETS_CREDENTIALS: str = os.getenv("GOOGLE_SHEETS_CREDENTIALS", "")
    GOOGLE_SHEETS_RANGE: str = os.getenv("GOOGLE_SHEETS_RANGE", "Sheet1")

    # SMS over AWS SNS
    SMS_ENABLED: bool = _env_flag("SMS_ENABLED")
    AWS_REGION: str = os.getenv("AWS_REGION", "us-west-2")
    AWS_ACCESS_KEY_ID: str = os.getenv("AWS_ACCESS_KEY_ID", "")
    AWS_SECRET_ACCESS_KEY: str = os.getenv("AWS_SECRET_ACCESS_KEY", "")

    # Pharmacy shown in confirmation messages
    PHARMACY_NAME: str = os.getenv("PHARMACY_NAME", "MedMe Health")
    PHARMACY_LOCATION: str = os.getenv("PHARMACY_LOCATION", "")
    PHARMACY_PHONE: str = os.getenv("PHARMACY_PHONE", "")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "text")
    PORT: int = int(os.getenv("PORT", "10000"))

    class Config:
        case_sensitive = True

    def sheets_credentials_info(self) -> Optional[Dict[str, Any]]:
        """Service-account credentials parsed from GOOGLE_SHEETS_CREDENTIALS, if any."""
        if not self.GOOGLE_SHEETS_CREDENTIALS:
            return None
        try:
            info = json.loads(self.GOOGLE_SHEETS_CREDENTIALS)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"GOOGLE_SHEETS_CREDENTIALS is not valid JSON: {e}") from e
        if not isinstance(info, dict):
            raise ConfigurationError("GOOGLE_SHEETS_CREDENTIALS must be a JSON object.")
        return info

    def validate_storage(self) -> None:
        if not self.ENABLE_DATA_STORAGE:
            return
        missing = [
            name
            for name in ("GOOGLE_SHEETS_SPREADSHEET_ID", "GOOGLE_SHEETS_CREDENTIALS")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(
                f"ENABLE_DATA_STORAGE is set but {', '.join(missing)} is missing."
            )
        self.sheets_credentials_info()

    def validate_signing(self) -> None:
        if self.VERIFY_WEBHOOK_SIGNATURE and not self.WEBHOOK_SECRET:
            raise ConfigurationError("VERIFY_WEBHOOK_SIGNATURE is set but WEBHOOK_SECRET is missing.")

    def describe(self) -> Dict[str, Any]:
        """Non-secret view of the configuration for the startup log line."""
        return {
            "port": self.PORT,
            "verify_signature": self.VERIFY_WEBHOOK_SIGNATURE,
            "data_storage": self.ENABLE_DATA_STORAGE,
            "sheets_id": "configured" if self.GOOGLE_SHEETS_SPREADSHEET_ID else "missing",
            "sheets_credentials": "configured" if self.GOOGLE_SHEETS_CREDENTIALS else "missing",
            "sms_enabled": self.SMS_ENABLED,
        }


settings = Settings()
