"""Configuration schema for the remote spreadsheet."""

from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .settings import get_settings


def _default_range() -> str:
    return get_settings().sheets.default_range


class SheetConfig(BaseModel):
    """Where the application records live remotely.

    ``api_key`` is only used by deployments that address a public sheet with
    an API key instead of a signed-in user's bearer token.
    """

    spreadsheet_id: str = Field(default="", description="Google Sheets spreadsheet ID")
    range: str = Field(default_factory=_default_range, description="A1 range holding the table")
    api_key: Optional[str] = Field(None, description="API key for the key-based variant")

    @field_validator("spreadsheet_id", "range")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return v.strip()

    @field_validator("api_key")
    @classmethod
    def blank_api_key_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    @property
    def is_configured(self) -> bool:
        """True once a spreadsheet ID has been provided."""
        return bool(self.spreadsheet_id)

    def to_storage(self) -> dict:
        """Serialize in the shape kept under the config storage key."""
        data = {"spreadsheetId": self.spreadsheet_id, "range": self.range}
        if self.api_key:
            data["apiKey"] = self.api_key
        return data

    @classmethod
    def from_storage(cls, data: Optional[dict]) -> "SheetConfig":
        """Build from the persisted shape; accepts snake_case keys as well."""
        data = data or {}
        values = {
            "spreadsheet_id": data.get("spreadsheetId", data.get("spreadsheet_id", "")) or "",
            "api_key": data.get("apiKey", data.get("api_key")),
        }
        sheet_range = data.get("range")
        if sheet_range:
            values["range"] = sheet_range
        return cls(**values)


SHEET_CONFIG_EXAMPLE = SheetConfig(
    spreadsheet_id="1AbCdEfGhIjKlMnOpQrStUvWxYz0123456789",
    range="Applications!A:H",
)
