"""Data model for Diagnostic Trouble Codes (DTCs)."""

from pydantic import BaseModel, ConfigDict, Field


class DTCRecord(BaseModel):
    """A single fault record as reported by the ECU."""

    model_config = ConfigDict(frozen=True)

    error_code: int = Field(..., ge=0, le=0xFFFF, description="16-bit error code")
    status_code: int = Field(..., ge=0, le=0xFF, description="8-bit status (cause of error)")

    @property
    def code(self) -> str:
        """Error code as four hex digits."""
        return f"{self.error_code:04X}"

    @property
    def status(self) -> str:
        """Status code as two hex digits."""
        return f"{self.status_code:02X}"

    def __str__(self) -> str:
        return f"{self.code}/{self.status}"
