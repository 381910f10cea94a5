"""Diagnostic contracts reported by the processor."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .symbol_contracts import TypeElement


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


class Diagnostic(BaseModel):
    """A message tied to a declaration, if there is one."""
    model_config = ConfigDict(frozen=True)

    severity: Severity = Field(default=Severity.ERROR)
    message: str = Field(..., description="Human-readable reason")
    element: Optional[TypeElement] = Field(default=None, description="Offending declaration")

    def format(self) -> str:
        if self.element is None:
            return f"{self.severity.value}: {self.message}"
        return f"{self.element.location()}: {self.severity.value}: {self.message}"
