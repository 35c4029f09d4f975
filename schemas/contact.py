"""Contact sync schemas."""
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

MAX_REPORTED_ERRORS = 10

AttributeValue = Union[str, int, float, bool]


class MappedContact(BaseModel):
    email: str = Field(min_length=1)
    attributes: Dict[str, AttributeValue] = Field(default_factory=dict)


class SyncError(BaseModel):
    email: Optional[str] = None
    error: str


class SyncResult(BaseModel):
    fetched: int = Field(default=0, ge=0)
    upserted: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    skipped: int = Field(default=0, ge=0)
    errors: List[SyncError] = Field(default_factory=list, max_length=MAX_REPORTED_ERRORS)

    def record_failure(self, email: Optional[str], error: str) -> None:
        """Count a failed record; keep its detail only while under the cap."""
        self.failed += 1
        if len(self.errors) < MAX_REPORTED_ERRORS:
            self.errors.append(SyncError(email=email, error=error))
