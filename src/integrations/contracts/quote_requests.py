"""
Quote request contracts.

Defines the JSON body sent to the quote-request endpoint when an applicant finishes
the intake wizard. Field names on the wire are camelCase; the record also carries the
combined `height` string (e.g. 5'10").

These contracts must be used by both:
- clients/mocks/quote_requests.py (records submissions locally)
- clients/real_http/quote_requests.py (POSTs to the real endpoint)
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from .interfaces import (
    QuoteRequestClient,
    QuoteSubmissionError,
    QuoteSubmissionReceipt,
)


def format_height(feet: Any, inches: Any) -> str:
    return f"{feet}'{inches}\""


class QuoteRequestPayload(BaseModel):
    """Normalized intake record as submitted to the quote-request endpoint."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    coverage_type: str
    coverage_amount: str
    first_name: str
    last_name: str
    email: str
    phone: str
    street_address: str
    address_line2: Optional[str] = None
    city: str
    state: str
    zip_code: str
    height_feet: str
    height_inches: str
    height: str = ""
    weight: str
    birth_date: str
    medical_background: str

    @model_validator(mode="after")
    def _fill_height(self) -> "QuoteRequestPayload":
        if not self.height:
            self.height = format_height(self.height_feet, self.height_inches)
        return self

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


__all__ = [
    "QuoteRequestPayload",
    "QuoteRequestClient",
    "QuoteSubmissionError",
    "QuoteSubmissionReceipt",
    "format_height",
]
