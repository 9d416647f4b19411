"""
Quote intake flow - four-step quote request wizard.

Steps:
1. Coverage selection (coverage type, coverage amount)
2. Contact info (first/last name, email, phone)
3. Address (street, optional line 2, city, state, zip)
4. Health info (height, weight, birth date, medical background) → submit

Each step is validated before the wizard moves on. Going back keeps everything that was
entered. A successful submit is terminal; a failed submit keeps the record for a retry.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from src.error_handler import ErrorHandler
from src.forms.validation import (
    FormValidationError,
    parse_decimal_str,
    parse_int,
    raise_if_errors,
    require_str,
    optional_str,
    validate_date_iso,
    validate_email,
    validate_in,
    validate_phone,
    validate_zip,
)
from src.integrations.contracts.interfaces import (
    QuoteRequestClient,
    QuoteSubmissionError,
    QuoteSubmissionReceipt,
)
from src.integrations.contracts.quote_requests import QuoteRequestPayload
from src.utils.config_loader import IntakeConfig

logger = logging.getLogger(__name__)

CONFIRMATION_MESSAGE = (
    "Your quote request has been received. One of our advisors will contact you within "
    "24 hours to discuss your personalized insurance options."
)


class WizardStep(str, Enum):
    COVERAGE_SELECTION = "coverage_selection"
    CONTACT_INFO = "contact_info"
    ADDRESS = "address"
    HEALTH_INFO = "health_info"
    SUBMITTED = "submitted"


class WizardStateError(Exception):
    """Raised for a transition the wizard does not allow from its current step."""


class SubmissionInProgressError(WizardStateError):
    """Raised when submit is called while a submission is already in flight."""


STEP_FIELDS: Dict[WizardStep, tuple] = {
    WizardStep.COVERAGE_SELECTION: ("coverageType", "coverageAmount"),
    WizardStep.CONTACT_INFO: ("firstName", "lastName", "email", "phone"),
    WizardStep.ADDRESS: ("streetAddress", "addressLine2", "city", "state", "zipCode"),
    WizardStep.HEALTH_INFO: ("heightFeet", "heightInches", "weight", "birthDate", "medicalBackground"),
}

RECORD_FIELDS: List[str] = [name for fields in STEP_FIELDS.values() for name in fields]


# --------------------------------------------------------------------------- #
# Step validators
# --------------------------------------------------------------------------- #
def validate_coverage_selection(data: Dict[str, Any], coverage_types: Iterable[str]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    coverage_type = validate_in(data.get("coverageType", ""), coverage_types, errors, "coverageType", label="Coverage type")
    if "coverageType" in errors and not coverage_type:
        errors["coverageType"] = "Please select a coverage type"
    coverage_amount = parse_decimal_str(data, "coverageAmount", errors, min_value=0, exclusive_min=True, required=True, label="Coverage amount")
    if "coverageAmount" in errors and not coverage_amount:
        errors["coverageAmount"] = "Please select a coverage amount"
    raise_if_errors(errors)
    return {"coverageType": coverage_type, "coverageAmount": coverage_amount}


def validate_contact_info(data: Dict[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    first_name = require_str(data, "firstName", errors, label="First name", min_length=2)
    last_name = require_str(data, "lastName", errors, label="Last name", min_length=2)
    email = validate_email(data.get("email", ""), errors, field="email")
    phone = validate_phone(data.get("phone", ""), errors, field="phone")
    raise_if_errors(errors)
    return {"firstName": first_name, "lastName": last_name, "email": email, "phone": phone}


def validate_address(data: Dict[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    street = require_str(data, "streetAddress", errors, label="Street address", min_length=5)
    line2 = optional_str(data, "addressLine2")
    city = require_str(data, "city", errors, label="City", min_length=2)
    state = require_str(data, "state", errors, label="State", min_length=2)
    zip_code = validate_zip(data.get("zipCode", ""), errors, field="zipCode")
    raise_if_errors(errors)
    return {"streetAddress": street, "addressLine2": line2, "city": city, "state": state, "zipCode": zip_code}


def validate_health_info(data: Dict[str, Any]) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    feet = parse_int(data, "heightFeet", errors, min_value=3, max_value=7, required=True, label="Height (feet)")
    inches = parse_int(data, "heightInches", errors, min_value=0, max_value=11, required=True, label="Height (inches)")
    weight = parse_decimal_str(data, "weight", errors, min_value=0, exclusive_min=True, required=True, label="Weight")
    birth_date = validate_date_iso(data.get("birthDate", ""), errors, "birthDate", required=True, not_future=True, label="Birth date")
    medical = require_str(data, "medicalBackground", errors, label="Medical background")
    if "medicalBackground" in errors:
        errors["medicalBackground"] = "Please provide your medical background"
    raise_if_errors(errors)
    return {
        "heightFeet": str(feet),
        "heightInches": str(inches),
        "weight": weight,
        "birthDate": birth_date,
        "medicalBackground": medical,
    }


class QuoteIntakeFlow:
    """
    Guided quote request wizard. One instance per visitor session; it owns the intake
    record until submission succeeds or the session is dropped.
    """

    STEPS = [
        WizardStep.COVERAGE_SELECTION,  # Step 0
        WizardStep.CONTACT_INFO,        # Step 1
        WizardStep.ADDRESS,             # Step 2
        WizardStep.HEALTH_INFO,         # Step 3: submit from here
    ]

    def __init__(
        self,
        client: QuoteRequestClient,
        config: Optional[IntakeConfig] = None,
        initial_data: Optional[Dict[str, Any]] = None,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        self.client = client
        self.config = config or IntakeConfig()
        self.error_handler = error_handler or ErrorHandler()
        self.record: Dict[str, str] = {name: "" for name in RECORD_FIELDS}
        self.current_step: WizardStep = WizardStep.COVERAGE_SELECTION
        self.field_errors: Dict[str, str] = {}
        self.submit_error: Optional[str] = None
        self.submitting = False
        self.confirmation: Optional[str] = None
        self.receipt: Optional[QuoteSubmissionReceipt] = None
        if initial_data:
            self.update(initial_data)

    # ------------------------------------------------------------------ #
    # State
    # ------------------------------------------------------------------ #
    @property
    def step_index(self) -> int:
        if self.current_step == WizardStep.SUBMITTED:
            return len(self.STEPS)
        return self.STEPS.index(self.current_step)

    @property
    def is_submitted(self) -> bool:
        return self.current_step == WizardStep.SUBMITTED

    @property
    def can_submit(self) -> bool:
        return self.current_step == WizardStep.HEALTH_INFO and not self.submitting

    @property
    def progress_percent(self) -> int:
        return round(min(self.step_index + 1, len(self.STEPS)) / len(self.STEPS) * 100)

    def _ensure_open(self) -> None:
        if self.is_submitted:
            raise WizardStateError("Quote request already submitted")

    # ------------------------------------------------------------------ #
    # Transitions
    # ------------------------------------------------------------------ #
    def update(self, fields: Dict[str, Any]) -> None:
        """Merge entered values into the record; unknown keys are ignored."""
        self._ensure_open()
        for name, value in (fields or {}).items():
            if name in self.record:
                self.record[name] = "" if value is None else str(value).strip()

    def apply_quote_option(self, option: Any) -> None:
        """Carry the coverage chosen in the comparison grid into step 1."""
        self.update({"coverageAmount": getattr(option, "coverage", option)})

    def validate_step(self, step: WizardStep) -> Dict[str, str]:
        if step == WizardStep.COVERAGE_SELECTION:
            return validate_coverage_selection(self.record, self.config.coverage_type_ids)
        if step == WizardStep.CONTACT_INFO:
            return validate_contact_info(self.record)
        if step == WizardStep.ADDRESS:
            return validate_address(self.record)
        if step == WizardStep.HEALTH_INFO:
            return validate_health_info(self.record)
        raise WizardStateError(f"Nothing to validate on step {step.value}")

    def validate_all(self) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        cleaned: Dict[str, str] = {}
        for step in self.STEPS:
            try:
                cleaned.update(self.validate_step(step))
            except FormValidationError as e:
                errors.update(e.field_errors)
        raise_if_errors(errors)
        return cleaned

    def advance(self, fields: Optional[Dict[str, Any]] = None) -> WizardStep:
        """Validate the current step and move to the next one."""
        self._ensure_open()
        if self.current_step == WizardStep.HEALTH_INFO:
            raise WizardStateError("Final step must be submitted, not advanced")
        if fields:
            self.update(fields)

        try:
            self.validate_step(self.current_step)
        except FormValidationError as e:
            self.field_errors = dict(e.field_errors)
            logger.info("[QuoteIntake] step=%s blocked fields=%s", self.current_step.value, sorted(e.field_errors))
            raise

        self.field_errors = {}
        self.current_step = self.STEPS[self.step_index + 1]
        logger.info("[QuoteIntake] advanced to step=%s", self.current_step.value)
        return self.current_step

    def back(self) -> WizardStep:
        self._ensure_open()
        if self.submitting:
            raise SubmissionInProgressError("Quote request submission in progress")
        if self.step_index > 0:
            self.current_step = self.STEPS[self.step_index - 1]
            self.field_errors = {}
            self.submit_error = None
        return self.current_step

    async def submit(self, fields: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Validate everything and POST the record once.

        Returns {"status": "submitted", ...} on success or {"status": "error", ...} when the
        endpoint fails; in the latter case the record is untouched and submit may be retried.
        """
        self._ensure_open()
        if self.submitting:
            raise SubmissionInProgressError("Quote request submission in progress")
        if self.current_step != WizardStep.HEALTH_INFO:
            raise WizardStateError(f"Cannot submit from step {self.current_step.value}")
        if fields:
            self.update(fields)

        try:
            cleaned = self.validate_all()
        except FormValidationError as e:
            self.field_errors = dict(e.field_errors)
            logger.info("[QuoteIntake] submit blocked fields=%s", sorted(e.field_errors))
            raise
        self.field_errors = {}

        payload = QuoteRequestPayload(**{**self.record, **cleaned}).to_wire()
        self.submitting = True
        self.submit_error = None
        try:
            receipt = await self.client.submit_quote_request(payload)
        except QuoteSubmissionError as exc:
            failure = self.error_handler.handle_submission_failure(exc, context={"step": self.current_step.value})
            self.submit_error = failure["message"]
            return {"status": "error", "message": self.submit_error, "retryable": failure["retryable"]}
        finally:
            self.submitting = False

        self.receipt = receipt
        self.current_step = WizardStep.SUBMITTED
        self.confirmation = CONFIRMATION_MESSAGE
        logger.info("[QuoteIntake] submitted status=%s request_id=%s", receipt.status_code, receipt.request_id)
        return {"status": "submitted", "message": self.confirmation, "request_id": receipt.request_id}

    # ------------------------------------------------------------------ #
    # Serialization
    # ------------------------------------------------------------------ #
    def snapshot(self) -> Dict[str, Any]:
        return {
            "current_step": self.current_step.value,
            "step_index": self.step_index,
            "total_steps": len(self.STEPS),
            "progress_percent": self.progress_percent,
            "data": dict(self.record),
            "field_errors": dict(self.field_errors),
            "submit_error": self.submit_error,
            "submitting": self.submitting,
            "confirmation": self.confirmation,
            "request_id": self.receipt.request_id if self.receipt else None,
        }

    @classmethod
    def restore(
        cls,
        snapshot: Dict[str, Any],
        client: QuoteRequestClient,
        config: Optional[IntakeConfig] = None,
    ) -> "QuoteIntakeFlow":
        flow = cls(client, config=config)
        flow.record.update({k: v for k, v in (snapshot.get("data") or {}).items() if k in flow.record})
        flow.current_step = WizardStep(snapshot.get("current_step") or WizardStep.COVERAGE_SELECTION.value)
        flow.field_errors = dict(snapshot.get("field_errors") or {})
        flow.submit_error = snapshot.get("submit_error")
        flow.submitting = bool(snapshot.get("submitting"))
        flow.confirmation = snapshot.get("confirmation")
        if snapshot.get("request_id") is not None:
            flow.receipt = QuoteSubmissionReceipt(status_code=200, body={"id": snapshot["request_id"]})
        return flow
