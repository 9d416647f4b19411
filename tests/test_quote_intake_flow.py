import asyncio

import pytest

from src.forms.flows.quote_intake import (
    CONFIRMATION_MESSAGE,
    QuoteIntakeFlow,
    SubmissionInProgressError,
    WizardStateError,
    WizardStep,
)
from src.forms.validation import FormValidationError
from src.integrations.contracts.interfaces import QuoteRequestClient, QuoteSubmissionReceipt
from src.quoting.options import QuoteComparison

COVERAGE = {"coverageType": "term", "coverageAmount": "250000"}
CONTACT = {"firstName": "Jane", "lastName": "Doe", "email": "jane@example.com", "phone": "(555) 123-4567"}
ADDRESS = {"streetAddress": "12 Main Street", "addressLine2": "Apt 4", "city": "Austin", "state": "TX", "zipCode": "73301"}
HEALTH = {"heightFeet": "5", "heightInches": "10", "weight": "180", "birthDate": "1985-04-12", "medicalBackground": "None"}


def _at_health_step(client):
    flow = QuoteIntakeFlow(client)
    flow.advance(COVERAGE)
    flow.advance(CONTACT)
    flow.advance(ADDRESS)
    return flow


def test_starts_on_coverage_selection(quote_client):
    flow = QuoteIntakeFlow(quote_client)
    assert flow.current_step == WizardStep.COVERAGE_SELECTION
    assert flow.step_index == 0
    assert flow.progress_percent == 25
    assert not flow.can_submit


def test_invalid_step_blocks_advance_and_keeps_state(quote_client):
    flow = QuoteIntakeFlow(quote_client)
    flow.advance(COVERAGE)
    with pytest.raises(FormValidationError) as exc:
        flow.advance({"firstName": "Jane", "email": "bad"})
    assert flow.current_step == WizardStep.CONTACT_INFO
    assert set(exc.value.field_errors) == {"lastName", "email", "phone"}
    assert flow.field_errors == exc.value.field_errors
    assert flow.record["firstName"] == "Jane"


def test_valid_step_clears_errors(quote_client):
    flow = QuoteIntakeFlow(quote_client)
    with pytest.raises(FormValidationError):
        flow.advance({})
    flow.advance(COVERAGE)
    assert flow.field_errors == {}
    assert flow.current_step == WizardStep.CONTACT_INFO


def test_back_preserves_entered_data(quote_client):
    flow = QuoteIntakeFlow(quote_client)
    flow.advance(COVERAGE)
    flow.advance(CONTACT)
    assert flow.back() == WizardStep.CONTACT_INFO
    assert flow.back() == WizardStep.COVERAGE_SELECTION
    assert flow.back() == WizardStep.COVERAGE_SELECTION
    assert flow.record["email"] == "jane@example.com"
    assert flow.record["coverageAmount"] == "250000"


def test_update_ignores_unknown_fields(quote_client):
    flow = QuoteIntakeFlow(quote_client, initial_data={"coverageAmount": " 500000 ", "favouriteColour": "blue"})
    assert flow.record["coverageAmount"] == "500000"
    assert "favouriteColour" not in flow.record


def test_apply_quote_option_sets_coverage(quote_client, applicant):
    comparison = QuoteComparison(applicant)
    flow = QuoteIntakeFlow(quote_client)
    comparison.set_coverage(750000)
    flow.apply_quote_option(comparison.selected_option)
    assert flow.record["coverageAmount"] == "750000"


def test_final_step_cannot_be_advanced(quote_client):
    flow = _at_health_step(quote_client)
    assert flow.can_submit
    with pytest.raises(WizardStateError):
        flow.advance(HEALTH)


@pytest.mark.asyncio
async def test_cannot_submit_before_final_step(quote_client):
    flow = QuoteIntakeFlow(quote_client)
    with pytest.raises(WizardStateError):
        await flow.submit()
    assert quote_client.attempts == 0


@pytest.mark.asyncio
async def test_submit_validates_before_posting(quote_client):
    flow = _at_health_step(quote_client)
    with pytest.raises(FormValidationError):
        await flow.submit({**HEALTH, "heightInches": "14"})
    assert quote_client.attempts == 0
    assert flow.current_step == WizardStep.HEALTH_INFO
    assert "heightInches" in flow.field_errors


@pytest.mark.asyncio
async def test_end_to_end_mortgage_protection_request(quote_client):
    flow = _at_health_step(quote_client)
    result = await flow.submit(HEALTH)

    assert result == {"status": "submitted", "message": CONFIRMATION_MESSAGE, "request_id": "1"}
    assert flow.is_submitted
    assert flow.confirmation == CONFIRMATION_MESSAGE
    assert quote_client.attempts == 1
    assert quote_client.submissions == [
        {
            "coverageType": "term",
            "coverageAmount": "250000",
            "firstName": "Jane",
            "lastName": "Doe",
            "email": "jane@example.com",
            "phone": "(555) 123-4567",
            "streetAddress": "12 Main Street",
            "addressLine2": "Apt 4",
            "city": "Austin",
            "state": "TX",
            "zipCode": "73301",
            "heightFeet": "5",
            "heightInches": "10",
            "height": "5'10\"",
            "weight": "180",
            "birthDate": "1985-04-12",
            "medicalBackground": "None",
        }
    ]


@pytest.mark.asyncio
async def test_submitted_state_is_terminal(quote_client):
    flow = _at_health_step(quote_client)
    await flow.submit(HEALTH)
    with pytest.raises(WizardStateError):
        await flow.submit(HEALTH)
    with pytest.raises(WizardStateError):
        flow.back()
    with pytest.raises(WizardStateError):
        flow.update({"firstName": "John"})
    assert quote_client.attempts == 1


@pytest.mark.asyncio
async def test_failed_submit_keeps_record_for_identical_resubmission(quote_client):
    flow = _at_health_step(quote_client)
    quote_client.fail_with(status_code=500)

    result = await flow.submit(HEALTH)
    assert result["status"] == "error"
    assert result["retryable"] is True
    assert flow.current_step == WizardStep.HEALTH_INFO
    assert flow.submit_error == result["message"]
    assert not flow.submitting
    record_after_failure = dict(flow.record)

    quote_client.succeed()
    result = await flow.submit()
    assert result["status"] == "submitted"
    assert flow.record == record_after_failure
    assert quote_client.attempts == 2
    assert len(quote_client.submissions) == 1
    assert flow.submit_error is None


class BlockingClient(QuoteRequestClient):
    def __init__(self):
        self.release = asyncio.Event()
        self.calls = 0

    async def submit_quote_request(self, payload):
        self.calls += 1
        await self.release.wait()
        return QuoteSubmissionReceipt(status_code=200, body={"id": "abc"})


@pytest.mark.asyncio
async def test_second_submit_while_in_flight_is_rejected():
    client = BlockingClient()
    flow = _at_health_step(client)

    first = asyncio.create_task(flow.submit(HEALTH))
    await asyncio.sleep(0)
    assert flow.submitting
    assert not flow.can_submit

    with pytest.raises(SubmissionInProgressError):
        await flow.submit(HEALTH)
    with pytest.raises(SubmissionInProgressError):
        flow.back()

    client.release.set()
    result = await first
    assert result["request_id"] == "abc"
    assert client.calls == 1


@pytest.mark.asyncio
async def test_snapshot_restore_round_trip(quote_client):
    flow = _at_health_step(quote_client)
    snap = flow.snapshot()
    assert snap["current_step"] == "health_info"
    assert snap["step_index"] == 3
    assert snap["progress_percent"] == 100

    restored = QuoteIntakeFlow.restore(snap, quote_client)
    assert restored.current_step == WizardStep.HEALTH_INFO
    assert restored.record == flow.record

    await restored.submit(HEALTH)
    again = QuoteIntakeFlow.restore(restored.snapshot(), quote_client)
    assert again.is_submitted
    assert again.receipt.request_id == "1"
