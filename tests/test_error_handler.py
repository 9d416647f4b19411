from src.error_handler import ErrorHandler, SUBMIT_FAILED_MESSAGE
from src.integrations.contracts.interfaces import QuoteSubmissionError


def test_handle_exception_returns_payload():
    eh = ErrorHandler()
    out = eh.handle_exception(Exception("boom"), context={"k": "v"})
    assert out["retryable"] is False
    assert "internal error" in out["message"].lower()
    assert "boom" in out["metadata"]["error"]


def test_submission_failure_is_generic_and_retryable():
    out = ErrorHandler().handle_submission_failure(QuoteSubmissionError("upstream said no", status_code=502))
    assert out["message"] == SUBMIT_FAILED_MESSAGE
    assert out["retryable"] is True
    assert out["metadata"]["status_code"] == 502
    assert "upstream said no" not in out["message"]
