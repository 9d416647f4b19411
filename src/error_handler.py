"""Error handling helpers for quote submission and the API layer."""
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)

SUBMIT_FAILED_MESSAGE = "Failed to submit quote request. Please try again."
INTERNAL_ERROR_MESSAGE = "An internal error occurred while processing your request. Please try again later."


class ErrorHandler:
    def handle_submission_failure(self, exc: Exception, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        logger.warning("Quote submission failed: %s", exc)
        return {
            "message": SUBMIT_FAILED_MESSAGE,
            "retryable": True,
            "metadata": {
                "error": str(exc),
                "status_code": getattr(exc, "status_code", None),
                "context": context or {},
            },
        }

    def handle_exception(self, exc: Exception, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        logger.error("Unhandled exception in quoting service: %s", exc, exc_info=True)
        return {
            "message": INTERNAL_ERROR_MESSAGE,
            "retryable": False,
            "metadata": {"error": str(exc), "context": context or {}},
        }
