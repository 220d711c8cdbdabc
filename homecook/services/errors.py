# homecook/services/errors.py
"""
Error taxonomy for the marketplace core.

Every error carries a stable machine `code`, a human `message`, the HTTP
status the API layer maps it to, and a small `diagnostics` dict that is safe
to return to callers. Nothing in the core retries; errors go straight back to
the caller.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class HomeCookError(Exception):
    """Base class for all errors raised by the core services."""

    code = "error"
    status_code = 400

    def __init__(self, message: str, diagnostics: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.diagnostics: Dict[str, Any] = diagnostics or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": False,
            "status": self.status_code,
            "error": self.code,
            "message": self.message,
            "diagnostics": self.diagnostics,
        }


class IllegalTransition(HomeCookError):
    """Requested status is not a legal successor of the current status."""

    code = "illegal_transition"
    status_code = 409


class Forbidden(HomeCookError):
    """The acting identity or role may not perform this action."""

    code = "forbidden"
    status_code = 403


class BelowMinimumOrder(HomeCookError):
    """Order total is under the cook's minimum order amount."""

    code = "below_minimum_order"
    status_code = 422


class NotFound(HomeCookError):
    code = "not_found"
    status_code = 404


class OrderNotCompleted(HomeCookError):
    """A review was attempted for an order that is not completed."""

    code = "order_not_completed"
    status_code = 409


class AlreadyReviewed(HomeCookError):
    code = "already_reviewed"
    status_code = 409


class InvalidRequest(HomeCookError):
    """Input passed type validation but breaks a business rule."""

    code = "invalid_request"
    status_code = 422


class StoreUnavailable(HomeCookError):
    """The backing document store could not serve the call."""

    code = "store_unavailable"
    status_code = 503
