"""Domain error kinds surfaced to API callers."""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class RewardsError(Exception):
    """Raised when a rewards business rule is violated.

    ``code`` is the stable error kind clients branch on; ``detail`` is the
    human readable message.
    """

    code = "RewardsError"
    default_detail = "Request could not be processed."
    default_status = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: Optional[str] = None, status_code: Optional[int] = None) -> None:
        self.detail = detail or self.default_detail
        self.status_code = status_code or self.default_status
        super().__init__(self.detail)

    def as_detail(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.detail}

    def to_http(self) -> HTTPException:
        headers = None
        if self.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        return HTTPException(status_code=self.status_code, detail=self.as_detail(), headers=headers)


class InvalidQuantity(RewardsError):
    code = "InvalidQuantity"
    default_detail = "Quantity must be a positive whole number."


class BelowMinimumUnit(RewardsError):
    code = "BelowMinimumUnit"
    default_detail = "Quantity is below the minimum redeemable unit."


class InsufficientBalance(RewardsError):
    code = "InsufficientBalance"
    default_detail = "Insufficient points balance."


class NoActiveRate(RewardsError):
    code = "NoActiveRate"
    default_detail = "No active exchange rate is configured."
    default_status = status.HTTP_409_CONFLICT


class DuplicateStudentId(RewardsError):
    code = "DuplicateStudentId"
    default_detail = "This student id is already registered."
    default_status = status.HTTP_409_CONFLICT


class DuplicateEmail(RewardsError):
    code = "DuplicateEmail"
    default_detail = "This e-mail address is already registered."
    default_status = status.HTTP_409_CONFLICT


class InvalidPassword(RewardsError):
    code = "InvalidPassword"
    default_detail = "Password does not meet the minimum requirements."


class AuthenticationFailed(RewardsError):
    code = "AuthenticationFailed"
    default_detail = "Invalid login id or password."
    default_status = status.HTTP_401_UNAUTHORIZED


class Forbidden(RewardsError):
    code = "Forbidden"
    default_detail = "This action is restricted to administrators."
    default_status = status.HTTP_403_FORBIDDEN


class ProfileNotFound(RewardsError):
    code = "ProfileNotFound"
    default_detail = "Profile not found."
    default_status = status.HTTP_404_NOT_FOUND


class StoreUnavailable(RewardsError):
    code = "StoreUnavailable"
    default_detail = "The data store is temporarily unavailable. Please retry."
    default_status = status.HTTP_503_SERVICE_UNAVAILABLE
