"""Service layer exports."""

from . import (
	conversion,
	identity_service,
	profile_service,
	rate_service,
	recycling_service,
	redemption_service,
)

__all__ = [
	"conversion",
	"identity_service",
	"profile_service",
	"rate_service",
	"recycling_service",
	"redemption_service",
]
