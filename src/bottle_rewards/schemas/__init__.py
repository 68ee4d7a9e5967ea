"""Public schema exports."""

from .auth import AuthToken, SignInRequest, SignUpRequest
from .profile import ProfileAdminRead, ProfileRead, ProfileSummary, ProfileUpdate
from .rate import MoneyQuote, RateCreate, RateRead
from .recycling import RecyclingCreate, RecyclingEntryRead, RecyclingStatsRead
from .redemption import RedemptionCreate, RedemptionRead, RedemptionReceipt

__all__ = [
	"AuthToken",
	"MoneyQuote",
	"ProfileAdminRead",
	"ProfileRead",
	"ProfileSummary",
	"ProfileUpdate",
	"RateCreate",
	"RateRead",
	"RecyclingCreate",
	"RecyclingEntryRead",
	"RecyclingStatsRead",
	"RedemptionCreate",
	"RedemptionRead",
	"RedemptionReceipt",
	"SignInRequest",
	"SignUpRequest",
]
