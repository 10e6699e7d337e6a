"""
Checkout Module - Models
=========================
Checkout states, the validated customer record, and the outcome of one
checkout attempt.
"""

import enum
from dataclasses import dataclass, field
from typing import Dict, Optional


class CheckoutState(str, enum.Enum):
    IDLE = "Idle"
    VALIDATING = "Validating"
    BLOCKED = "Blocked"        # rate limited
    INVALID = "Invalid"        # one or more fields / cart checks failed
    COMPOSING = "Composing"
    SUBMITTED = "Submitted"
    FAILED = "Failed"          # message could not be built or handed off


CHECKOUT_FIELDS = ("name", "address", "phone", "notes")


@dataclass(frozen=True)
class CustomerInfo:
    """Sanitized checkout details. Lives only long enough to build the order message."""
    name: str
    address: str
    phone: str
    notes: str = ""


@dataclass
class CheckoutOutcome:
    state: CheckoutState
    errors: Dict[str, str] = field(default_factory=dict)
    notice: Optional[str] = None
    message: Optional[str] = None
    url: Optional[str] = None
    customer: Optional[CustomerInfo] = None
    # Raw form input, echoed back so the user never retypes after a failure
    values: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.state == CheckoutState.SUBMITTED
