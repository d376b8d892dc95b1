from dataclasses import dataclass


@dataclass(frozen=True)
class PaywallStatus:
    """Result of the has-paid check."""

    has_paid: bool = False
    remaining_requests: int = 0

    @property
    def can_translate(self) -> bool:
        return self.has_paid or self.remaining_requests > 0


@dataclass(frozen=True)
class PaymentOutcome:
    succeeded: bool
    message: str
    transaction_id: str | None = None
