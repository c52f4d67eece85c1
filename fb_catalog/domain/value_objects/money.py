"""
Money value object for catalog prices.

Application code works with prices in major units (e.g. 19.99 USD) while the
Graph API expects integer minor units (1999). This value object owns that
conversion.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

# Fixed two-decimal minor unit; wrong for zero- or three-decimal currencies.
MINOR_UNITS_PER_MAJOR = 100


@dataclass(frozen=True)
class Money:
    """
    Immutable value object representing a price with currency.

    Attributes:
        amount: The price in major units as Decimal for precision
        currency: ISO 4217 currency code (e.g., "USD", "EUR")

    Example:
        >>> Money(amount=Decimal("19.99"), currency="USD").to_minor_units()
        1999
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        """Validate money object after initialization."""
        if not isinstance(self.amount, Decimal):
            # str() first so floats like 19.99 don't carry binary noise
            object.__setattr__(self, "amount", Decimal(str(self.amount)))

        if self.amount < 0:
            raise ValueError(f"Money amount cannot be negative: {self.amount}")

        if not self.currency or len(self.currency) != 3:
            raise ValueError(f"Invalid currency code: {self.currency}")

    def to_minor_units(self) -> int:
        """Price in integer minor units, rounded half-up."""
        minor = (self.amount * MINOR_UNITS_PER_MAJOR).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return int(minor)

    @classmethod
    def from_minor_units(cls, minor: int, currency: str = "USD") -> "Money":
        """Create Money from an integer amount of minor units."""
        return cls(amount=Decimal(minor) / MINOR_UNITS_PER_MAJOR, currency=currency)

    def __str__(self) -> str:
        return f"{self.currency} {self.amount:.2f}"

    def __repr__(self) -> str:
        return f"Money(amount=Decimal('{self.amount}'), currency='{self.currency}')"
