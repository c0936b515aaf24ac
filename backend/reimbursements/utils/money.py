from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")

SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£", "JPY": "¥"}


@dataclass(frozen=True)
class Money:
    """An amount paired with its ISO currency code, for display only."""

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self):
        object.__setattr__(self, "amount", Decimal(str(self.amount or 0)))
        object.__setattr__(self, "currency", (self.currency or "USD").upper())

    def format(self) -> str:
        value = self.amount.quantize(CENTS, rounding=ROUND_HALF_UP)
        symbol = SYMBOLS.get(self.currency)
        if symbol:
            return f"{'-' if value < 0 else ''}{symbol}{abs(value):,}"
        return f"{value:,} {self.currency}"

    def __str__(self):
        return self.format()
