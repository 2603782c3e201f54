"""ISO currency identifiers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Currency:
    """Three-letter ISO currency code."""

    code: str

    def __post_init__(self):
        if not isinstance(self.code, str) or len(self.code) != 3 or not self.code.isalpha():
            raise ValueError(f"Invalid currency code: {self.code!r}")
        object.__setattr__(self, "code", self.code.upper())

    @classmethod
    def of(cls, code: str) -> "Currency":
        return cls(code)

    def __str__(self) -> str:
        return self.code


USD = Currency("USD")
EUR = Currency("EUR")
GBP = Currency("GBP")
JPY = Currency("JPY")
CHF = Currency("CHF")
