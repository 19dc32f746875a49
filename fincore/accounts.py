"""
Account Module

A single monetary balance owned by exactly one identity. Arithmetic only:
authorization and persistence live in the service and repository layers.
All amounts are Decimal; nothing is rounded here.
"""

from dataclasses import dataclass, field
from decimal import (
    Context, Decimal, Inexact, InvalidOperation, MAX_EMAX, MAX_PREC, MIN_EMIN, Rounded
)
from typing import Any, Dict, Union

from .exceptions import InvalidAmount

Amount = Union[Decimal, int, str, float]

ZERO = Decimal("0.00")

# Unbounded precision: sums and differences are exact, and any rounding
# would trap instead of passing silently.
EXACT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN,
                traps=[InvalidOperation, Inexact, Rounded])


def add(a: Decimal, b: Decimal) -> Decimal:
    return EXACT.add(a, b)


def subtract(a: Decimal, b: Decimal) -> Decimal:
    return EXACT.subtract(a, b)


def to_decimal(amount: Amount) -> Decimal:
    """
    Coerce a caller-supplied amount to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1") rather than its
    binary expansion. Non-finite or unparsable values raise InvalidAmount.
    """
    if isinstance(amount, bool):
        raise InvalidAmount(f"Not a monetary amount: {amount!r}")
    if isinstance(amount, Decimal):
        value = amount
    else:
        try:
            value = Decimal(str(amount).strip())
        except InvalidOperation:
            raise InvalidAmount(f"Not a monetary amount: {amount!r}")
    if not value.is_finite():
        raise InvalidAmount(f"Not a monetary amount: {amount!r}")
    return value


@dataclass
class Account:
    """Mutable balance; may go negative (overdraft policy is the service's call)"""
    balance: Decimal = field(default_factory=lambda: ZERO)

    def __post_init__(self):
        self.balance = to_decimal(self.balance)

    def deposit(self, amount: Amount) -> Decimal:
        """Add amount and return the new balance"""
        self.balance = add(self.balance, to_decimal(amount))
        return self.balance

    def withdraw(self, amount: Amount) -> Decimal:
        """Subtract amount and return the new balance"""
        self.balance = subtract(self.balance, to_decimal(amount))
        return self.balance

    def to_dict(self) -> Dict[str, Any]:
        return {'balance': str(self.balance)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Account':
        return cls(balance=Decimal(data.get('balance', '0.00')))
