"""Money and currency helpers."""
from .money import to_decimal, round_money, format_money

__all__ = [
    "to_decimal",
    "round_money",
    "format_money",
]
