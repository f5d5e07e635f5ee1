"""Integer money arithmetic for the subunit-based ledger.

All stakes, payouts, balances and transfer amounts are int subunits (paisa).
No float, no Decimal, and no guessing units from magnitude: conversion to a
human-readable string happens only in response schemas.
"""

from config.settings import settings

RATE_SCALE = 10000  # basis points: 10000 == 100%
ODDS_SCALE = 10000  # multipliers: 900000 == 90x


def subunits_to_display(subunits: int) -> str:
    """Format subunits for display: 150000 -> '₹1,500.00', -1200 -> '-₹12.00'."""
    symbol = settings.CURRENCY_SYMBOL
    if subunits < 0:
        abs_subunits = -subunits
        return f"-{symbol}{abs_subunits // 100:,}.{abs_subunits % 100:02d}"
    return f"{symbol}{subunits // 100:,}.{subunits % 100:02d}"


def validate_rate_bps(rate_bps: int) -> None:
    """Validate a basis-point rate is within [0, 10000]."""
    if not (0 <= rate_bps <= RATE_SCALE):
        raise ValueError(f"Rate must be between 0 and {RATE_SCALE} bps, got {rate_bps}")


def apply_rate(amount: int, rate_bps: int) -> int:
    """Scale an amount by a basis-point rate, rounding down.

    floor(amount * rate_bps / 10000). Used for commission deductions and
    deposit bonuses, so the platform never pays a fractional subunit.
    """
    if amount == 0 or rate_bps == 0:
        return 0
    return (amount * rate_bps) // RATE_SCALE


def apply_odds(stake: int, odds_scaled: int) -> int:
    """Payout for a winning stake: floor(stake * odds_scaled / 10000)."""
    if stake == 0 or odds_scaled == 0:
        return 0
    return (stake * odds_scaled) // ODDS_SCALE
