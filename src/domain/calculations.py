"""Money arithmetic for transactions, partner shares and reporting periods.

All amounts are ``Decimal`` and rounded half-up to two places, matching how
figures are shown to operators.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def to_money(value: Decimal | int | float | str) -> Decimal:
    """Round a value half-up to two decimal places."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class TransactionFigures:
    cost: Decimal
    sale: Decimal
    profit: Decimal


def calculate_transaction(
    usd_used: Decimal,
    usdt_received: Decimal,
    buy_rate: Decimal,
    sell_rate: Decimal,
) -> TransactionFigures:
    """Derive cost, sale and profit.

    - cost = USD used x buy rate
    - sale = USDT received x sell rate
    - profit = sale - cost

    Profit is computed from the unrounded cost and sale, then each figure is
    rounded independently.
    """
    cost = Decimal(usd_used) * Decimal(buy_rate)
    sale = Decimal(usdt_received) * Decimal(sell_rate)
    return TransactionFigures(
        cost=to_money(cost),
        sale=to_money(sale),
        profit=to_money(sale - cost),
    )


def calculate_partner_share(total_profit: Decimal, profit_split: Decimal) -> Decimal:
    """A partner's share of ``total_profit`` given a percentage split."""
    return to_money(Decimal(total_profit) * Decimal(profit_split) / HUNDRED)


def utilization_percent(used: Decimal, limit: Decimal) -> Decimal:
    """Percentage of ``limit`` consumed, capped at 100. Zero limit gives 0."""
    if limit <= 0:
        return Decimal("0")
    return to_money(min(HUNDRED, used / limit * HUNDRED))


def month_range(moment: datetime) -> tuple[datetime, datetime]:
    """First and last instant of the calendar month containing ``moment``."""
    last_day = calendar.monthrange(moment.year, moment.month)[1]
    start = datetime(moment.year, moment.month, 1)
    end = datetime(moment.year, moment.month, last_day, 23, 59, 59, 999999)
    return start, end


def year_range(moment: datetime) -> tuple[datetime, datetime]:
    """First and last instant of the calendar year containing ``moment``."""
    return (
        datetime(moment.year, 1, 1),
        datetime(moment.year, 12, 31, 23, 59, 59, 999999),
    )


def month_key(moment: datetime) -> str:
    """``YYYY-MM`` grouping key."""
    return f"{moment.year}-{moment.month:02d}"


def trailing_month_keys(moment: datetime, months: int) -> list[str]:
    """Keys for the ``months`` calendar months ending with ``moment``'s month, oldest first."""
    keys = []
    year, month = moment.year, moment.month
    for _ in range(months):
        keys.append(f"{year}-{month:02d}")
        month -= 1
        if month == 0:
            month = 12
            year -= 1
    return list(reversed(keys))
