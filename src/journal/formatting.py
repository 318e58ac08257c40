"""Currency and percentage display helpers.

Amounts use South Asian digit grouping: the last three digits form one
group and every two digits before that form another (1,23,45,678).
"""

from src.settings import get_settings

CRORE = 10_000_000
LAKH = 100_000
THOUSAND = 1_000


def group_indian(integer_digits: str) -> str:
    """Insert lakh/crore separators into a string of digits."""
    if len(integer_digits) <= 3:
        return integer_digits
    head, tail = integer_digits[:-3], integer_digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_inr(
    amount: float,
    show_sign: bool = False,
    compact: bool = False,
    decimals: int = 0,
    symbol: str = None,
) -> str:
    """Format an amount as rupees.

    Args:
        amount: Value to format.
        show_sign: Prefix positive values with '+'.
        compact: Abbreviate to Cr / L / K above a thousand.
        decimals: Fraction digits in the non-compact form.
        symbol: Currency symbol; defaults to the configured one.

    Examples:
        format_inr(12345678) -> '₹1,23,45,678'
        format_inr(-1500, compact=True) -> '-₹1.5K'
    """
    symbol = symbol if symbol is not None else get_settings().currency_symbol
    magnitude = abs(amount)

    if compact:
        sign = "-" if amount < 0 else ("+" if show_sign else "")
        if magnitude >= CRORE:
            return f"{sign}{symbol}{magnitude / CRORE:.2f}Cr"
        if magnitude >= LAKH:
            return f"{sign}{symbol}{magnitude / LAKH:.2f}L"
        if magnitude >= THOUSAND:
            return f"{sign}{symbol}{magnitude / THOUSAND:.1f}K"

    text = f"{magnitude:.{decimals}f}"
    integer_part, _, fraction = text.partition(".")
    body = group_indian(integer_part)
    if fraction:
        body = f"{body}.{fraction}"

    formatted = f"{symbol}{body}"
    if amount < 0 and float(text) != 0:
        return f"-{formatted}"
    if show_sign and amount > 0:
        return f"+{formatted}"
    return formatted


def format_pnl(amount: float) -> str:
    """Signed P&L; zero, including losses that round to zero, renders with '+'."""
    formatted = format_inr(abs(amount))
    if amount < 0 and float(f"{abs(amount):.0f}") != 0:
        return f"-{formatted}"
    return f"+{formatted}"


def format_percent(value: float, show_sign: bool = True, decimals: int = 2) -> str:
    sign = "+" if value >= 0 and show_sign else ""
    return f"{sign}{value:.{decimals}f}%"
