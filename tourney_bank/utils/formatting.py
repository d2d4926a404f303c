"""Display formatting for money, percentages and placements."""


def format_currency(amount: float) -> str:
    """Format an amount with a dollar sign and two decimals.

    Example: 1234.5 -> "$1,234.50"
    """
    if amount < 0:
        return f"-${abs(amount):,.2f}"
    return f"${amount:,.2f}"


def format_signed_currency(amount: float) -> str:
    """Format an amount with an explicit sign, used for net pay.

    Example: 12.5 -> "+$12.50", -3 -> "-$3.00"
    """
    if amount >= 0:
        return "+" + format_currency(amount)
    return format_currency(amount)


def format_percent(value: float) -> str:
    """Format a value already expressed in percent, trimming trailing zeros.

    Example: 50.0 -> "50%", 33.333 -> "33.33%"
    """
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return f"{text}%"


def ordinal_suffix(position: int) -> str:
    """Get the English ordinal suffix for a placement (1 -> "st", 12 -> "th")."""
    if 10 <= position % 100 <= 20:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(position % 10, "th")
