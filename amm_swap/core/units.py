"""Conversion between user-entered decimal strings and integer base units.

Chain arithmetic only ever sees base units (amount * 10**precision as an
int). Display strings are produced with a fixed 5 decimal places so that
amounts of assets with different precisions line up; the conversion is
lossy and to_display(to_base_units(s, p), p) need not give back s.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext

DISPLAY_PLACES = 5

# uint256 tops out below 10**78, so larger base-unit amounts cannot exist on chain
MAX_BASE_UNIT_DIGITS = 78
_DISPLAY_QUANTUM = Decimal(1).scaleb(-DISPLAY_PLACES)


def to_base_units(display: str, precision: int) -> int:
    """Convert a decimal string to base units, truncating extra digits.

    Strings that are not finite decimal numbers convert to 0, as do
    negative values and values too large to fit in a uint256 base-unit
    amount.

    Example:
        to_base_units("1.23456", 18) -> 1234560000000000000
        to_base_units("0.1234567", 6) -> 123456
    """
    if precision < 0:
        raise ValueError(f"precision must be >= 0, got {precision}")

    try:
        value = Decimal(display.strip())
    except (InvalidOperation, AttributeError):
        return 0

    if not value.is_finite() or value <= 0:
        return 0
    magnitude = value.adjusted() + precision
    if magnitude >= MAX_BASE_UNIT_DIGITS:
        return 0
    if magnitude < 0:
        return 0  # Below one base unit

    # Work on the exact digit tuple so no context rounding can creep in
    _, digits, exponent = value.as_tuple()
    coefficient = int("".join(str(d) for d in digits))
    shift = exponent + precision
    if shift >= 0:
        return coefficient * 10**shift
    return coefficient // 10**(-shift)


def to_display(amount: int, precision: int) -> str:
    """Format base units as a string with exactly 5 decimal places.

    Rounds half away from zero at the 5th decimal regardless of the
    asset's precision.

    Example:
        to_display(1234565445577654321, 18) -> "1.23457"
    """
    if precision < 0:
        raise ValueError(f"precision must be >= 0, got {precision}")

    # Decimal(str) is exact; only the quantize step rounds
    value = Decimal(f"{int(amount)}E-{precision}")
    with localcontext() as ctx:
        ctx.prec = len(str(abs(int(amount)))) + DISPLAY_PLACES + 2
        rounded = value.quantize(_DISPLAY_QUANTUM, rounding=ROUND_HALF_UP)
    return f"{rounded:f}"
