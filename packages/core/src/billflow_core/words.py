"""Spell monetary amounts out in English words.

Amounts are converted to integer minor units first, so the output is
exact for any amount a Decimal can hold (well beyond 10^12).

Examples (default configuration):
    1234.50  -> "One Thousand Two Hundred Thirty Four and Fifty Cents"
    0        -> "Zero"
    -20      -> "Negative Twenty"

With ``AmountWordsConfig.indian_rupee()``:
    150000.25 -> "Indian Rupee One Lakh Fifty Thousand and Twenty Five Paise Only"
"""

from typing import Optional

from .config import AmountWordsConfig, NumberingSystem
from .money import Number, to_minor_units

_ONES = [
    "", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight",
    "Nine", "Ten", "Eleven", "Twelve", "Thirteen", "Fourteen", "Fifteen",
    "Sixteen", "Seventeen", "Eighteen", "Nineteen",
]

_TENS = [
    "", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy",
    "Eighty", "Ninety",
]

_INTERNATIONAL_SCALES = [
    "", "Thousand", "Million", "Billion", "Trillion", "Quadrillion",
    "Quintillion",
]

_CRORE = 10_000_000
_LAKH = 100_000


def _below_thousand(n: int) -> list[str]:
    """Words for 0 <= n < 1000 (empty for zero)."""
    words: list[str] = []
    if n >= 100:
        words += [_ONES[n // 100], "Hundred"]
        n %= 100
    if n >= 20:
        words.append(_TENS[n // 10])
        n %= 10
    if n > 0:
        words.append(_ONES[n])
    return words


def _international(n: int) -> list[str]:
    if n >= 1000 ** len(_INTERNATIONAL_SCALES):
        raise ValueError(f"Amount too large to spell out: {n}")
    words: list[str] = []
    scale = 0
    while n > 0:
        n, group = divmod(n, 1000)
        if group:
            chunk = _below_thousand(group)
            if _INTERNATIONAL_SCALES[scale]:
                chunk.append(_INTERNATIONAL_SCALES[scale])
            words = chunk + words
        scale += 1
    return words


def _indian(n: int) -> list[str]:
    # Crores repeat: 10^12 is "One Lakh Crore".
    words: list[str] = []
    crores, rest = divmod(n, _CRORE)
    if crores:
        words += _indian(crores) + ["Crore"]
    lakhs, rest = divmod(rest, _LAKH)
    if lakhs:
        words += _below_thousand(lakhs) + ["Lakh"]
    thousands, rest = divmod(rest, 1000)
    if thousands:
        words += _below_thousand(thousands) + ["Thousand"]
    words += _below_thousand(rest)
    return words


def integer_to_words(
    n: int,
    numbering: NumberingSystem = NumberingSystem.INTERNATIONAL,
) -> str:
    """Spell a non-negative integer, e.g. 1234 -> "One Thousand Two Hundred Thirty Four"."""
    if n < 0:
        raise ValueError("integer_to_words expects a non-negative integer")
    if n == 0:
        return "Zero"
    if numbering == NumberingSystem.INDIAN:
        return " ".join(_indian(n))
    return " ".join(_international(n))


def amount_to_words(amount: Number, config: Optional[AmountWordsConfig] = None) -> str:
    """Spell a monetary amount out, including its fractional part.

    Args:
        amount: The amount; rounded half-up to two places first.
        config: Numbering system and unit names; defaults to
            international grouping with "Cents".

    Returns:
        The amount in words. Zero major units read "Zero"; a negative
        amount is prefixed with "Negative".
    """
    config = config or AmountWordsConfig()
    minor_total = to_minor_units(amount)
    negative = minor_total < 0
    major, minor = divmod(abs(minor_total), 100)

    parts: list[str] = []
    if negative:
        parts.append("Negative")
    if config.currency_name:
        parts.append(config.currency_name)
    parts.append(integer_to_words(major, config.numbering))
    if minor:
        parts += ["and", integer_to_words(minor, config.numbering), config.minor_unit_name]
    if config.suffix:
        parts.append(config.suffix)
    return " ".join(parts)
