from __future__ import annotations

import re
from typing import List, Optional, Tuple

from metro_core.models import Investment


# Letters written before "$" and the currency they denote.
DOLLAR_PREFIXES = {
    "": "USD",
    "US": "USD",
    "HK": "HKD",
    "S": "SGD",
    "A": "AUD",
    "AU": "AUD",
    "C": "CAD",
    "CA": "CAD",
    "NZ": "NZD",
    "NT": "TWD",
    "R": "BRL",
    "MX": "MXN",
}

CURRENCY_SYMBOLS = {
    "€": "EUR",
    "£": "GBP",
    "₹": "INR",
    "¥": "JPY",
}

ISO_CODES = frozenset(
    """
    AED AUD BDT BRL CAD CHF CLP CNY COP CZK DKK EGP EUR GBP HKD HUF IDR ILS INR
    JPY KRW KWD MXN MYR NGN NOK NZD PEN PHP PKR PLN QAR RUB SAR SEK SGD THB TRY
    TWD UAH USD VND ZAR
    """.split()
)

BILLION = 1e9

MAGNITUDES = {
    "trillion": 1e12,
    "tn": 1e12,
    "t": 1e12,
    "billion": BILLION,
    "bn": BILLION,
    "b": BILLION,
    "million": 1e6,
    "mn": 1e6,
    "m": 1e6,
    "thousand": 1e3,
    "k": 1e3,
}

UNSPECIFIED_CURRENCY = "UNSPECIFIED"

_NUMBER_RE = re.compile(r"\d[\d,]*(?:\.\d+)?|\.\d+")
_SUFFIX_RE = re.compile(r"\s*(trillion|billion|million|thousand|tn|bn|mn|t|b|m|k)\b", re.IGNORECASE)
_DOLLAR_RE = re.compile(r"(?<![A-Za-z])([A-Z]{1,3})?\$")
_SYMBOL_RE = re.compile("[" + "".join(CURRENCY_SYMBOLS) + "]")
_CODE_RE = re.compile(r"(?<![A-Za-z])([A-Z]{3})(?![A-Za-z])")


def _dollar_code(prefix: Optional[str]) -> str:
    prefix = prefix or ""
    return DOLLAR_PREFIXES.get(prefix, f"{prefix}$")


def _currency_marks(text: str) -> List[Tuple[int, int, str]]:
    """(start, end, code) for every currency marker in `text`."""
    marks = [(m.start(), m.end(), _dollar_code(m.group(1))) for m in _DOLLAR_RE.finditer(text)]
    marks += [(m.start(), m.end(), CURRENCY_SYMBOLS[m.group(0)]) for m in _SYMBOL_RE.finditer(text)]
    marks += [(m.start(), m.end(), m.group(1)) for m in _CODE_RE.finditer(text) if m.group(1) in ISO_CODES]
    return marks


def detect_currency(text: str) -> Optional[str]:
    """Currency of the first amount in `text`: the marker nearest to it, a leading one on ties."""
    marks = _currency_marks(text)
    if not marks:
        return None
    number = _NUMBER_RE.search(text)
    if number is None:
        return min(marks)[2]
    lo, hi = number.start(), number.end()

    def distance(mark: Tuple[int, int, str]) -> Tuple[int, int]:
        start, end, _ = mark
        if end <= lo:
            return lo - end, 0
        return max(start - hi, 0), 1

    return min(marks, key=distance)[2]


def _parse_amount(text: str) -> Optional[Tuple[float, float]]:
    """Return (value, unit size) for the first number in `text`."""
    match = _NUMBER_RE.search(text)
    if not match:
        return None
    try:
        value = float(match.group(0).replace(",", ""))
    except ValueError:
        return None
    unit = BILLION
    suffix = _SUFFIX_RE.match(text, match.end())
    if suffix:
        unit = MAGNITUDES[suffix.group(1).lower()]
    return value, unit


def parse_investment(raw: object) -> Investment:
    """Parse display text like "$3.2B", "€5.3B" or "SGD 5.7B".

    Text without any number degrades to an unparsed Investment that keeps
    the raw text for display.
    """
    text = "" if raw is None else str(raw).strip()
    parsed = _parse_amount(text)
    if parsed is None:
        return Investment(raw=text)
    value, unit = parsed
    amount = value if unit == BILLION else value * unit / BILLION
    return Investment(raw=text, amount=amount, currency=detect_currency(text))


def format_investment(amount: Optional[float], currency: Optional[str]) -> str:
    """Render a billions amount the way the dashboards display it ("$8.00B")."""
    if amount is None:
        return "N/A"
    symbol = {"USD": "$", "EUR": "€", "GBP": "£", "INR": "₹", "JPY": "¥"}.get(currency or "")
    if symbol:
        return f"{symbol}{amount:,.2f}B"
    if currency and currency != UNSPECIFIED_CURRENCY:
        return f"{currency} {amount:,.2f}B"
    return f"{amount:,.2f}B"
