"""Numeric token extraction and normalization for table cell text.

A cell such as ``"Revenue: $1,200 (prev. 1.050,00)"`` is processed in two
stages:

1. ``extract_tokens`` finds every number-looking substring: optional leading
   sign/parenthesis markers, then a run of digits, dots, commas, parentheses
   and whitespace that starts and ends on a digit. A parenthesized figure
   keeps its closing parenthesis so accounting negatives survive intact,
   and neighbouring figures such as ``(1) (2)`` stay separate tokens.
2. ``normalize`` turns one token into a float, or ``None`` when the token only
   resembles a number.

Supported notations: currency symbols and letters (discarded), comma
thousands separators, dot decimals, a lone decimal comma (``1234,56``),
and ``(1,234.56)`` for negatives. Several dots are ambiguous without a
locale; the last one is taken as the decimal point, so ``1.234.567`` reads
as ``1234.567``.
"""

import math
import re
from collections.abc import Iterator

_TOKEN_PATTERN = re.compile(
    r"\(\s*[0-9](?:[0-9.,\s]*[0-9])?\s*\)"
    r"|[-()]*\s*[0-9](?:[0-9.,()\s]*[0-9])?"
)

_DISALLOWED_CHARS = re.compile(r"[^0-9.\-,()\s]")
_PAREN_WRAPPED = re.compile(r"\s*\(.*\)\s*", re.DOTALL)
_PARENTHESES = re.compile(r"[()]")
_WHITESPACE = re.compile(r"\s+")
_THOUSANDS_GROUP = re.compile(r"[0-9]{3}")


def iter_tokens(text: str) -> Iterator[str]:
    """Lazily yield numeric-candidate tokens found in ``text``.

    Args:
        text: Raw cell text; may be empty.

    Yields:
        Non-overlapping tokens in left-to-right order.
    """
    for match in _TOKEN_PATTERN.finditer(text):
        yield match.group(0)


def extract_tokens(text: str) -> list[str]:
    """Return every numeric-candidate token in ``text``.

    Tokens are not validated yet; some may still be rejected by ``normalize``.

    Examples:
        >>> extract_tokens("Revenue: $1,200")
        ['1,200']
        >>> extract_tokens("Cost: (300)")
        ['(300)']
        >>> extract_tokens("n/a")
        []
    """
    return list(iter_tokens(text))


def _resolve_separators(text: str) -> str:
    """Remove thousands separators, leaving at most one decimal marker.

    With more than one dot, commas are dropped and only the last dot is kept
    as the decimal point. Otherwise commas are thousands separators, except a
    lone comma not followed by a three-digit group, which is left in place to
    be read as a decimal comma.
    """
    dot_count = text.count(".")

    if dot_count > 1:
        text = text.replace(",", "")
        head, _, tail = text.rpartition(".")
        return f"{head.replace('.', '')}.{tail}"

    if dot_count == 0 and text.count(",") == 1:
        fraction = text.split(",", 1)[1]
        if not _THOUSANDS_GROUP.fullmatch(fraction):
            return text

    return text.replace(",", "")


def _to_float(text: str) -> float | None:
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def normalize(token: str) -> float | None:
    """Convert a numeric-candidate token into its value.

    Args:
        token: A token produced by ``extract_tokens`` (or any string).

    Returns:
        The parsed value, negated when the token is wrapped in parentheses,
        or ``None`` if the token is not a finite number.

    Examples:
        >>> normalize("1,234.56")
        1234.56
        >>> normalize("(1,234.56)")
        -1234.56
        >>> normalize("1234,56")
        1234.56
        >>> normalize("$1,000")
        1000.0
        >>> normalize("--") is None
        True
    """
    working = token.strip()
    if not working:
        return None

    working = _DISALLOWED_CHARS.sub("", working)
    negative_paren = _PAREN_WRAPPED.fullmatch(working) is not None

    working = _PARENTHESES.sub("", working)
    working = _WHITESPACE.sub("", working)
    working = _resolve_separators(working)

    value = _to_float(working)
    if value is None:
        # Decimal comma, e.g. "1234,56"
        value = _to_float(working.replace(",", "."))
        if value is None:
            return None

    if not math.isfinite(value):
        return None

    if negative_paren:
        value = -abs(value)
    return value
