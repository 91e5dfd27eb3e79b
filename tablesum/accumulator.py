"""Per-page accumulation of numeric values found in table cells."""

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict

from tablesum.parsing import iter_tokens, normalize


class PageTally(BaseModel):
    """Counts and subtotal for one page's cell texts.

    Attributes:
        cells: Number of cell texts examined.
        tokens: Numeric-candidate tokens found across all cells.
        values: Tokens that normalized to a number.
        subtotal: Sum of all normalized values.
    """

    model_config = ConfigDict(frozen=True)

    cells: int = 0
    tokens: int = 0
    values: int = 0
    subtotal: float = 0.0

    @property
    def rejected(self) -> int:
        """Tokens that looked numeric but failed normalization."""
        return self.tokens - self.values


def tally_page(cell_texts: Iterable[str]) -> PageTally:
    """Extract, normalize and sum every token in ``cell_texts``.

    Rejected tokens are counted but contribute nothing to the subtotal.

    Args:
        cell_texts: Raw cell texts of one page.

    Returns:
        PageTally for the page.
    """
    cells = tokens = values = 0
    subtotal = 0.0

    for text in cell_texts:
        cells += 1
        for token in iter_tokens(text):
            tokens += 1
            value = normalize(token)
            if value is None:
                continue
            values += 1
            subtotal += value

    return PageTally(cells=cells, tokens=tokens, values=values, subtotal=subtotal)


def accumulate(cell_texts: Iterable[str]) -> float:
    """Return the subtotal of all numeric values in ``cell_texts``.

    Example:
        >>> accumulate(["Revenue: $1,200", "Cost: (300)"])
        900.0
    """
    return tally_page(cell_texts).subtotal
