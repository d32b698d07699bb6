"""
Output rendering policies for numbers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class StyleKind(Enum):
    AUTO = "auto"
    EXACT_FRACTION = "fraction"
    DECIMAL_PLACES = "dp"
    SCIENTIFIC = "scientific"


@dataclass(frozen=True)
class FormattingStyle:
    """
    How a number is rendered.

    - AUTO: exact values as integers, terminating decimals or fractions;
      approximate values as a bounded number of decimal places
    - EXACT_FRACTION: always ``n/d``, fails for approximate values
    - DECIMAL_PLACES: exactly ``places`` digits after the point
    - SCIENTIFIC: ``d.ddd…eN``
    """
    kind: StyleKind = StyleKind.AUTO
    places: Optional[int] = None

    def __post_init__(self):
        if (self.kind == StyleKind.DECIMAL_PLACES) != (self.places is not None):
            raise ValueError("only the decimal places style carries a place count")
        if self.places is not None and self.places < 0:
            raise ValueError("decimal places must not be negative")

    @classmethod
    def decimal_places(cls, places: int) -> "FormattingStyle":
        return cls(StyleKind.DECIMAL_PLACES, places)

    def __str__(self) -> str:
        if self.kind == StyleKind.DECIMAL_PLACES:
            return f"{self.places} dp"
        return self.kind.value


AUTO = FormattingStyle(StyleKind.AUTO)
EXACT_FRACTION = FormattingStyle(StyleKind.EXACT_FRACTION)
SCIENTIFIC = FormattingStyle(StyleKind.SCIENTIFIC)
