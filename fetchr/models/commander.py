"""
Commander record model.

A Commander is one legal commander card as the picker sees it: its name,
color identity, mana value and what kind of partner ability it carries.
"""

from dataclasses import dataclass, field

# Oracle text "Partner" without a named partner is stored as this literal
PARTNER_SENTINEL = "partner"

COLOR_NAMES = {
    "W": "White",
    "U": "Blue",
    "B": "Black",
    "R": "Red",
    "G": "Green",
}


@dataclass(frozen=True, slots=True)
class NoPartner:
    """The commander has no partner ability."""


@dataclass(frozen=True, slots=True)
class OpenPartner:
    """Generic "Partner": may pair with any other partner commander."""


@dataclass(frozen=True, slots=True)
class FixedPartner:
    """
    "Partner with <name>": pairs with one specific commander.

    The partner name is not checked against the dataset here; it may refer to
    a card that is loaded later in the same import.
    """

    name: str


PartnerKind = NoPartner | OpenPartner | FixedPartner


def _normalize_colors(symbols: str | tuple[str, ...] | list[str]) -> tuple[str, ...]:
    seen: list[str] = []
    for symbol in symbols:
        symbol = symbol.strip().upper()
        if not symbol:
            continue
        if symbol not in COLOR_NAMES:
            raise ValueError(f"Invalid color symbol: {symbol!r}")
        if symbol not in seen:
            seen.append(symbol)
    return tuple(seen)


@dataclass(frozen=True, slots=True)
class Commander:
    """
    A commander card record.

    Attributes:
        name: Card name, unique within a dataset (front face for DFCs)
        color_identity: Ordered color symbols, e.g. ("W", "U")
        mana_value: Converted mana cost
        partner: NoPartner, OpenPartner or FixedPartner(name)
    """

    name: str
    color_identity: tuple[str, ...] = ()
    mana_value: int = 0
    partner: PartnerKind = field(default_factory=NoPartner)

    def __post_init__(self) -> None:
        name = self.name.strip()
        if not name:
            raise ValueError("Commander name must not be empty")
        if self.mana_value < 0:
            raise ValueError(f"Mana value must not be negative: {self.mana_value}")
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "color_identity", _normalize_colors(self.color_identity))

    @property
    def has_partner(self) -> bool:
        return not isinstance(self.partner, NoPartner)

    @property
    def partner_with(self) -> str | None:
        """Fixed partner name, the sentinel for open partners, else None."""
        if isinstance(self.partner, FixedPartner):
            return self.partner.name
        if isinstance(self.partner, OpenPartner):
            return PARTNER_SENTINEL
        return None

    @property
    def color_identity_string(self) -> str:
        return "".join(self.color_identity)

    @property
    def color_description(self) -> str:
        """Human readable colors: "Colorless", "Green" or "White, Blue"."""
        names = [COLOR_NAMES[c] for c in self.color_identity]
        if not names:
            return "Colorless"
        return ", ".join(names)


@dataclass(frozen=True)
class CommanderStatistics:
    """Summary numbers over a loaded commander set."""

    total_commanders: int
    unique_colors: int
    average_mana_value: float
    colorless_commanders: int
    multicolor_commanders: int

    @property
    def formatted_average_mana_value(self) -> str:
        return f"{self.average_mana_value:.1f}"

    @property
    def multicolor_percentage(self) -> float:
        if self.total_commanders == 0:
            return 0.0
        return self.multicolor_commanders / self.total_commanders * 100
