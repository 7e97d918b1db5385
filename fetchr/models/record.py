"""
Serialized commander record.

This is the JSON shape written by the import job and read by the JSON
loader. Values are validated here so nothing downstream sees raw dicts.
"""

from pydantic import BaseModel, Field, field_validator

from fetchr.models.commander import (
    PARTNER_SENTINEL,
    Commander,
    FixedPartner,
    NoPartner,
    OpenPartner,
    PartnerKind,
)


class CommanderRecord(BaseModel):
    """One commander as stored in commanders.json."""

    card_name: str = Field(..., min_length=1)
    color_identity: str = ""
    cmc: int = 0
    has_partner: bool | None = None
    partner_with: str | None = None

    @field_validator("card_name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("card_name must not be blank")
        return value

    @field_validator("cmc", mode="before")
    @classmethod
    def _parse_cmc(cls, value: object) -> int:
        # Older exports wrote cmc as a string ("3" or "3.0")
        if value is None or value == "":
            return 0
        if isinstance(value, str):
            try:
                return int(float(value))
            except ValueError:
                return 0
        if isinstance(value, float):
            return int(value)
        return value  # type: ignore[return-value]

    def partner_kind(self) -> PartnerKind:
        """Map the has_partner / partner_with pair onto a partner variant."""
        partner_with = (self.partner_with or "").strip()
        if partner_with and partner_with != PARTNER_SENTINEL:
            return FixedPartner(partner_with)
        if partner_with == PARTNER_SENTINEL or self.has_partner:
            return OpenPartner()
        return NoPartner()

    def to_commander(self) -> Commander:
        return Commander(
            name=self.card_name,
            color_identity=tuple(self.color_identity),
            mana_value=max(self.cmc, 0),
            partner=self.partner_kind(),
        )

    @classmethod
    def from_commander(cls, commander: Commander) -> "CommanderRecord":
        return cls(
            card_name=commander.name,
            color_identity=commander.color_identity_string,
            cmc=commander.mana_value,
            has_partner=commander.has_partner,
            partner_with=commander.partner_with,
        )
