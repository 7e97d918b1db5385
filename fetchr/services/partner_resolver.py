"""
Partner resolution.

Decides what the picker asks after a commander is chosen:

- "Partner with <name>" cards suggest that one partner (yes/no)
- generic "Partner" cards offer an open choice among partner commanders
- everything else needs no second pick
"""

from dataclasses import dataclass

from fetchr.models.commander import (
    PARTNER_SENTINEL,
    Commander,
    FixedPartner,
    OpenPartner,
)
from fetchr.services.record_store import RecordStore


@dataclass(frozen=True, slots=True)
class NoPartnerNeeded:
    """Finish with the primary commander alone."""


@dataclass(frozen=True, slots=True)
class SuggestFixed:
    """Ask whether to add this specific partner."""

    partner_name: str


@dataclass(frozen=True, slots=True)
class OpenChoiceRequired:
    """Ask whether to pick any other partner commander."""


PartnerDecision = NoPartnerNeeded | SuggestFixed | OpenChoiceRequired


def classify(record: Commander | None) -> PartnerDecision:
    """
    Classify a chosen commander by its partner ability.

    A missing record (name not in the dataset) needs no partner.
    """
    if record is None:
        return NoPartnerNeeded()

    partner = record.partner
    if isinstance(partner, FixedPartner):
        if partner.name != PARTNER_SENTINEL:
            return SuggestFixed(partner.name)
        return OpenChoiceRequired()
    if isinstance(partner, OpenPartner):
        return OpenChoiceRequired()
    return NoPartnerNeeded()


def partner_options(store: RecordStore, name: str) -> tuple[str, ...]:
    """
    Names the commander called `name` may pair with.

    Fixed partners give their one named partner; open partners give every
    other open-partner commander. Unknown names and non-partners give ().
    """
    decision = classify(store.record_by_name(name))

    if isinstance(decision, SuggestFixed):
        return (decision.partner_name,)
    if isinstance(decision, OpenChoiceRequired):
        return tuple(
            candidate
            for candidate in store.partner_eligible_names()
            if candidate != name
            and isinstance(classify(store.record_by_name(candidate)), OpenChoiceRequired)
        )
    return ()
