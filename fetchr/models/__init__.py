from fetchr.models.commander import (
    PARTNER_SENTINEL,
    Commander,
    CommanderStatistics,
    FixedPartner,
    NoPartner,
    OpenPartner,
    PartnerKind,
)
from fetchr.models.record import CommanderRecord

__all__ = [
    "PARTNER_SENTINEL",
    "Commander",
    "CommanderRecord",
    "CommanderStatistics",
    "FixedPartner",
    "NoPartner",
    "OpenPartner",
    "PartnerKind",
]
