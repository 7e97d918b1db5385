"""
Commander record store.

Holds the commander set for one load together with its lookup indexes.
Every load builds a fresh immutable snapshot and swaps it in with a single
assignment, so readers always see one complete dataset.
"""

import logging
import random
from collections import defaultdict
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from fetchr.models.commander import Commander, CommanderStatistics
from fetchr.services.names import format_commander_name

logger = logging.getLogger(__name__)

NameIndex = Mapping[str, tuple[str, ...]]


def sort_key(name: str) -> tuple[str, str]:
    """Case-insensitive ordering, ties broken by the exact name."""
    return (name.casefold(), name)


def group_by_letter(names: Iterable[str]) -> NameIndex:
    """
    Group names by uppercased first character, each group sorted.

    Example: {"A": ("Animar, Soul of Elements", "Atraxa, Praetors' Voice")}
    """
    groups: dict[str, list[str]] = defaultdict(list)
    for name in names:
        if not name:
            continue
        groups[name[0].upper()].append(name)

    return MappingProxyType(
        {letter: tuple(sorted(group, key=sort_key)) for letter, group in groups.items()}
    )


@dataclass(frozen=True)
class _Snapshot:
    by_name: Mapping[str, Commander]
    letters: NameIndex
    partner_letters: NameIndex
    by_color: Mapping[str, tuple[Commander, ...]]
    by_mana_value: Mapping[int, tuple[Commander, ...]]
    version: int

    @classmethod
    def build(cls, commanders: Iterable[Commander], version: int) -> "_Snapshot":
        by_name: dict[str, Commander] = {}
        for commander in commanders:
            # Later records replace earlier ones with the same name
            by_name[commander.name] = commander

        ordered = sorted(by_name.values(), key=lambda c: sort_key(c.name))

        by_color: dict[str, list[Commander]] = defaultdict(list)
        by_mana_value: dict[int, list[Commander]] = defaultdict(list)
        for commander in ordered:
            by_color[commander.color_identity_string].append(commander)
            by_mana_value[commander.mana_value].append(commander)

        return cls(
            by_name=MappingProxyType(by_name),
            letters=group_by_letter(by_name),
            partner_letters=group_by_letter(c.name for c in ordered if c.has_partner),
            by_color=MappingProxyType({k: tuple(v) for k, v in by_color.items()}),
            by_mana_value=MappingProxyType({k: tuple(v) for k, v in by_mana_value.items()}),
            version=version,
        )


class RecordStore:
    """
    The loaded commander dataset and its derived indexes.

    Consumers only get read-only views; the indexes change only via load().
    """

    def __init__(self, commanders: Iterable[Commander] | None = None) -> None:
        self._snapshot = _Snapshot.build((), version=0)
        self._listeners: list[Callable[[], None]] = []
        if commanders is not None:
            self.load(commanders)

    def load(self, commanders: Iterable[Commander]) -> None:
        """Replace the whole dataset and rebuild every index."""
        snapshot = _Snapshot.build(commanders, version=self._snapshot.version + 1)
        self._snapshot = snapshot
        logger.info(
            "Loaded %d commanders (%d with partner), version %d",
            len(snapshot.by_name),
            self.total_with_partner(),
            snapshot.version,
        )
        for listener in list(self._listeners):
            listener()

    def clear(self) -> None:
        """Reset to the empty dataset."""
        self.load(())

    def on_reload(self, listener: Callable[[], None]) -> None:
        """Register a callback run after every load (used to drop caches)."""
        self._listeners.append(listener)

    @property
    def version(self) -> int:
        """Number of loads so far; 0 means never loaded."""
        return self._snapshot.version

    @property
    def is_loaded(self) -> bool:
        return self._snapshot.version > 0

    def __len__(self) -> int:
        return len(self._snapshot.by_name)

    # --- Indexes ---

    def letters_index(self) -> NameIndex:
        return self._snapshot.letters

    def partner_eligible_index(self) -> NameIndex:
        return self._snapshot.partner_letters

    def partner_eligible_names(self) -> tuple[str, ...]:
        """Names of every commander with a partner ability, grouped by letter."""
        index = self._snapshot.partner_letters
        return tuple(name for letter in sorted(index) for name in index[letter])

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(self._snapshot.by_name, key=sort_key))

    def records(self) -> tuple[Commander, ...]:
        snapshot = self._snapshot
        return tuple(snapshot.by_name[name] for name in sorted(snapshot.by_name, key=sort_key))

    # --- Lookups ---

    def record_by_name(self, name: str) -> Commander | None:
        return self._snapshot.by_name.get(name)

    def contains(self, value: str) -> bool:
        """True if any known name and the value contain one another (any case)."""
        cleaned = format_commander_name(value).casefold()
        if not cleaned:
            return False
        return any(
            cleaned in name.casefold() or name.casefold() in cleaned
            for name in self._snapshot.by_name
        )

    def commanders_by_color(self, identity: str) -> tuple[Commander, ...]:
        """Commanders whose color identity string is exactly `identity` (e.g. "WU")."""
        return self._snapshot.by_color.get(identity.upper(), ())

    def commanders_by_mana_value(self, mana_value: int) -> tuple[Commander, ...]:
        return self._snapshot.by_mana_value.get(mana_value, ())

    def random_commanders(self, count: int = 5, rng: random.Random | None = None) -> list[Commander]:
        records = list(self._snapshot.by_name.values())
        rng = rng or random.Random()
        return rng.sample(records, min(count, len(records)))

    # --- Statistics ---

    def color_identities(self) -> list[str]:
        return sorted(self._snapshot.by_color)

    def total_with_partner(self) -> int:
        return sum(1 for c in self._snapshot.by_name.values() if c.has_partner)

    def statistics(self) -> CommanderStatistics:
        commanders = list(self._snapshot.by_name.values())
        total = len(commanders)
        return CommanderStatistics(
            total_commanders=total,
            unique_colors=len(self._snapshot.by_color),
            average_mana_value=sum(c.mana_value for c in commanders) / max(1, total),
            colorless_commanders=sum(1 for c in commanders if not c.color_identity),
            multicolor_commanders=sum(1 for c in commanders if len(c.color_identity) > 1),
        )
