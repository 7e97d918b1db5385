"""
Commander pick session.

One SelectionSession drives one pick interaction:

    TYPING -> pick -> (CONFIRM_FIXED_PARTNER | OFFER_OPEN_CHOICE) -> RESOLVED
                                               |
                                          answer yes
                                               v
                                        PICKING_PARTNER -> pick -> RESOLVED

cancel() from any unfinished phase ends in CANCELLED. A session is owned by
a single caller and is discarded once finished.
"""

import logging
from collections.abc import Callable
from enum import Enum

from fetchr.models.commander import Commander
from fetchr.services.names import composite_name
from fetchr.services.partner_resolver import (
    OpenChoiceRequired,
    PartnerDecision,
    SuggestFixed,
    classify,
)
from fetchr.services.search_engine import SearchEngine

logger = logging.getLogger(__name__)


class SessionPhase(str, Enum):
    """Where a pick session currently is."""

    TYPING = "typing"
    CONFIRM_FIXED_PARTNER = "confirm_fixed_partner"
    OFFER_OPEN_CHOICE = "offer_open_choice"
    PICKING_PARTNER = "picking_partner"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


TYPING_PHASES = frozenset({SessionPhase.TYPING, SessionPhase.PICKING_PARTNER})
PROMPT_PHASES = frozenset({SessionPhase.CONFIRM_FIXED_PARTNER, SessionPhase.OFFER_OPEN_CHOICE})
FINISHED_PHASES = frozenset({SessionPhase.RESOLVED, SessionPhase.CANCELLED})


class SessionStateError(Exception):
    """Raised when an operation is not allowed in the session's current phase."""

    def __init__(self, operation: str, phase: SessionPhase):
        self.operation = operation
        self.phase = phase
        super().__init__(f"Cannot {operation} while session is {phase.value}")


class SelectionSession:
    """State of one commander pick, from first keystroke to final name."""

    def __init__(self, engine: SearchEngine) -> None:
        self.engine = engine
        self.phase = SessionPhase.TYPING
        self.query = ""
        self.candidates: tuple[Commander, ...] = ()
        self.commander_name: str | None = None
        self.partner_name: str | None = None
        self.suggested_partner: str | None = None
        self._observers: list[Callable[["SelectionSession"], None]] = []

    # --- Observation ---

    def subscribe(self, callback: Callable[["SelectionSession"], None]) -> None:
        """Call `callback(session)` after every state change."""
        self._observers.append(callback)

    def _changed(self) -> None:
        for callback in list(self._observers):
            callback(self)

    @property
    def filtered_names(self) -> list[str]:
        return [c.name for c in self.candidates]

    @property
    def is_finished(self) -> bool:
        return self.phase in FINISHED_PHASES

    @property
    def result(self) -> str | None:
        """Final "Commander" or "Commander // Partner", once resolved."""
        if self.phase is not SessionPhase.RESOLVED or self.commander_name is None:
            return None
        return composite_name(self.commander_name, self.partner_name)

    # --- Typing ---

    def append_char(self, char: str) -> tuple[Commander, ...]:
        self._require(TYPING_PHASES, "type")
        self.query += char
        return self._refilter()

    def remove_last_char(self) -> tuple[Commander, ...]:
        self._require(TYPING_PHASES, "delete")
        if not self.query:
            return self.candidates
        self.query = self.query[:-1]
        return self._refilter()

    def clear_query(self) -> tuple[Commander, ...]:
        self._require(TYPING_PHASES, "clear")
        self.query = ""
        return self._refilter()

    def _refilter(self) -> tuple[Commander, ...]:
        if self.phase is SessionPhase.PICKING_PARTNER:
            # A commander never partners with itself
            self.candidates = tuple(
                c
                for c in self.engine.refilter(self.query, partner_only=True)
                if c.name != self.commander_name
            )
        else:
            self.candidates = self.engine.refilter(self.query)
        self._changed()
        return self.candidates

    # --- Picking ---

    def pick(self, name: str | None = None) -> SessionPhase:
        """
        Choose a commander (or partner, in PICKING_PARTNER).

        With no name, the single remaining candidate is picked. A partner must
        be another partner-eligible commander.
        """
        self._require(TYPING_PHASES, "pick")

        if name is None:
            if len(self.candidates) != 1:
                raise SessionStateError("pick without a single candidate", self.phase)
            name = self.candidates[0].name

        if self.phase is SessionPhase.PICKING_PARTNER:
            if not self._is_partner_candidate(name):
                raise SessionStateError(f"pick {name!r} as partner", self.phase)
            self.partner_name = name
            self._resolve()
            return self.phase

        self.commander_name = name
        record = self.engine.store.record_by_name(name)
        if record is None:
            logger.warning("Picked unknown commander %r, finishing without partner", name)
        self._apply_decision(classify(record))
        return self.phase

    def _is_partner_candidate(self, name: str) -> bool:
        if name == self.commander_name:
            return False
        group = self.engine.store.partner_eligible_index().get(name[:1].upper(), ())
        return name in group

    def _apply_decision(self, decision: PartnerDecision) -> None:
        if isinstance(decision, SuggestFixed):
            self.suggested_partner = decision.partner_name
            self.phase = SessionPhase.CONFIRM_FIXED_PARTNER
            self._changed()
        elif isinstance(decision, OpenChoiceRequired):
            self.phase = SessionPhase.OFFER_OPEN_CHOICE
            self._changed()
        else:
            self._resolve()

    def answer(self, accept: bool) -> SessionPhase:
        """Reply yes/no to the partner prompt currently shown."""
        self._require(PROMPT_PHASES, "answer")

        if self.phase is SessionPhase.CONFIRM_FIXED_PARTNER:
            if accept:
                self.partner_name = self.suggested_partner
            self._resolve()
        elif accept:
            self.phase = SessionPhase.PICKING_PARTNER
            self.query = ""
            self.candidates = ()
            self._changed()
        else:
            self._resolve()
        return self.phase

    def cancel(self) -> None:
        """Abandon the pick and clear all state."""
        self._require(TYPING_PHASES | PROMPT_PHASES, "cancel")
        self.query = ""
        self.candidates = ()
        self.commander_name = None
        self.partner_name = None
        self.suggested_partner = None
        self.phase = SessionPhase.CANCELLED
        self._changed()

    def _resolve(self) -> None:
        self.phase = SessionPhase.RESOLVED
        self.candidates = ()
        logger.info("Pick resolved: %s", self.result)
        self._changed()

    def _require(self, allowed: frozenset[SessionPhase], operation: str) -> None:
        if self.phase not in allowed:
            raise SessionStateError(operation, self.phase)
