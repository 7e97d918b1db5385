"""
Commander name helpers.

Edit distance plus the small string conventions used for partner pairs,
which are written "Primary // Partner".
"""

from fetchr.models.commander import PARTNER_SENTINEL

PAIR_SEPARATOR = "//"


def levenshtein_distance(a: str, b: str) -> int:
    """
    Classic edit distance (insert, delete, substitute all cost 1).

    Compares code points as given; callers normalize case first.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + cost,  # substitution
                )
            )
        previous = current

    return previous[-1]


def format_commander_name(value: str) -> str:
    """
    Trim a name and normalize the spacing around a partner separator.

    "Thrasios //Tymna " -> "Thrasios // Tymna"
    """
    cleaned = value.strip()
    if PAIR_SEPARATOR in cleaned:
        parts = [part.strip() for part in cleaned.split(PAIR_SEPARATOR)]
        return f" {PAIR_SEPARATOR} ".join(parts)
    return cleaned


def normalize_query(value: str) -> str:
    """Lookup key for search: formatted and lowercased."""
    return format_commander_name(value).lower()


def is_partner_pair(value: str) -> bool:
    return PAIR_SEPARATOR in value


def primary_commander_name(value: str) -> str:
    """First name of a partner pair, or the value itself."""
    if is_partner_pair(value):
        return value.split(PAIR_SEPARATOR)[0].strip()
    return value


def partner_name(value: str) -> str | None:
    """Second name of a partner pair, or None."""
    if is_partner_pair(value):
        parts = value.split(PAIR_SEPARATOR)
        return parts[1].strip()
    return None


def composite_name(primary: str, partner: str | None) -> str:
    """Join a commander and optional partner into the display form."""
    if partner and partner.strip() and partner != PARTNER_SENTINEL:
        return f"{primary} {PAIR_SEPARATOR} {partner.strip()}"
    return primary


def title_cased(value: str) -> str:
    return " ".join(word[:1].upper() + word[1:].lower() for word in value.split(" ") if word)
