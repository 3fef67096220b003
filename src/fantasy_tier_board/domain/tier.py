from dataclasses import dataclass

UNASSIGNED_TIER_KEY = "tier-unranked"
TIER_KEY_PREFIX = "tier-"


def tier_key_for(number: int) -> str:
    return f"{TIER_KEY_PREFIX}{number}"


def tier_number(tier_key: str) -> int | None:
    """Return the tier number encoded in *tier_key*, or None if it is not a ranked tier key."""
    if not tier_key.startswith(TIER_KEY_PREFIX):
        return None
    suffix = tier_key[len(TIER_KEY_PREFIX) :]
    if not suffix.isdigit():
        return None
    number = int(suffix)
    return number if number >= 1 else None


@dataclass(frozen=True)
class MoveEvent:
    candidate_id: str
    source_tier_key: str
    destination_tier_key: str
    destination_index: int


@dataclass(frozen=True)
class TierView:
    tier_key: str
    title: str
    candidate_ids: tuple[str, ...]
    ranked: bool


@dataclass(frozen=True)
class ReconcileReport:
    dropped: tuple[str, ...] = ()
    duplicates: tuple[str, ...] = ()
    appended: tuple[str, ...] = ()
