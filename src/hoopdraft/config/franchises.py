"""Static franchise table and lineup slot rules."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Sequence, Tuple


LINEUP_SLOTS: Tuple[str, ...] = ("PG", "SG", "SF", "PF", "C")
ROSTER_SIZE = 15

_SLOT_ORDER: Mapping[str, int] = {slot: index for index, slot in enumerate(LINEUP_SLOTS)}


@dataclass(frozen=True)
class FranchiseInfo:
    abbr: str
    name: str
    stats_id: str


_FRANCHISES: Dict[str, FranchiseInfo] = {
    info.abbr: info
    for info in (
        FranchiseInfo("ATL", "Atlanta Hawks", "1610612737"),
        FranchiseInfo("BOS", "Boston Celtics", "1610612738"),
        FranchiseInfo("BKN", "Brooklyn Nets", "1610612751"),
        FranchiseInfo("CHA", "Charlotte Hornets", "1610612766"),
        FranchiseInfo("CHI", "Chicago Bulls", "1610612741"),
        FranchiseInfo("CLE", "Cleveland Cavaliers", "1610612739"),
        FranchiseInfo("DAL", "Dallas Mavericks", "1610612742"),
        FranchiseInfo("DEN", "Denver Nuggets", "1610612743"),
        FranchiseInfo("DET", "Detroit Pistons", "1610612765"),
        FranchiseInfo("GSW", "Golden State Warriors", "1610612744"),
        FranchiseInfo("HOU", "Houston Rockets", "1610612745"),
        FranchiseInfo("IND", "Indiana Pacers", "1610612754"),
        FranchiseInfo("LAC", "LA Clippers", "1610612746"),
        FranchiseInfo("LAL", "Los Angeles Lakers", "1610612747"),
        FranchiseInfo("MEM", "Memphis Grizzlies", "1610612763"),
        FranchiseInfo("MIA", "Miami Heat", "1610612748"),
        FranchiseInfo("MIL", "Milwaukee Bucks", "1610612749"),
        FranchiseInfo("MIN", "Minnesota Timberwolves", "1610612750"),
        FranchiseInfo("NOP", "New Orleans Pelicans", "1610612740"),
        FranchiseInfo("NYK", "New York Knicks", "1610612752"),
        FranchiseInfo("OKC", "Oklahoma City Thunder", "1610612760"),
        FranchiseInfo("ORL", "Orlando Magic", "1610612753"),
        FranchiseInfo("PHI", "Philadelphia 76ers", "1610612755"),
        FranchiseInfo("PHX", "Phoenix Suns", "1610612756"),
        FranchiseInfo("POR", "Portland Trail Blazers", "1610612757"),
        FranchiseInfo("SAC", "Sacramento Kings", "1610612758"),
        FranchiseInfo("SAS", "San Antonio Spurs", "1610612759"),
        FranchiseInfo("TOR", "Toronto Raptors", "1610612761"),
        FranchiseInfo("UTA", "Utah Jazz", "1610612762"),
        FranchiseInfo("WAS", "Washington Wizards", "1610612764"),
    )
}


def iter_franchises() -> Iterable[FranchiseInfo]:
    """Return the franchises in table order."""

    return _FRANCHISES.values()


def franchise_abbrs() -> Tuple[str, ...]:
    return tuple(_FRANCHISES)


def get_franchise(abbr: str) -> FranchiseInfo:
    """Fetch a franchise by abbreviation, raising KeyError if missing."""

    key = abbr.strip().upper()
    if key not in _FRANCHISES:
        raise KeyError(f"No franchise configured for abbr={abbr!r}")
    return _FRANCHISES[key]


def franchise_stats_id(abbr: str) -> str:
    return get_franchise(abbr).stats_id


def franchise_logo_url(abbr: str) -> str | None:
    try:
        info = get_franchise(abbr)
    except KeyError:
        return None
    return f"https://cdn.nba.com/logos/nba/{info.stats_id}/global/L/logo.svg"


def slot_index(slot: str) -> int:
    return _SLOT_ORDER.get(slot, 99)


def order_slots(slots: Sequence[str]) -> list[str]:
    """Deduplicate slots, drop unknown tokens and sort into lineup order."""

    unique = {slot.strip().upper() for slot in slots if slot and slot.strip().upper() in _SLOT_ORDER}
    return sorted(unique, key=slot_index)
