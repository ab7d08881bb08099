"""Per-candidate vote tallies grouped by position.

Input records come straight from the Store: ORM rows or plain mappings.
Records missing a key they need are skipped rather than failing the
whole computation, and inputs are never mutated.
"""

from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

PASS_CANDIDATE_ID = "PASS"
PASS_CANDIDATE_NAME = "Passed"
UNKNOWN_POSITION_TITLE = "Unknown Position"

_ONE_DECIMAL = Decimal("0.1")


@dataclass(frozen=True)
class CandidateResult:
    """A candidate with its tally and share of the position's valid votes."""

    id: str
    name: str
    position_id: str | None
    position_title: str
    vote_count: int
    percentage: float


@dataclass(frozen=True)
class PositionSummary:
    """Vote totals for one position (the footer row of a results table)."""

    position_id: str
    position_title: str
    valid_votes: int
    abstentions: int


@dataclass(frozen=True)
class TurnoutStats:
    """Election-wide participation figures for the admin dashboard."""

    total_voters: int
    votes_cast: int
    unique_voters: int
    turnout_rate: float


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _key(value: Any) -> str | None:
    """Normalize an id (str, UUID, int) to a string key; blanks become None."""
    if value is None:
        return None
    key = str(value)
    return key or None


def percentage_of(count: int, total: int) -> float:
    """Return ``count / total * 100`` rounded half-up to one decimal, 0.0 if total is 0."""
    if total <= 0:
        return 0.0
    share = Decimal(count) * 100 / Decimal(total)
    return float(share.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def _ballot_entries(votes: Iterable[Any]) -> list[tuple[str, str]]:
    """Return ``(position_id, candidate_id)`` for every well-formed vote, PASS included."""
    entries = []
    for vote in votes:
        position_id = _key(_field(vote, "position_id"))
        candidate_id = _key(_field(vote, "candidate_id"))
        if position_id is None or candidate_id is None:
            continue
        entries.append((position_id, candidate_id))
    return entries


def _ordered_positions(positions: Iterable[Any]) -> list[tuple[str, str]]:
    """Return ``(position_id, title)`` sorted by ``order``; ties keep list order.

    A missing ``order`` sorts as 0.  Duplicate ids keep their first entry.
    """
    ranked = []
    seen: set[str] = set()
    for index, position in enumerate(positions):
        position_id = _key(_field(position, "id"))
        if position_id is None or position_id in seen:
            continue
        seen.add(position_id)
        order = _field(position, "order")
        ranked.append((order if isinstance(order, int) else 0, index, position_id, _field(position, "title") or ""))
    ranked.sort(key=lambda item: (item[0], item[1]))
    return [(position_id, title) for _, _, position_id, title in ranked]


def tabulate(
    votes: Iterable[Any],
    positions: Iterable[Any],
    candidates: Iterable[Any],
) -> list[CandidateResult]:
    """Count votes per candidate and compute per-position percentages.

    ``PASS`` votes are dropped before counting, so they count neither for a
    candidate nor toward the position's percentage denominator.  Output is
    grouped by position (``order`` ascending) and, within a position, sorted
    by descending vote count with ties in input order.  Candidates whose
    position no longer exists come last with ``"Unknown Position"``.

    Args:
        votes: Vote records (``position_id``, ``candidate_id``).
        positions: Position records (``id``, ``title``, ``order``).
        candidates: Candidate records (``id``, ``name``, ``position_id``).

    Returns:
        One ``CandidateResult`` per candidate.
    """
    valid = [(pid, cid) for pid, cid in _ballot_entries(votes) if cid != PASS_CANDIDATE_ID]
    vote_counts = Counter(valid)
    position_totals = Counter(pid for pid, _ in valid)

    ordered = _ordered_positions(positions)
    titles = dict(ordered)
    grouped: dict[str, list[CandidateResult]] = {position_id: [] for position_id, _ in ordered}
    orphans: list[CandidateResult] = []

    for candidate in candidates:
        candidate_id = _key(_field(candidate, "id"))
        if candidate_id is None:
            continue
        position_id = _key(_field(candidate, "position_id"))
        count = vote_counts.get((position_id, candidate_id), 0) if position_id else 0
        row = CandidateResult(
            id=candidate_id,
            name=_field(candidate, "name") or "",
            position_id=position_id,
            position_title=titles.get(position_id, UNKNOWN_POSITION_TITLE) if position_id else UNKNOWN_POSITION_TITLE,
            vote_count=count,
            percentage=percentage_of(count, position_totals.get(position_id, 0) if position_id else 0),
        )
        if position_id in grouped:
            grouped[position_id].append(row)
        else:
            orphans.append(row)

    results: list[CandidateResult] = []
    for position_id, _ in ordered:
        results.extend(sorted(grouped[position_id], key=lambda r: -r.vote_count))
    results.extend(sorted(orphans, key=lambda r: -r.vote_count))
    return results


def summarize_positions(votes: Iterable[Any], positions: Iterable[Any]) -> list[PositionSummary]:
    """Return valid-vote and abstention totals for each position, in ballot order."""
    valid: Counter[str] = Counter()
    abstained: Counter[str] = Counter()
    for position_id, candidate_id in _ballot_entries(votes):
        if candidate_id == PASS_CANDIDATE_ID:
            abstained[position_id] += 1
        else:
            valid[position_id] += 1
    return [
        PositionSummary(
            position_id=position_id,
            position_title=title,
            valid_votes=valid.get(position_id, 0),
            abstentions=abstained.get(position_id, 0),
        )
        for position_id, title in _ordered_positions(positions)
    ]


def compute_turnout(total_voters: int, votes: Iterable[Any]) -> TurnoutStats:
    """Compute turnout as distinct voters who cast any vote over registered voters.

    ``votes_cast`` counts every vote record, abstentions included.
    """
    votes_cast = 0
    voters: set[str] = set()
    for vote in votes:
        votes_cast += 1
        voter_id = _key(_field(vote, "voter_id"))
        if voter_id is not None:
            voters.add(voter_id)
    return TurnoutStats(
        total_voters=total_voters,
        votes_cast=votes_cast,
        unique_voters=len(voters),
        turnout_rate=percentage_of(len(voters), total_voters),
    )
