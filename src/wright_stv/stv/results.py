"""
Contains the round by round result log written by the tally engine.
"""
from __future__ import annotations
from typing import Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple

import decimal
import logging
import types

from wright_stv.ballots import Ballot, get_ctvv
from wright_stv.election import ElectionDefinition
from wright_stv.package_types import BallotsByCandidate, CandidateId
from wright_stv.stv.tables import TallyResult_tables

logger = logging.getLogger(__name__)

# key used for the exhausted pile by Subround.as_dict
EXHAUSTED_ID = 0


class Subround(NamedTuple):
    """Snapshot of every candidate's total value of votes at one point of a round.

    `transferred_provisional` is set when the snapshot follows a surplus transfer from that
    candidate, `excluded_ids` on the first subround of a round (every excluded candidate so
    far) and on final exclusion entries (one candidate each), and `elected` on the entries
    that close a count.

    Candidates whose surplus was transferred in the round are reported at the quota. A
    candidate named by `elected` keeps the total it actually holds, above the quota when
    promoted and possibly below it when elected because only the seats' worth of candidates
    remain, so candidate totals plus `exhausted` always add up to the round's total vote.
    """
    ctvv: Mapping[CandidateId, decimal.Decimal]
    exhausted: decimal.Decimal
    transferred_provisional: Optional[CandidateId] = None
    excluded_ids: Optional[Tuple[CandidateId, ...]] = None
    elected: Optional[CandidateId] = None

    def total(self) -> decimal.Decimal:
        """Sum of all candidate totals plus the exhausted pile."""
        return sum(self.ctvv.values(), decimal.Decimal(0)) + self.exhausted

    def as_dict(self) -> Dict[CandidateId, decimal.Decimal]:
        """Candidate totals with the exhausted pile under key `EXHAUSTED_ID` (0)."""
        d = dict(self.ctvv)
        d[EXHAUSTED_ID] = self.exhausted
        return d


class Round:
    """One quota computation against a fixed set of continuing candidates."""

    def __init__(self, number: int, quota: decimal.Decimal, total_vote: int) -> None:
        self.number = number
        self.quota = quota
        self.total_vote = total_vote
        self.subrounds: List[Subround] = []
        # provisionals whose surplus has been transferred this round, in transfer order
        self.transferred: List[CandidateId] = []

    @property
    def n_subrounds(self) -> int:
        return len(self.subrounds)

    def __repr__(self) -> str:
        return f"Round({self.number}, quota={self.quota}, subrounds={self.n_subrounds})"


class TallyResult(TallyResult_tables):
    """Accumulates rounds and subrounds for one tally of an ElectionDefinition.

    Only the tally engine appends to it; consumers should treat it as read-only.
    """

    def __init__(self, definition: ElectionDefinition) -> None:
        self.definition = definition
        self.rounds: List[Round] = []
        self.elected: List[CandidateId] = []

        self._round_elected: Dict[CandidateId, int] = {}
        self._round_excluded: Dict[CandidateId, int] = {}

    def start_new_round(self, quota: decimal.Decimal, total_vote: int) -> Round:
        new_round = Round(len(self.rounds) + 1, quota, total_vote)
        self.rounds.append(new_round)
        return new_round

    def get_current_round(self) -> Round:
        return self.rounds[-1]

    def log_subround(
        self,
        ballots_by_candidate: BallotsByCandidate,
        exhausted: Sequence[Ballot],
        transferred_provisional: Optional[CandidateId] = None,
        excluded_ids: Optional[Iterable[CandidateId]] = None,
        elected: Optional[CandidateId] = None,
    ) -> Subround:
        """Append a snapshot of the current ballot assignment to the current round.

        Candidates whose surplus was transferred this round are reported at the quota they keep.

        :param ballots_by_candidate: Ballots currently assigned to each candidate.
        :type ballots_by_candidate: Dict[int, List[Ballot]]
        :param exhausted: Ballots in the exhausted pile.
        :type exhausted: Sequence[Ballot]
        :param transferred_provisional: Candidate whose surplus was just transferred, defaults to None
        :type transferred_provisional: Optional[int], optional
        :param excluded_ids: Excluded candidates to record, defaults to None
        :type excluded_ids: Optional[Iterable[int]], optional
        :param elected: Candidate declared elected by this entry, defaults to None
        :type elected: Optional[int], optional
        :return: The appended snapshot.
        :rtype: Subround
        """
        current_round = self.get_current_round()
        if transferred_provisional is not None:
            current_round.transferred.append(transferred_provisional)

        ctvv = {}
        for candidate in self.definition.candidates:
            ctvv[candidate.id] = get_ctvv(ballots_by_candidate.get(candidate.id, ()))
        for candidate_id in current_round.transferred:
            ctvv[candidate_id] = current_round.quota

        subround = Subround(
            ctvv=types.MappingProxyType(ctvv),
            exhausted=get_ctvv(exhausted),
            transferred_provisional=transferred_provisional,
            excluded_ids=tuple(excluded_ids) if excluded_ids is not None else None,
            elected=elected,
        )
        current_round.subrounds.append(subround)

        logger.debug(
            f"round {current_round.number}.{current_round.n_subrounds}: "
            + ", ".join(f"{c}={v:.3f}" for c, v in ctvv.items())
            + f", exhausted={subround.exhausted:.3f}"
        )
        return subround

    def declare_elected(self, candidate_id: CandidateId) -> None:
        if candidate_id in self._round_elected:
            raise RuntimeError(f"candidate {candidate_id} already elected")
        self.elected.append(candidate_id)
        self._round_elected[candidate_id] = len(self.rounds)
        logger.info(f"elected: {self.definition.get_candidate_name(candidate_id)}")

    def declare_excluded(self, candidate_id: CandidateId) -> None:
        # withdrawn candidates are excluded before the first round
        self._round_excluded[candidate_id] = len(self.rounds)

    def n_rounds(self) -> int:
        return len(self.rounds)

    def get_round(self, round_num: int) -> Round:
        """
        :param round_num: 1-based round number.
        :type round_num: int
        """
        return self.rounds[round_num - 1]

    def get_round_tally_dict(self, round_num: int, subround_num: int = -1) -> Dict[CandidateId, decimal.Decimal]:
        """Return candidate totals for a subround, the last one of the round by default.

        :param round_num: 1-based round number.
        :type round_num: int
        :param subround_num: 1-based subround number, or -1 for the last subround, defaults to -1
        :type subround_num: int, optional
        :return: Candidate id to total value of votes.
        :rtype: Dict[int, decimal.Decimal]
        """
        subrounds = self.get_round(round_num).subrounds
        subround = subrounds[-1] if subround_num == -1 else subrounds[subround_num - 1]
        return dict(subround.ctvv)

    def get_candidate_outcomes(self) -> List[Dict]:
        """Return one dictionary per candidate with keys id, name, round_elected and round_excluded.
        Round values are round numbers or None; withdrawn candidates have round_excluded 0.

        :rtype: List[Dict]
        """
        return [
            {
                "id": candidate.id,
                "name": candidate.name,
                "round_elected": self._round_elected.get(candidate.id),
                "round_excluded": self._round_excluded.get(candidate.id),
            }
            for candidate in self.definition.candidates
        ]

    def elected_names(self) -> List[str]:
        return [self.definition.get_candidate_name(c) for c in self.elected]
