"""
Contains the ElectionDefinition class, the parsed form of a BLT file.
"""

from __future__ import annotations
from typing import Dict, Iterable, List, Tuple

from wright_stv.ballots import Ballot, Candidate
from wright_stv.exceptions import ConfigurationError
from wright_stv.package_types import CandidateId


class ElectionDefinition:
    """Candidates, seats, withdrawals and ballots of one election.

    The candidate index lives on the instance, so any number of definitions can be
    parsed and tallied in the same process without sharing candidate lookups.
    Treat instances as read-only; the tally engine only ever works on copies of the ballots.
    """

    def __init__(
        self,
        candidate_count: int,
        seat_count: int,
        candidates: Iterable[Candidate],
        ballots: Iterable[Ballot],
        withdrawn: Iterable[CandidateId] = (),
        title: str = "",
    ) -> None:
        """Constructor. Validates counts and ids.

        :param candidate_count: Number of candidates declared in the BLT header.
        :type candidate_count: int
        :param seat_count: Number of seats to fill.
        :type seat_count: int
        :param candidates: Candidates in id order.
        :type candidates: Iterable[Candidate]
        :param ballots: Unit ballots, weighted BLT records already expanded.
        :type ballots: Iterable[Ballot]
        :param withdrawn: Ids of withdrawn candidates, defaults to none.
        :type withdrawn: Iterable[int], optional
        :param title: Election title, defaults to "".
        :type title: str, optional
        :raises ConfigurationError: Non-positive counts, seat_count >= candidate_count, or fewer non-withdrawn candidates than seats.
        :raises ValueError: Candidate list does not match the declared count, or an id is out of range.
        """
        self.candidate_count = candidate_count
        self.seat_count = seat_count
        self.candidates: Tuple[Candidate, ...] = tuple(candidates)
        self.ballots: Tuple[Ballot, ...] = tuple(ballots)
        self.withdrawn: Tuple[CandidateId, ...] = tuple(dict.fromkeys(withdrawn))
        self.title = title

        self._candidate_index: Dict[CandidateId, Candidate] = {c.id: c for c in self.candidates}

        self._validate()

    @staticmethod
    def check_counts(candidate_count: int, seat_count: int) -> None:
        """Raise ConfigurationError unless both counts are positive and there are more candidates than seats."""
        if candidate_count <= 0:
            raise ConfigurationError(f"candidate count must be positive, got {candidate_count}")
        if seat_count <= 0:
            raise ConfigurationError(f"seat count must be positive, got {seat_count}")
        if seat_count >= candidate_count:
            raise ConfigurationError(
                f"seat count ({seat_count}) must be less than candidate count ({candidate_count})"
            )

    def _validate(self) -> None:

        self.check_counts(self.candidate_count, self.seat_count)

        if len(self.candidates) != self.candidate_count:
            raise ValueError(
                f"{len(self.candidates)} candidates given but candidate count is {self.candidate_count}"
            )

        expected_ids = list(range(1, self.candidate_count + 1))
        if [c.id for c in self.candidates] != expected_ids:
            raise ValueError("candidate ids must run 1..candidate_count in order")

        for withdrawn_id in self.withdrawn:
            if withdrawn_id not in self._candidate_index:
                raise ValueError(f"withdrawn candidate id {withdrawn_id} is out of range")

        for ballot in self.ballots:
            for c in ballot.preferences:
                if c not in self._candidate_index:
                    raise ValueError(f"ballot references unknown candidate id {c}")

        n_standing = self.candidate_count - len(self.withdrawn)
        if n_standing < self.seat_count:
            raise ConfigurationError(
                f"only {n_standing} candidates remain after withdrawals for {self.seat_count} seats"
            )

    def get_candidate(self, candidate_id: CandidateId) -> Candidate:
        """
        :raises KeyError: If the id is not a candidate of this election.
        """
        return self._candidate_index[candidate_id]

    def get_candidate_name(self, candidate_id: CandidateId) -> str:
        return self._candidate_index[candidate_id].name

    @property
    def candidate_ids(self) -> List[CandidateId]:
        return [c.id for c in self.candidates]

    @property
    def n_ballots(self) -> int:
        return len(self.ballots)

    def __repr__(self) -> str:
        return (
            f"ElectionDefinition(title={self.title!r}, candidates={self.candidate_count}, "
            f"seats={self.seat_count}, ballots={self.n_ballots}, withdrawn={list(self.withdrawn)})"
        )
