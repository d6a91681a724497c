"""
Wright System STV tally.

Each round starts over from the original ballots with every excluded candidate
removed, so no fractional value carries across rounds.
"""
from typing import List, Sequence, Set

import decimal
import logging

from wright_stv.ballots import Ballot, get_ctvv
from wright_stv.election import ElectionDefinition
from wright_stv.package_types import BallotsByCandidate, CandidateId
from wright_stv.stv.results import Round, TallyResult
from wright_stv.stv.tiebreak import ranked_pairs

logger = logging.getLogger(__name__)

decimal.getcontext().prec = 30


class WrightSTV:
    """Tallies one ElectionDefinition. The definition is never modified."""

    def __init__(self, definition: ElectionDefinition) -> None:
        self._definition = definition
        self._seat_count = definition.seat_count
        self._result = None

    @staticmethod
    def hagenbach_bischoff_quota(total_vote: int, seat_count: int) -> decimal.Decimal:
        """total_vote / (seats + 1), unrounded."""
        return decimal.Decimal(total_vote) / decimal.Decimal(seat_count + 1)

    def tally(self) -> TallyResult:
        """Run the count to completion. Repeated calls return the same result.

        :raises RuntimeError: If the count does not finish within one round per candidate.
        :rtype: TallyResult
        """
        if self._result is not None:
            return self._result

        result = TallyResult(self._definition)
        excluded = list(self._definition.withdrawn)
        for candidate_id in excluded:
            result.declare_excluded(candidate_id)

        logger.info(
            f"tallying {self._definition.title!r}: {self._definition.candidate_count} candidates, "
            f"{self._seat_count} seats, {self._definition.n_ballots} ballots"
        )

        # every round that does not finish excludes at least one candidate
        for _ in range(self._definition.candidate_count):
            if self._run_round(result, excluded):
                break
        else:
            raise RuntimeError("tally did not finish, this should never happen")

        self._result = result
        return result

    def _non_exhausted_ballots(self, excluded: Set[CandidateId]) -> List[Ballot]:
        return [ballot.copy() for ballot in self._definition.ballots if ballot.has_preference(excluded)]

    @staticmethod
    def _assign_ballots(ballots: Sequence[Ballot], excluded: Set[CandidateId], continuing: Sequence[CandidateId]) -> BallotsByCandidate:
        # candidates appear in order of their first ballot; the ones without ballots come last
        ballots_by_candidate = {}
        for ballot in ballots:
            ballots_by_candidate.setdefault(ballot.first_preference(excluded), []).append(ballot)
        for candidate_id in continuing:
            ballots_by_candidate.setdefault(candidate_id, [])
        return ballots_by_candidate

    @staticmethod
    def _sort_by_ctvv(candidates: List[CandidateId], ballots_by_candidate: BallotsByCandidate) -> None:
        candidates.sort(key=lambda c: get_ctvv(ballots_by_candidate[c]), reverse=True)

    def _run_round(self, result: TallyResult, excluded: List[CandidateId]) -> bool:
        """Run one round. Newly excluded candidates are appended to `excluded`.

        :return: True if the count is complete.
        :rtype: bool
        """
        excluded_set = set(excluded)
        continuing = [c for c in self._definition.candidate_ids if c not in excluded_set]
        exhausted: List[Ballot] = []

        ballots = self._non_exhausted_ballots(excluded_set)
        ballots_by_candidate = self._assign_ballots(ballots, excluded_set, continuing)

        total_vote = len(ballots)
        quota = self.hagenbach_bischoff_quota(total_vote, self._seat_count)
        current_round = result.start_new_round(quota, total_vote)
        logger.info(
            f"round {current_round.number}: {len(continuing)} continuing candidates, "
            f"total vote {total_vote}, quota {quota:.3f}"
        )

        # with no votes at all nobody can be provisional
        provisionals = []
        if total_vote > 0:
            provisionals = [c for c, bucket in ballots_by_candidate.items() if get_ctvv(bucket) >= quota]
        result.log_subround(ballots_by_candidate, exhausted, excluded_ids=excluded)

        if len(provisionals) == self._seat_count:
            self._declare_elected(result, current_round, provisionals, ballots_by_candidate)
            return True

        if len(continuing) <= self._seat_count:
            self._declare_elected(result, current_round, continuing, ballots_by_candidate)
            return True

        # surplus transfers
        while len(provisionals) < self._seat_count and self._has_surplus(provisionals, ballots_by_candidate, quota):
            self._sort_by_ctvv(provisionals, ballots_by_candidate)
            newly_provisional = self._distribute_surpluses(
                result, provisionals, continuing, ballots_by_candidate, exhausted, quota
            )
            provisionals.extend(newly_provisional)

            if len(provisionals) == self._seat_count:
                self._sort_by_ctvv(newly_provisional, ballots_by_candidate)
                for candidate_id in newly_provisional:
                    result.log_subround(ballots_by_candidate, exhausted, elected=candidate_id)
                self._declare_elected(result, current_round, provisionals, ballots_by_candidate)
                return True

        # exclusion
        if len(provisionals) < self._seat_count:
            pool = [c for c in ballots_by_candidate if c not in provisionals]
            newly_excluded = self._exclude(pool, ballots_by_candidate, len(continuing))
        else:
            pool = [c for c in ballots_by_candidate if c in provisionals and c not in current_round.transferred]
            logger.warning(
                f"round {current_round.number}: {len(provisionals)} candidates reached quota for "
                f"{self._seat_count} seats, excluding the lowest"
            )
            newly_excluded = [self._exclude_lowest(pool, ballots_by_candidate)]

        for candidate_id in newly_excluded:
            logger.info(f"excluded: {self._definition.get_candidate_name(candidate_id)}")
            excluded.append(candidate_id)
            result.declare_excluded(candidate_id)

        remaining = [c for c in continuing if c not in newly_excluded]
        if len(remaining) > self._seat_count:
            return False

        for candidate_id in newly_excluded:
            result.log_subround(ballots_by_candidate, exhausted, excluded_ids=(candidate_id,))
        for candidate_id in remaining:
            if candidate_id not in provisionals:
                result.log_subround(ballots_by_candidate, exhausted, elected=candidate_id)
        self._declare_elected(result, current_round, remaining, ballots_by_candidate)
        return True

    @staticmethod
    def _has_surplus(provisionals: Sequence[CandidateId], ballots_by_candidate: BallotsByCandidate, quota: decimal.Decimal) -> bool:
        return any(get_ctvv(ballots_by_candidate[c]) > quota for c in provisionals)

    def _distribute_surpluses(
        self,
        result: TallyResult,
        provisionals: Sequence[CandidateId],
        continuing: Sequence[CandidateId],
        ballots_by_candidate: BallotsByCandidate,
        exhausted: List[Ballot],
        quota: decimal.Decimal,
    ) -> List[CandidateId]:
        """Transfer the surplus of every provisional above quota, largest first.

        Ballots move to their next non-provisional continuing preference or to `exhausted`.

        :return: Non-provisional candidates that reached quota, in ballot assignment order.
        :rtype: List[int]
        """
        receivers = {c for c in continuing if c not in provisionals}

        for candidate_id in provisionals:
            bucket = ballots_by_candidate[candidate_id]
            ctvv = get_ctvv(bucket)
            if ctvv <= quota:
                continue

            transfer_value = (ctvv - quota) / ctvv
            logger.info(
                f"transferring surplus of {self._definition.get_candidate_name(candidate_id)}: "
                f"{ctvv - quota:.3f} at transfer value {transfer_value:.5f}"
            )

            for ballot in bucket:
                ballot.scale(transfer_value)
                next_choice = ballot.next_preference(candidate_id, receivers)
                if next_choice is None:
                    exhausted.append(ballot)
                else:
                    ballots_by_candidate[next_choice].append(ballot)
            bucket.clear()

            result.log_subround(ballots_by_candidate, exhausted, transferred_provisional=candidate_id)

        return [
            c for c, bucket in ballots_by_candidate.items()
            if c in receivers and get_ctvv(bucket) >= quota
        ]

    def _exclude(self, pool: Sequence[CandidateId], ballots_by_candidate: BallotsByCandidate, n_continuing: int) -> List[CandidateId]:
        """Pick the candidates to exclude from `pool`: all those with no votes, else the lowest.

        Candidates with no votes are excluded together, but never so many that fewer
        candidates than seats would remain.
        """
        zero = [c for c in pool if get_ctvv(ballots_by_candidate[c]) == 0]
        if zero:
            room = n_continuing - self._seat_count
            if len(zero) > room:
                logger.info(f"{len(zero)} candidates without votes, excluding the first {room}")
            return zero[:room]
        return [self._exclude_lowest(pool, ballots_by_candidate)]

    @staticmethod
    def _exclude_lowest(pool: Sequence[CandidateId], ballots_by_candidate: BallotsByCandidate) -> CandidateId:
        """Exclude the candidate with the lowest total, breaking ties with ranked pairs.

        Tied candidates are taken from the bottom of `pool` sorted by total, largest first,
        so among equal totals the candidate met last in `pool` comes first.
        """
        ctvvs = {c: get_ctvv(ballots_by_candidate[c]) for c in pool}
        ranked = sorted(pool, key=lambda c: ctvvs[c], reverse=True)
        lowest = ctvvs[ranked[-1]]
        tied = [c for c in reversed(ranked) if ctvvs[c] == lowest]
        if len(tied) == 1:
            return tied[0]
        return ranked_pairs(tied, ballots_by_candidate)

    def _declare_elected(
        self,
        result: TallyResult,
        current_round: Round,
        candidates: Sequence[CandidateId],
        ballots_by_candidate: BallotsByCandidate,
    ) -> None:
        # transferred candidates in transfer order, then the rest by total, largest first
        transferred = [c for c in current_round.transferred if c in candidates]
        rest = [c for c in candidates if c not in transferred]
        self._sort_by_ctvv(rest, ballots_by_candidate)
        for candidate_id in transferred + rest:
            result.declare_elected(candidate_id)


def tally(definition: ElectionDefinition) -> TallyResult:
    """Tally an election with the Wright System.

    :param definition: Parsed election.
    :type definition: ElectionDefinition
    :rtype: TallyResult
    """
    return WrightSTV(definition).tally()
