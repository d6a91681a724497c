"""
Ranked pairs tie breaking between candidates tied for exclusion.
"""
from typing import Iterable, List, Optional, Sequence, Tuple

import itertools
import logging

import wright_stv.util as util
from wright_stv.ballots import Ballot
from wright_stv.package_types import BallotsByCandidate, CandidateId

logger = logging.getLogger(__name__)


def pairwise_counts(a: CandidateId, b: CandidateId, ballots: Iterable[Ballot]) -> Tuple[int, int]:
    """Count ballots ranking `a` before `b` and ballots ranking `b` before `a`.

    A candidate that is ranked counts as before one that is not ranked.
    Ballots are counted, their values are ignored.

    :rtype: Tuple[int, int]
    """
    a_count = 0
    b_count = 0
    for ballot in ballots:
        outcome = util.before(a, b, ballot.preferences)
        if outcome == 1:
            a_count += 1
        elif outcome == -1:
            b_count += 1
    return a_count, b_count


def pair_table(tied: Sequence[CandidateId], ballots: Sequence[Ballot]) -> List[Tuple[Tuple[CandidateId, CandidateId], Optional[CandidateId], int]]:
    """Return ((a, b), winner, winning count) for every pair of tied candidates, sorted
    by winning count, largest first. Pairs keep the tied order among equal counts.
    The winner is None for a drawn pair.
    """
    pairs = []
    for a, b in itertools.combinations(tied, 2):
        a_count, b_count = pairwise_counts(a, b, ballots)
        if a_count > b_count:
            pairs.append(((a, b), a, a_count))
        elif b_count > a_count:
            pairs.append(((a, b), b, b_count))
        else:
            pairs.append(((a, b), None, a_count))

    pairs.sort(key=lambda p: p[2], reverse=True)
    return pairs


def ranked_pairs(tied: Sequence[CandidateId], ballots_by_candidate: BallotsByCandidate) -> CandidateId:
    """Choose the candidate to exclude from a tie at the lowest total value of votes.

    Every ballot currently assigned to any candidate takes part. The winner of the strongest
    decided pair is returned and is the one excluded. If every pair is drawn, the first
    candidate in `tied` is returned and a warning is logged.

    :param tied: Candidates tied for exclusion, at least two.
    :type tied: Sequence[int]
    :param ballots_by_candidate: Current ballot assignment of the round.
    :type ballots_by_candidate: Dict[int, List[Ballot]]
    :raises ValueError: If fewer than two candidates are given.
    :return: The candidate to exclude.
    :rtype: int
    """
    if len(tied) < 2:
        raise ValueError(f"ranked pairs needs at least two tied candidates, got {list(tied)}")

    ballots = [ballot for bucket in ballots_by_candidate.values() for ballot in bucket]

    for (a, b), winner, count in pair_table(tied, ballots):
        if winner is not None:
            logger.info(f"ranked pairs: {winner} wins {a} vs {b} with {count} ballots")
            return winner

    logger.warning(f"tie in ranked pairs between {list(tied)}, using first element among ties: {tied[0]}")
    return tied[0]
