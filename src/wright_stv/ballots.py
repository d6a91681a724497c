"""
Contains the Candidate and Ballot classes.
"""

from __future__ import annotations
from typing import Collection, Iterable, Optional, Sequence

import decimal

from wright_stv.package_types import CandidateId

decimal.getcontext().prec = 30


class Candidate:
    """An election candidate. Identity is the BLT id, which never changes during a count."""

    __slots__ = ("_id", "_name")

    def __init__(self, id: CandidateId, name: str) -> None:
        """Constructor

        :param id: 1-based position of the candidate in the BLT candidate list.
        :type id: int
        :param name: Full candidate name.
        :type name: str
        """
        self._id = id
        self._name = name

    @property
    def id(self) -> CandidateId:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def last_name(self) -> str:
        """Substring after the final space, or the whole name if there is none."""
        return self._name[self._name.rfind(" ") + 1:]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Candidate):
            return NotImplemented
        return self._id == other._id and self._name == other._name

    def __hash__(self) -> int:
        return hash((self._id, self._name))

    def __repr__(self) -> str:
        return f"Candidate({self._id!r}, {self._name!r})"


class Ballot:
    """A ranked list of candidate ids carrying a transferable value."""

    __slots__ = ("preferences", "value")

    def __init__(self, preferences: Iterable[CandidateId] = (), value: decimal.Decimal = decimal.Decimal(1)) -> None:
        """Constructor

        :param preferences: Candidate ids in order of preference. Must not contain duplicates.
        :type preferences: Iterable[int], optional
        :param value: Current value of the ballot, defaults to 1.
        :type value: decimal.Decimal, optional
        :raises ValueError: If a candidate id appears more than once.
        """
        self.preferences = tuple(preferences)
        if len(set(self.preferences)) != len(self.preferences):
            raise ValueError(f"duplicate candidate in ballot preferences {self.preferences}")
        self.value = decimal.Decimal(value)

    def copy(self) -> Ballot:
        """Make an independent copy. Scaling the copy leaves this ballot untouched.

        :rtype: Ballot
        """
        return Ballot(self.preferences, self.value)

    def has_preference(self, excluded: Collection[CandidateId]) -> bool:
        """
        :return: True if at least one ranked candidate is not in `excluded`.
        :rtype: bool
        """
        return any(c not in excluded for c in self.preferences)

    def first_preference(self, excluded: Collection[CandidateId]) -> Optional[CandidateId]:
        """Highest ranked candidate not in `excluded`, or None."""
        for c in self.preferences:
            if c not in excluded:
                return c
        return None

    def next_preference(self, candidate: CandidateId, continuing: Collection[CandidateId]) -> Optional[CandidateId]:
        """Return the first candidate ranked after `candidate` that is in `continuing`.

        :param candidate: Candidate the ballot is currently assigned to.
        :type candidate: int
        :param continuing: Candidates able to receive the ballot.
        :type continuing: Collection[int]
        :return: Id of the next continuing preference, or None if the ballot is exhausted.
        :rtype: Optional[int]
        """
        found = False
        for c in self.preferences:
            if not found:
                found = c == candidate
            elif c in continuing:
                return c
        return None

    def scale(self, transfer_value: decimal.Decimal) -> None:
        """Multiply the ballot value by `transfer_value`, which must lie in (0, 1)."""
        if not 0 < transfer_value < 1:
            raise ValueError(f"transfer value must be between 0 and 1, got {transfer_value}")
        self.value *= transfer_value

    def __repr__(self) -> str:
        return f"Ballot({list(self.preferences)!r}, value={self.value})"


def get_ctvv(ballots: Sequence[Ballot]) -> decimal.Decimal:
    """Candidate's total value of votes: sum of the values of `ballots`."""
    return sum((b.value for b in ballots), decimal.Decimal(0))
