import pytest

from decimal import Decimal

from wright_stv.ballots import Ballot, Candidate, get_ctvv


params = [
    ({"input": "Alice Smith", "expected": "Smith"}),
    ({"input": "Mary Ann de Vries", "expected": "Vries"}),
    ({"input": "Cher", "expected": "Cher"}),
]


@pytest.mark.parametrize("param", params)
def test_last_name(param):
    assert Candidate(1, param["input"]).last_name == param["expected"]


def test_candidate_identity():

    assert Candidate(1, "A") == Candidate(1, "A")
    assert Candidate(1, "A") != Candidate(2, "A")
    assert len({Candidate(1, "A"), Candidate(1, "A")}) == 1


params = [
    ({"input": {"preferences": [1, 2, 3], "excluded": set()}, "expected": 1}),
    ({"input": {"preferences": [1, 2, 3], "excluded": {1}}, "expected": 2}),
    ({"input": {"preferences": [1, 2, 3], "excluded": {1, 2, 3}}, "expected": None}),
    ({"input": {"preferences": [], "excluded": set()}, "expected": None}),
]


@pytest.mark.parametrize("param", params)
def test_first_preference(param):

    ballot = Ballot(param["input"]["preferences"])
    assert ballot.first_preference(param["input"]["excluded"]) == param["expected"]
    assert ballot.has_preference(param["input"]["excluded"]) == (param["expected"] is not None)


params = [
    ({"input": {"preferences": [1, 2, 3], "candidate": 1, "continuing": {2, 3}}, "expected": 2}),
    ({"input": {"preferences": [1, 2, 3], "candidate": 1, "continuing": {3}}, "expected": 3}),
    ({"input": {"preferences": [1, 2, 3], "candidate": 2, "continuing": {1, 3}}, "expected": 3}),
    ({"input": {"preferences": [1, 2, 3], "candidate": 3, "continuing": {1, 2}}, "expected": None}),
    ({"input": {"preferences": [1, 2], "candidate": 1, "continuing": set()}, "expected": None}),
]


@pytest.mark.parametrize("param", params)
def test_next_preference(param):

    ballot = Ballot(param["input"]["preferences"])
    assert ballot.next_preference(param["input"]["candidate"], param["input"]["continuing"]) == param["expected"]


def test_copy_is_independent():

    original = Ballot([1, 2])
    clone = original.copy()
    clone.scale(Decimal("0.25"))

    assert clone.value == Decimal("0.25")
    assert original.value == Decimal(1)
    assert clone.preferences == original.preferences


def test_scale_multiplies():

    ballot = Ballot([1])
    ballot.scale(Decimal("0.5"))
    ballot.scale(Decimal("0.5"))
    assert ballot.value == Decimal("0.25")


@pytest.mark.parametrize("transfer_value", [Decimal(0), Decimal(1), Decimal("1.5"), Decimal("-0.5")])
def test_scale_errors(transfer_value):

    with pytest.raises(ValueError):
        Ballot([1]).scale(transfer_value)


def test_duplicate_preference_error():

    with pytest.raises(ValueError):
        Ballot([1, 2, 1])


def test_get_ctvv():

    ballots = [Ballot([1]), Ballot([1], Decimal("0.5")), Ballot([2], Decimal("0.25"))]
    assert get_ctvv(ballots) == Decimal("1.75")
    assert get_ctvv([]) == Decimal(0)
