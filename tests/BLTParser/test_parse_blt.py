import pytest

from wright_stv.parsers import parse_blt, read_blt, tokenize


def test_simple_election():

    text = '3\n1\n1 1 2 0\n1 2 1 0\n0\n"Alice"\n"Bob"\n"Carol"\n"Test Election"'
    definition = parse_blt(text)

    assert definition.candidate_count == 3
    assert definition.seat_count == 1
    assert definition.withdrawn == ()
    assert [c.name for c in definition.candidates] == ["Alice", "Bob", "Carol"]
    assert [c.id for c in definition.candidates] == [1, 2, 3]
    assert [list(b.preferences) for b in definition.ballots] == [[1, 2], [2, 1]]
    assert definition.title == "Test Election"


params = [
    ({"input": '3 1\n3 1 2 0\n0\n"A"\n"B"\n"C"\n"T"', "expected": [[1, 2]] * 3}),
    ({"input": '3 1\n2 1 0\n1 3 2 0\n0\n"A"\n"B"\n"C"\n"T"', "expected": [[1], [1], [3, 2]]}),
    # a record with no preferences still counts as a ballot
    ({"input": '3 1\n1 0\n1 2 0\n0\n"A"\n"B"\n"C"\n"T"', "expected": [[], [2]]}),
    # weight 0 ends the ballot section, so no ballots at all
    ({"input": '3 1\n0\n"A"\n"B"\n"C"\n"T"', "expected": []}),
]


@pytest.mark.parametrize("param", params)
def test_weighted_records(param):

    definition = parse_blt(param["input"])
    assert [list(b.preferences) for b in definition.ballots] == param["expected"]


def test_withdrawn():

    definition = parse_blt('4 2\n-2 -4 -2\n1 1 2 0\n0\n"A"\n"B"\n"C"\n"D"\n"T"')
    assert definition.withdrawn == (2, 4)
    assert definition.n_ballots == 1


def test_comments_and_whitespace():

    text = (
        "# header comment\n"
        "3   1 # counts\n"
        "\t1 1 2 0   # first ballot\n"
        "0\n"
        '"Alice #1"  # a hash inside quotes is part of the name\n'
        '"Bob"\r\n'
        '"Carol"\n'
        '"Title" # trailing comment\n'
    )
    definition = parse_blt(text)

    assert [c.name for c in definition.candidates] == ["Alice #1", "Bob", "Carol"]
    assert definition.title == "Title"


def test_byte_order_mark():

    definition = parse_blt('\ufeff3 1\n1 1 0\n0\n"A"\n"B"\n"C"\n"T"')
    assert definition.candidate_count == 3


def test_escaped_quotes():

    definition = parse_blt('3 1\n0\n"Jo ""JJ"" Smith"\n"B"\n"C"\n"Say ""hi"""')
    assert definition.get_candidate_name(1) == 'Jo "JJ" Smith'
    assert definition.title == 'Say "hi"'


def test_tokenize_positions():

    tokens = tokenize('3 1\n1 2 0\n"A B"')
    assert [t.value for t in tokens] == ["3", "1", "1", "2", "0", "A B"]
    assert [t.index for t in tokens] == [1, 2, 3, 4, 5, 6]
    assert [t.line for t in tokens] == [1, 1, 2, 2, 2, 3]
    assert [t.quoted for t in tokens] == [False] * 5 + [True]


def test_candidate_index_is_per_definition():

    first = parse_blt('3 1\n0\n"A"\n"B"\n"C"\n"One"')
    second = parse_blt('3 1\n0\n"X"\n"Y"\n"Z"\n"Two"')

    assert first.get_candidate_name(1) == "A"
    assert second.get_candidate_name(1) == "X"


def test_read_blt(tmp_path):

    blt_path = tmp_path / "election.blt"
    blt_path.write_text('3 1\n1 3 0\n0\n"Ä"\n"B"\n"C"\n"Wahl"', encoding="utf8")

    definition = read_blt(blt_path)
    assert definition.get_candidate_name(1) == "Ä"
    assert definition.title == "Wahl"
