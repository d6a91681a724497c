import pytest

from wright_stv.cli import main

BLT = '3 1\n2 1 2 0\n1 2 1 0\n0\n"Alice"\n"Bob"\n"Carol"\n"Test Election"'


def test_tally(tmp_path, capsys):

    blt_path = tmp_path / "election.blt"
    blt_path.write_text(BLT)

    assert main(["tally", str(blt_path)]) == 0

    out = capsys.readouterr().out
    assert "Test Election" in out
    assert "elected: Alice" in out
    assert "r1.1_count" in out


def test_tally_continues_after_bad_file(tmp_path, capsys):

    bad_path = tmp_path / "bad.blt"
    bad_path.write_text("3 1\n1 1 2")
    good_path = tmp_path / "good.blt"
    good_path.write_text(BLT)

    assert main(["tally", str(bad_path), str(good_path)]) == 1

    captured = capsys.readouterr()
    assert "unterminated ballot section" in captured.err
    assert "elected: Alice" in captured.out


def test_tally_continues_after_unreadable_files(tmp_path, capsys):

    not_utf8_path = tmp_path / "latin1.blt"
    not_utf8_path.write_bytes(b'\xff\xfe3 1\n0\n"A"\n"B"\n"C"\n"T"')
    missing_path = tmp_path / "missing.blt"
    good_path = tmp_path / "good.blt"
    good_path.write_text(BLT)

    assert main(["tally", str(not_utf8_path), str(missing_path), str(good_path)]) == 1

    captured = capsys.readouterr()
    assert "not valid UTF-8" in captured.err
    assert "missing.blt" in captured.err
    assert "elected: Alice" in captured.out


def test_convert_missing_file(tmp_path, capsys):

    assert main(["convert", str(tmp_path / "missing.csv"), "--title", "Club", "--seats", "1"]) == 1
    assert "missing.csv" in capsys.readouterr().err


def test_tally_csv(tmp_path, capsys):

    csv_path = tmp_path / "ballots.csv"
    csv_path.write_text("choice 1,choice 2\nAlice Smith,Bob Jones\nAlice Smith,\nBob Jones,Alice Smith\n")

    assert main(["tally", str(csv_path), "--format", "csv", "--title", "Club", "--seats", "1"]) == 0
    assert "elected: Alice Smith" in capsys.readouterr().out


def test_tally_csv_needs_title_and_seats(tmp_path):

    csv_path = tmp_path / "ballots.csv"
    csv_path.write_text("choice 1\nA\nB\n")

    with pytest.raises(SystemExit):
        main(["tally", str(csv_path), "--format", "csv"])


def test_convert(tmp_path, capsys):

    csv_path = tmp_path / "ballots.csv"
    csv_path.write_text("choice 1,choice 2\nAlice Smith,Bob Jones\n")

    assert main(["convert", str(csv_path), "--title", "Club", "--seats", "1"]) == 0

    out = capsys.readouterr().out
    assert out.startswith("2\n1\n1 2 1 0\n0\n")
    assert '"Club"' in out


def test_convert_error(tmp_path, capsys):

    csv_path = tmp_path / "ballots.csv"
    csv_path.write_text("a,b\n1,2\n")

    assert main(["convert", str(csv_path), "--title", "Club", "--seats", "1"]) == 1
    assert "choice" in capsys.readouterr().err
