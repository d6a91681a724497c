"""
Converts ranked choice CSV exports into BLT text.
"""

from typing import Dict, List

import io

import pandas as pd

import wright_stv.util as util
from wright_stv.exceptions import ConfigurationError, FormatError

COMMON_SUFFIXES = ["Jr.", "Sr.", "II", "III", "IV", "V."]


def _last_name_key(name: str) -> str:
    pieces = [piece for piece in name.split(" ") if piece not in COMMON_SUFFIXES]
    if not pieces:
        return name.lower()
    return pieces[-1].lower()


def rank_columns(csv_table: pd.DataFrame) -> List[str]:
    """Columns holding rankings: any column whose header contains "choice", in file order."""
    return [col for col in csv_table.columns if "choice" in str(col).lower()]


def csv_to_blt(csv_content: str, title: str, n_winners: int) -> Dict:
    """Convert CSV ballots into BLT text.

    One ballot per row. Every column whose header contains the word "choice" (any case) is a
    ranking column, in rank order, holding a candidate name or nothing. Other columns are ignored.
    Candidates are numbered in order of last name, with common suffixes (Jr., III, ...) ignored.
    A name ranked twice on one row only counts at its first ranking.

    :param csv_content: The text content of the CSV file, with a header row.
    :type csv_content: str
    :param title: Election title.
    :type title: str
    :param n_winners: Number of seats to fill.
    :type n_winners: int
    :raises ConfigurationError: If the title is empty or n_winners is not positive.
    :raises FormatError: If the CSV is empty or has no ranking columns.
    :return: Dictionary with "blt_content" (BLT text), "csv_table" (the CSV as a DataFrame of strings)
        and "candidates" (candidate names in BLT id order).
    :rtype: Dict
    """
    if not title:
        raise ConfigurationError("an election title is required")
    if n_winners <= 0:
        raise ConfigurationError(f"number of winners must be positive, got {n_winners}")

    csv_content = csv_content.strip()
    if not csv_content:
        raise FormatError("CSV content is empty")

    csv_table = pd.read_csv(io.StringIO(csv_content), dtype=str, keep_default_na=False)
    csv_table = csv_table.apply(lambda col: col.str.strip())

    rank_col = rank_columns(csv_table)
    if not rank_col:
        raise FormatError('no ranking columns found, ranking column headers must contain "choice"')

    rank_lists = [list(row) for row in csv_table[rank_col].itertuples(index=False)]

    # find all the candidates, in order of first appearance
    candidates = []
    for ranks in rank_lists:
        for name in ranks:
            if name and name not in candidates:
                candidates.append(name)

    candidates = sorted(candidates, key=_last_name_key)
    candidate_ids = {name: idx for idx, name in enumerate(candidates, start=1)}

    ballot_lines = []
    for ranks in rank_lists:
        ids = []
        for name in ranks:
            if name and candidate_ids[name] not in ids:
                ids.append(candidate_ids[name])
        ballot_lines.append(" ".join(["1"] + [str(i) for i in ids] + ["0"]))

    # only needed to align the comments in the candidate list
    longest_name = max((len(name) for name in candidates), default=0)
    candidate_lines = [
        util.escape_blt_string(name) + " " * (longest_name + 3 - len(name)) + f"#{idx}"
        for idx, name in enumerate(candidates, start=1)
    ]

    blt_content = "\n".join(
        [str(len(candidates)), str(n_winners)]
        + ballot_lines
        + ["0"]
        + candidate_lines
        + [util.escape_blt_string(title)]
    )

    return {
        "blt_content": blt_content,
        "csv_table": csv_table,
        "candidates": candidates,
    }
