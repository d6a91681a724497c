"""
Contains the BLT parser and the registry of ballot file parsers.

BLT layout (Hill, Wichmann & Woodall)::

    <candidates> <seats>
    [-<withdrawn id> ...]
    <weight> <id> ... 0       one line per ballot record
    0                         end of ballots
    "<name>"                  one per candidate, in id order
    "<title>"

Text from ``#`` to the end of a line is a comment. Inside quoted strings ``""``
stands for a literal quote.
"""

from typing import Dict, List, NamedTuple, Optional, Tuple

import pathlib
import re

import wright_stv.convert as convert
from wright_stv.ballots import Ballot, Candidate
from wright_stv.election import ElectionDefinition
from wright_stv.exceptions import FormatError
from wright_stv.package_types import ParserDict, Path


_TOKEN_RE = re.compile(
    r"""
      (?P<space>\s+)
    | (?P<comment>\#[^\r\n]*)
    | "(?P<string>(?:[^"]|"")*)"
    | (?P<bare>[^\s"\#]+)
    | (?P<stray>")
    """,
    re.VERBOSE,
)

_INTEGER_RE = re.compile(r"-?[0-9]+")


class Token(NamedTuple):
    value: str
    index: int
    line: int
    quoted: bool


def tokenize(text: str) -> List[Token]:
    """Split BLT text into tokens.

    :param text: Raw BLT text.
    :type text: str
    :raises FormatError: On a quote that is never closed.
    :return: Tokens with their 1-based index and line number. Quoted tokens are unescaped and have `quoted` set.
    :rtype: List[Token]
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    tokens = []
    line = 1
    for match in _TOKEN_RE.finditer(text):
        kind = match.lastgroup
        if kind == "string":
            tokens.append(Token(match.group("string").replace('""', '"'), len(tokens) + 1, line, True))
        elif kind == "bare":
            tokens.append(Token(match.group("bare"), len(tokens) + 1, line, False))
        elif kind == "stray":
            raise FormatError("unterminated quoted string", len(tokens) + 1, line)
        line += match.group(0).count("\n")

    return tokens


class _TokenStream:
    """Cursor over a token list that raises FormatError instead of running off the end."""

    def __init__(self, tokens: List[Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    def _end_position(self):
        last_line = self._tokens[-1].line if self._tokens else 1
        return len(self._tokens) + 1, last_line

    def exhausted(self) -> bool:
        return self._pos >= len(self._tokens)

    def next(self, expecting: str, end_message: Optional[str] = None) -> Token:
        if self.exhausted():
            index, line = self._end_position()
            raise FormatError(end_message or f"unexpected end of input, expected {expecting}", index, line)
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def next_int(self, expecting: str, end_message: Optional[str] = None) -> Tuple[Token, int]:
        token = self.next(expecting, end_message)
        if token.quoted:
            raise FormatError(f"expected {expecting}, found string {token.value!r}", token.index, token.line)
        if not _INTEGER_RE.fullmatch(token.value):
            raise FormatError(f"expected {expecting}, found {token.value!r}", token.index, token.line)
        return token, int(token.value)

    def next_string(self, expecting: str, end_message: Optional[str] = None) -> Token:
        token = self.next(expecting, end_message)
        if not token.quoted:
            raise FormatError(f"expected quoted {expecting}, found {token.value!r}", token.index, token.line)
        return token


def _check_candidate_id(candidate_id: int, candidate_count: int, token: Token, what: str = "candidate id") -> None:
    if not 1 <= candidate_id <= candidate_count:
        raise FormatError(
            f"{what} {candidate_id} out of range 1..{candidate_count}", token.index, token.line
        )


def parse_blt(text: str) -> ElectionDefinition:
    """Parse BLT text into an ElectionDefinition.

    A ballot record of weight N is expanded into N unit ballots with the same preferences.

    :param text: BLT file contents.
    :type text: str
    :raises FormatError: Malformed input; the error names the offending token and line.
    :raises ConfigurationError: Non-positive counts, at least as many seats as candidates, or too many withdrawals.
    :return: The parsed election.
    :rtype: ElectionDefinition
    """
    stream = _TokenStream(tokenize(text))

    _, candidate_count = stream.next_int("candidate count")
    _, seat_count = stream.next_int("seat count")
    ElectionDefinition.check_counts(candidate_count, seat_count)

    unterminated_ballots = "unterminated ballot section, expected 0 to close it"

    # withdrawn candidates
    withdrawn = []
    token, value = stream.next_int("ballot weight", unterminated_ballots)
    while value < 0:
        _check_candidate_id(-value, candidate_count, token, what="withdrawn candidate id")
        withdrawn.append(-value)
        token, value = stream.next_int("ballot weight", unterminated_ballots)

    # ballots
    ballots = []
    while value != 0:
        if value < 0:
            raise FormatError(f"ballot weight must not be negative, got {value}", token.index, token.line)
        weight = value

        preferences = []
        token, candidate_id = stream.next_int("candidate id", unterminated_ballots)
        while candidate_id != 0:
            _check_candidate_id(candidate_id, candidate_count, token)
            if candidate_id in preferences:
                raise FormatError(
                    f"candidate id {candidate_id} appears twice in one ballot", token.index, token.line
                )
            preferences.append(candidate_id)
            token, candidate_id = stream.next_int("candidate id", unterminated_ballots)

        ballots.extend(Ballot(preferences) for _ in range(weight))
        token, value = stream.next_int("ballot weight", unterminated_ballots)

    # candidate names
    candidates = []
    for candidate_id in range(1, candidate_count + 1):
        token = stream.next_string(
            f"name of candidate {candidate_id}",
            f"unterminated candidate section, expected {candidate_count} names but found {candidate_id - 1}",
        )
        candidates.append(Candidate(candidate_id, token.value))

    title = stream.next_string("election title", "missing election title").value

    if not stream.exhausted():
        token = stream.next("end of input")
        raise FormatError(f"unexpected token {token.value!r} after election title", token.index, token.line)

    return ElectionDefinition(
        candidate_count=candidate_count,
        seat_count=seat_count,
        candidates=candidates,
        ballots=ballots,
        withdrawn=withdrawn,
        title=title,
    )


def read_text(path: Path) -> str:
    """Read a UTF-8 text file.

    :param path: Path to the file.
    :type path: Union[str, pathlib.Path]
    :raises FormatError: If the file is not valid UTF-8.
    :raises OSError: If the file cannot be read.
    :rtype: str
    """
    try:
        return pathlib.Path(path).read_text(encoding="utf8")
    except UnicodeDecodeError as e:
        raise FormatError(f"file is not valid UTF-8 text: {e.reason} at byte {e.start}") from e


def read_blt(blt_path: Path) -> ElectionDefinition:
    """Reads and parses a BLT file.

    :param blt_path: Path to the BLT file.
    :type blt_path: Union[str, pathlib.Path]
    :rtype: ElectionDefinition
    """
    return parse_blt(read_text(blt_path))


def read_csv(csv_path: Path, title: str, n_winners: int) -> ElectionDefinition:
    """Reads a ranked choice CSV file by converting it to BLT first. See :func:`wright_stv.convert.csv_to_blt`.

    :param csv_path: Path to the CSV file.
    :type csv_path: Union[str, pathlib.Path]
    :param title: Election title.
    :type title: str
    :param n_winners: Number of seats.
    :type n_winners: int
    :rtype: ElectionDefinition
    """
    converted = convert.csv_to_blt(read_text(csv_path), title=title, n_winners=n_winners)
    return parse_blt(converted["blt_content"])


parser_dict: Dict = {
    "blt": read_blt,
    "csv": read_csv,
}


def add_parser(new_parsers: ParserDict) -> None:
    """Add custom parser functions to the module parser dictionary.

    :param new_parsers: A dictionary containing parser functions, with their names as keys.
    :type new_parsers: Dict
    """
    parser_dict.update(new_parsers)


def get_parser_dict() -> ParserDict:
    """Returns the module parser dictionary. Including both package parsers and
    custom parsers added with :func:`add_parser`.

    :return: A dictionary of parser functions. Keys are parser name strings.
    :rtype: Dict
    """
    return parser_dict
