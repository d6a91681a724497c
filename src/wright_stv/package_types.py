import pathlib

from typing import (Callable, Dict, List, Union)

# candidate ids are 1-based positions in the BLT candidate list
CandidateId = int

# used in parser function
Path = Union[str, pathlib.Path]

# candidate id -> ballots currently assigned to that candidate
BallotsByCandidate = Dict[CandidateId, List["Ballot"]]

# returned from parser module, get_parser_dict
ParserDict = Dict[str, Callable[..., "ElectionDefinition"]]
