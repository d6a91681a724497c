from wright_stv.ballots import Ballot, Candidate
from wright_stv.election import ElectionDefinition
from wright_stv.exceptions import ConfigurationError, FormatError
from wright_stv.parsers import parse_blt, read_blt
from wright_stv.stv.tally import WrightSTV, tally

__version__ = '0.1.0'
