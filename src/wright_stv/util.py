import decimal

from typing import Sequence

########################
# helper funcs


def before(victor, loser, ballot: Sequence) -> int:
    """
    Used for pairwise comparisons. Each ballot passed through this
    function gets mapped to either
    1 (victor ranked before loser),
    0 (neither appear on ballot),
    or -1 (loser ranked before victor).
    """
    for rank in ballot:
        if rank == victor:
            return 1
        if rank == loser:
            return -1
    return 0


def decimal2float(stat, round_places=3):
    """Convert any decimal objects used internally into float for reporting.

    Args:
        stat (any): Any value.

    Returns:
        any type not Decimal: If the stat passed is type Decimal, it is converted to float.
    """

    if isinstance(stat, decimal.Decimal):
        return round(float(stat), round_places)
    else:
        return stat


def escape_blt_string(s: str) -> str:
    # BLT strings double any embedded quote
    return '"' + s.replace('"', '""') + '"'
