from wright_stv.stv.results import Round, Subround, TallyResult
from wright_stv.stv.tally import WrightSTV, tally
