"""
Table methods mixed into TallyResult.
"""
import pandas as pd

import wright_stv.util as util


class TallyResult_tables:

    def get_round_by_round_table(self) -> pd.DataFrame:
        """Create a table containing subround by subround candidate totals.

        Rows are candidates in id order followed by "exhaust", "colsum" (sum of the rows above)
        and "quota". There is one "r{round}.{subround}_count" column per subround.

        :return: round by round table
        :rtype: pd.DataFrame
        """
        candidates = self.definition.candidates
        columns = {"candidate": [c.name for c in candidates] + ["exhaust", "colsum", "quota"]}

        for rnd in self.rounds:
            for sub_num, subround in enumerate(rnd.subrounds, start=1):
                counts = [subround.ctvv[c.id] for c in candidates] + [subround.exhausted]
                values = counts + [subround.total(), rnd.quota]
                columns[f"r{rnd.number}.{sub_num}_count"] = [util.decimal2float(v) for v in values]

        return pd.DataFrame(columns)

    def get_candidate_outcomes_table(self) -> pd.DataFrame:
        """One row per candidate: id, name, round_elected, round_excluded.

        :rtype: pd.DataFrame
        """
        df = pd.DataFrame(self.get_candidate_outcomes(), columns=["id", "name", "round_elected", "round_excluded"])
        df["elected"] = df["id"].isin(self.elected)
        return df
