from conftest import read_test_config

from wright_stv.parsers import read_blt
from wright_stv.stv.tally import tally


def test_blt_file(blt_path):

    expected = read_test_config(f'{blt_path}/expected.txt')
    result = tally(read_blt(f'{blt_path}/election.blt'))

    assert result.definition.title == expected['title']
    assert result.elected_names() == [name.strip() for name in expected['elected'].split(',')]
    assert result.n_rounds() == int(expected['n_rounds'])
