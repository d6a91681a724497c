import glob
import os


def read_test_config(test_config_path):

    test_config = {}
    with open(test_config_path, encoding='utf8') as test_config_file:
        for line_num, l in enumerate(test_config_file, start=1):

            l_splits = l.strip('\n').split("=", 1)
            l_splits = [s.strip() for s in l_splits]

            if len(l_splits) < 2 or l_splits[0].startswith('#'):
                continue

            input_option = l_splits[0]
            input_value = l_splits[1]

            if not input_value:
                raise RuntimeError(f'missing value in {test_config_path} on line {line_num} for option "{input_option}".')

            test_config.update({input_option: input_value})

    return test_config


def pytest_generate_tests(metafunc):
    if "blt_path" in metafunc.fixturenames:

        test_blt_files = glob.glob(f'{metafunc.config.rootpath}/tests/blt_test_files/*/election.blt')
        test_blt_dirs = sorted(os.path.dirname(test_path) for test_path in test_blt_files)

        metafunc.parametrize("blt_path", test_blt_dirs, ids=[os.path.basename(d) for d in test_blt_dirs])
