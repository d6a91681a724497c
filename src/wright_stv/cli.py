"""
Module that contains the command line app.

Why does this file exist, and why not put this in __main__?

  You might be tempted to import things from __main__ later, but that will cause
  problems: the code will get executed twice:

  - When you run `python -mwright_stv` python will execute
    ``__main__.py`` as a script. That means there won't be any
    ``wright_stv.__main__`` in ``sys.modules``.
  - When you import __main__ it will get executed again (as a module) because
    there's no ``wright_stv.__main__`` in ``sys.modules``.
"""
import argparse
import logging
import pathlib
import sys

import tqdm

import wright_stv.convert as convert
import wright_stv.parsers as parsers
from wright_stv.exceptions import ConfigurationError, FormatError
from wright_stv.stv.tally import tally


def _read_definition(path, args):
    parser_func = parsers.get_parser_dict()[args.format]
    if args.format == "csv":
        return parser_func(path, title=args.title, n_winners=args.seats)
    return parser_func(path)


def _print_result(result):
    print(f"\n{result.definition.title}")
    print(f"elected: {', '.join(result.elected_names())}\n")
    print(result.get_round_by_round_table().to_string(index=False))


def _tally_command(args):

    paths = args.files
    exit_code = 0
    with tqdm.tqdm(total=len(paths), bar_format='{l_bar}{bar}| {n_fmt}/{total_fmt}{postfix}', colour='green',
                   disable=len(paths) < 2) as pbar:

        for path in paths:

            pbar.set_postfix_str(pathlib.Path(path).name)

            try:
                result = tally(_read_definition(path, args))
            except (FormatError, ConfigurationError, OSError) as e:
                print(f"{path}: {e}", file=sys.stderr)
                exit_code = 1
            else:
                _print_result(result)

            pbar.update(1)

    return exit_code


def _convert_command(args):

    csv_path = pathlib.Path(args.csv_file)
    try:
        converted = convert.csv_to_blt(parsers.read_text(csv_path), title=args.title, n_winners=args.seats)
    except (FormatError, ConfigurationError, OSError) as e:
        print(f"{csv_path}: {e}", file=sys.stderr)
        return 1

    print(converted["blt_content"])
    return 0


def main(argv=None):

    # argument parse and valid
    p = argparse.ArgumentParser(description='Tally STV elections with the Wright System.')
    subparsers = p.add_subparsers(dest='command', required=True)

    tally_p = subparsers.add_parser('tally', help='Tally one or more election files.')
    tally_p.add_argument('files', nargs='+', help='BLT (or CSV, with --format csv) files to tally.')
    tally_p.add_argument('--format', choices=sorted(parsers.get_parser_dict()), default='blt',
                         help='Input file format. CSV files also need --title and --seats.')
    tally_p.add_argument('--title', help='Election title, for CSV input.')
    tally_p.add_argument('--seats', type=int, help='Number of seats, for CSV input.')
    tally_p.add_argument('--verbose', action='store_true', help='Log every subround.')

    convert_p = subparsers.add_parser('convert', help='Convert a ranked choice CSV file to BLT.')
    convert_p.add_argument('csv_file', help='CSV file with "choice" ranking columns.')
    convert_p.add_argument('--title', required=True, help='Election title.')
    convert_p.add_argument('--seats', type=int, required=True, help='Number of seats.')

    args = p.parse_args(argv)

    logging.basicConfig(format='%(message)s',
                        level=logging.DEBUG if getattr(args, 'verbose', False) else logging.WARNING)

    if args.command == 'tally':
        if args.format == 'csv' and (not args.title or args.seats is None):
            p.error('--title and --seats are required with --format csv')
        return _tally_command(args)

    return _convert_command(args)


if __name__ == '__main__':
    sys.exit(main())
