import argparse
import sys

from loguru import logger
from pydantic import ValidationError

from genrepass.config import config, configure_logging
from genrepass.entities import GenrepassError
from genrepass.settings import PasswordSettings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="genrepass",
        description=(
            "Generate a readable password from an ordered list of words "
            "extracted from text. Numbers and special characters are inserted "
            "at random places."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  genrepass notes/                      # One password from a directory of notes
  genrepass book.txt -p 5 -C -L 30-40   # Five capitalised passwords, 30-40 long
        """,
    )

    parser.add_argument(
        "paths",
        nargs="+",
        help="Text files or directories of text files to take words from",
    )

    flags = [
        ("-C", "--capitalise", "Uppercase the first character of every word"),
        ("-r", "--replace", "Replace characters instead of inserting"),
        ("-X", "--randomise", "Shuffle the words"),
        ("-k", "--keep-nums", "Keep numbers from the source as words"),
        ("-F", "--force-upper", "Force the amount of uppercase characters"),
        ("-f", "--force-lower", "Force the amount of lowercase characters"),
        ("-D", "--dont-upper", "Never uppercase, keeping the original casing"),
        ("-d", "--dont-lower", "Never lowercase, keeping the original casing"),
    ]
    for short, long, help_text in flags:
        parser.add_argument(short, long, action="store_true", help=help_text)

    parser.add_argument(
        "-p",
        "--pass-amount",
        type=int,
        default=config.pass_amount,
        help="Amount of passwords to generate",
    )
    parser.add_argument(
        "-R",
        "--resets",
        type=int,
        default=config.reset_amount,
        help="Restarts allowed before truncating to the maximum length",
    )

    ranges = [
        ("-L", "--length", config.length, "Password length, like 24-30 or 25"),
        ("-n", "--num", config.number_amount, "Amount of numbers to insert"),
        (
            "-s",
            "--special",
            config.special_chars_amount,
            "Amount of special characters to insert",
        ),
        ("-u", "--upper", config.upper_amount, "Amount of uppercase characters"),
        ("-l", "--lower", config.lower_amount, "Amount of lowercase characters"),
    ]
    for short, long, default, help_text in ranges:
        parser.add_argument(short, long, default=default, help=help_text)

    parser.add_argument(
        "-S",
        "--chars",
        default=config.special_chars,
        help="The special characters to insert (ASCII only)",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Generate on a thread pool; output order is arbitrary",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG)",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> PasswordSettings:
    settings = PasswordSettings(
        capitalise=args.capitalise,
        replace=args.replace,
        randomise=args.randomise,
        keep_numbers=args.keep_nums,
        force_upper=args.force_upper,
        force_lower=args.force_lower,
        dont_upper=args.dont_upper,
        dont_lower=args.dont_lower,
        pass_amount=args.pass_amount,
        reset_amount=args.resets,
    )
    settings.length = args.length
    settings.number_amount = args.num
    settings.special_chars_amount = args.special
    settings.upper_amount = args.upper
    settings.lower_amount = args.lower
    settings.set_special_chars(args.chars)

    for path in args.paths:
        settings.get_words_from_path(path)

    return settings


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose >= 2:
        configure_logging("DEBUG")
    elif args.verbose == 1:
        configure_logging("INFO")
    else:
        configure_logging()

    try:
        settings = settings_from_args(args)
        logger.info(f"Loaded {len(settings.words)} words")
        if args.parallel:
            passwords = settings.generate_parallel()
        else:
            passwords = settings.generate()
    except (GenrepassError, OSError, UnicodeDecodeError, ValidationError) as err:
        print(f"Error: {err}.", file=sys.stderr)
        return 1

    for password in passwords:
        print(password)
    return 0
