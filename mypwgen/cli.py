"""
cli.py - command-line front end for mypwgen.

Usage:
    mypwgen [-l LEN] [-d N] [-a N] [-A N] [-s N] [-f] [-H] [-r] [-t ID] [-n COUNT]
    mypwgen -p [-t ID] < plaintexts.txt
    mypwgen --self-test SAMPLES

Exit codes:
    0 - success
    1 - configuration error (class minimums exceed the length) or failed self-test
    2 - random device could not be opened or read
"""

from __future__ import annotations

from typing import BinaryIO, List, Optional, TextIO
import argparse
import logging
import sys

from . import __version__
from .composer import Composer, GenerationPolicy
from .entropy import open_source
from .errors import ConfigurationError, EntropyError
from .hashing import DEFAULT_SCHEME_ID, HashScheme, hash_password, supported_ids
from .metrics import SELF_TEST_MODS, uniformity_report
from .sampler import Sampler

logger = logging.getLogger("mypwgen")

EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_ENTROPY = 2
EXIT_SELF_TEST = 1

SELF_TEST_ALPHA = 1e-4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mypwgen",
        description="Generate random passwords with per-class minimums and optional hashes.",
    )
    parser.add_argument("-l", "--length", type=int, default=8,
                        help="Password length (default: 8)")
    parser.add_argument("-d", "--digits", type=int, default=2,
                        help="Minimum number of digits (default: 2)")
    parser.add_argument("-a", "--lower", type=int, default=2,
                        help="Minimum number of lowercase letters (default: 2)")
    parser.add_argument("-A", "--upper", type=int, default=2,
                        help="Minimum number of uppercase letters (default: 2)")
    parser.add_argument("-s", "--special", type=int, default=0,
                        help="Minimum number of special symbols (default: 0)")
    parser.add_argument("-f", "--friendly", action="store_true",
                        help="Fill the remaining slots with letters and digits only")
    parser.add_argument("-H", "--hash", dest="print_hash", action="store_true",
                        help="Print the password hash on the line after the password")
    parser.add_argument("-p", "--pipe", action="store_true",
                        help="Read plaintext passwords from stdin and print one hash per line (implies -H)")
    parser.add_argument("-r", "--blocking", action="store_true",
                        help="Use the blocking /dev/random device")
    parser.add_argument("-t", "--type", dest="scheme", default=None, metavar="ID",
                        help="Hash scheme: S = salted SHA1, 0 = DES, otherwise a crypt id "
                             f"such as {', '.join(supported_ids())} (default: {DEFAULT_SCHEME_ID}; implies -H)")
    parser.add_argument("-n", "--count", type=int, default=1,
                        help="Number of passwords to generate (default: 1)")
    parser.add_argument("--self-test", type=int, default=None, metavar="SAMPLES",
                        help="Chi-square test the sampler over SAMPLES draws per modulus and exit")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log debug output to stderr")
    parser.add_argument("-V", "--version", action="version",
                        version=f"%(prog)s {__version__}")
    return parser


def build_policy(args: argparse.Namespace) -> GenerationPolicy:
    return GenerationPolicy(
        length=args.length,
        digits=args.digits,
        lower=args.lower,
        upper=args.upper,
        special=args.special,
        friendly=args.friendly,
    )


def run_pipe(sampler: Sampler, scheme: HashScheme, stdin: BinaryIO, stdout: TextIO) -> None:
    """
    Hash each raw stdin line in order; a failed hash prints an empty line.

    Lines are hashed as bytes, so input that is not valid UTF-8 still
    hashes. Output is written only after every line is done.
    """
    lines = [hash_password(line.rstrip(b"\r\n"), scheme, sampler) for line in stdin]
    stdout.writelines(line + "\n" for line in lines)


def run_generate(
    composer: Composer,
    scheme: Optional[HashScheme],
    count: int,
    stdout: TextIO,
) -> None:
    lines: List[str] = []
    for password in composer.passwords(count):
        lines.append(password)
        if scheme is not None:
            lines.append(hash_password(password, scheme, composer.sampler))
    # nothing is printed unless every draw succeeded
    stdout.writelines(line + "\n" for line in lines)


def run_self_test(sampler: Sampler, samples: int, stdout: TextIO) -> bool:
    ok = True
    for mod in SELF_TEST_MODS:
        report = uniformity_report(sampler, mod, samples)
        verdict = "ok" if report.passed(SELF_TEST_ALPHA) else "FAIL"
        stdout.write(
            f"mod={mod:<4d} n={samples} chi2={report.chi_square.stat:.2f} "
            f"df={report.chi_square.df} p={report.chi_square.pvalue:.4f} "
            f"kl={report.kl_bits:.6f} {verdict}\n"
        )
        ok = ok and verdict == "ok"
    return ok


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    print_hash = args.print_hash or args.pipe or args.scheme is not None
    scheme = None
    if print_hash:
        scheme = HashScheme.parse(DEFAULT_SCHEME_ID if args.scheme is None else args.scheme)

    try:
        policy = build_policy(args)
        if args.count < 0:
            raise ConfigurationError("count must be non-negative")
        if args.self_test is not None and args.self_test <= 0:
            raise ConfigurationError("--self-test needs a positive sample count")
    except ConfigurationError as exc:
        logger.error("%s", exc)
        return EXIT_CONFIG

    try:
        with open_source(blocking=args.blocking) as source:
            sampler = Sampler(source)
            if args.self_test is not None:
                passed = run_self_test(sampler, args.self_test, sys.stdout)
                return EXIT_OK if passed else EXIT_SELF_TEST
            if args.pipe:
                run_pipe(sampler, scheme, sys.stdin.buffer, sys.stdout)
            else:
                run_generate(Composer(policy, sampler), scheme, args.count, sys.stdout)
    except EntropyError as exc:
        logger.error("%s", exc)
        return EXIT_ENTROPY

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
