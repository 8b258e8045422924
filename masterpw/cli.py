"""
masterpw - Command-Line Interface

Thin I/O layer around masterpw.crypto.derive_password(): collects the five
inputs from flags, MPW_* environment variables or prompts, then prints the
password (or copies it to the clipboard).

Exit codes:
    0  password printed
    1  derivation failed
    3  empty master password
    4  unknown password type
"""

import argparse
import getpass
import logging
import os
import sys
from typing import List, Optional

import pyperclip

from . import __version__, config
from .crypto import derive_password
from .exceptions import MasterPasswordError
from .templates import TEMPLATES

logger = logging.getLogger("masterpw.cli")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_MISSING_PASSWORD = 3
EXIT_BAD_PASSWORD_TYPE = 4

PROG = "mpw"


def _counter(value: str) -> int:
    try:
        return int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid counter: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROG, add_help=False)
    parser.add_argument("-h", "--help", action="store_true")
    parser.add_argument("-v", "--version", action="store_true")
    parser.add_argument("-u", dest="username", default=config.default_username())
    parser.add_argument("-c", dest="counter", type=_counter, default=config.default_counter())
    parser.add_argument("-t", dest="password_type", default=config.default_password_type())
    parser.add_argument("-m", dest="master_password_fd", type=int, default=-1)
    parser.add_argument("--copy", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("sitename", nargs="?")
    return parser


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )


def show_help() -> None:
    err = sys.stderr
    print(f"Usage: {PROG} [-u full-name] [-t pw-type] [-c counter] [-m fd]", file=err)
    print("      [--copy] [--verbose] [-h] [-v] sitename", file=err)
    print("", file=err)
    print("  -u full-name Specify the full name of the user.", file=err)
    print("               Defaults to MPW_FULLNAME in env or prompts.", file=err)
    print("", file=err)
    print("  -c counter   The value of the counter.", file=err)
    print("               Defaults to MPW_SITECOUNTER in env or 1.", file=err)
    print("", file=err)
    print("  -t pw-type   Specify the password's template.", file=err)
    print("               Defaults to MPW_PWTYPE in env or 'l'.", file=err)
    for code in sorted(TEMPLATES):
        print(f"                   {code} | {TEMPLATES[code].description}", file=err)
    print("", file=err)
    print("  -m fd        Read the master password of the user from a file descriptor.", file=err)
    print("", file=err)
    print("  --copy       Copy the password to the clipboard instead of printing it.", file=err)
    print("  --verbose    Log progress to stderr.", file=err)
    print("", file=err)
    print("  sitename     The website name the password is for.", file=err)
    print("               Defaults to MPW_SITE in env or prompts.", file=err)
    print("", file=err)
    print("  If variable MPW_MASTERPASSWORD is set use it for the", file=err)
    print("  master password instead of prompting. This should not", file=err)
    print("  be used as it may expose your password to other users", file=err)
    print("  on the system.", file=err)


def show_version() -> None:
    print(f"{PROG} {__version__}, library version {__version__}", file=sys.stderr)


def prompt_for_input(prompt: str) -> str:
    print(f"{prompt}: ", end="", file=sys.stderr, flush=True)
    return sys.stdin.readline().rstrip("\r\n")


def read_master_password(fd: int) -> bytes:
    """
    Master password from, in order: file descriptor fd (first line),
    MPW_MASTERPASSWORD, an interactive prompt.
    """
    if fd != -1:
        with os.fdopen(fd, "rb", closefd=False) as f:
            return f.readline().rstrip(b"\r\n")

    from_env = config.env_master_password()
    if from_env is not None:
        logger.debug("Master password taken from %s", config.ENV_MASTERPASSWORD)
        return from_env.encode("utf-8")

    return getpass.getpass("Master password: ", stream=sys.stderr).encode("utf-8")


def output_password(password: str, copy: bool) -> int:
    if copy:
        try:
            pyperclip.copy(password)
        except pyperclip.PyperclipException as e:
            print(f"Failure: clipboard unavailable ({e})", file=sys.stderr)
            return EXIT_ERROR
        print("Password copied to clipboard.", file=sys.stderr)
        return EXIT_OK

    sys.stdout.write(password)
    if sys.stdout.isatty():
        sys.stdout.write("\n")
    sys.stdout.flush()
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    if args.help:
        show_help()
        return EXIT_OK

    if args.version:
        show_version()
        return EXIT_OK

    if args.password_type not in TEMPLATES:
        print(f"Unknown password type: {args.password_type}", file=sys.stderr)
        return EXIT_BAD_PASSWORD_TYPE

    username = args.username or prompt_for_input("Username")
    sitename = args.sitename or config.default_site() or prompt_for_input("Site")

    try:
        master_password = read_master_password(args.master_password_fd)
    except OSError as e:
        print(f"Failure: cannot read master password ({e})", file=sys.stderr)
        return EXIT_ERROR
    if not master_password:
        print("Missing master password", file=sys.stderr)
        return EXIT_MISSING_PASSWORD

    logger.debug("Deriving type %r password for counter %d", args.password_type, args.counter)
    try:
        password = derive_password(
            username, sitename, args.counter, args.password_type, master_password
        )
    except (MasterPasswordError, ValueError) as e:
        print(f"Failure: {e}", file=sys.stderr)
        return EXIT_ERROR

    return output_password(password, args.copy)


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nExiting...", file=sys.stderr)
        sys.exit(EXIT_ERROR)
