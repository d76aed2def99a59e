#!/usr/bin/env python3
"""
Interactive terminal client.

    minftp -i <ip_address> [-p <port>]

Connects, asks for credentials, then reads commands at the ``ftp>`` prompt:
get/put/dir/list/cd/pwd/quit, anything else is sent to the server as a raw
verb.
"""

import argparse
import getpass
import logging
import os
import sys

from minftp.core import ClientCommandHandler, FTPClientError, Session

logger = logging.getLogger("minftp.cli")

USAGE = "Usage: ftp -i <ip_address> [-p <port>]"
MAX_CREDENTIAL_LENGTH = 128


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="minftp", description="Minimal passive-mode FTP client")
    parser.add_argument("-i", "--ip", help="Server IP address")
    parser.add_argument("-p", "--port", type=int, default=21, help="Control port (default 21)")
    parser.add_argument("-t", "--timeout", type=float, default=None,
                        help="Socket timeout in seconds (default: block indefinitely)")
    parser.add_argument("--log-level", default=os.getenv("MINFTP_LOG_LEVEL", "WARNING"),
                        help="Logging level (default from MINFTP_LOG_LEVEL, else WARNING)")
    return parser


def prompt_credentials():
    """Ask for username and password; None when either is too long or input ends."""
    try:
        username = input("Enter username: ")
        if len(username) > MAX_CREDENTIAL_LENGTH:
            print(f"Username too long. Limit input to {MAX_CREDENTIAL_LENGTH} characters.")
            return None
        password = getpass.getpass("Enter password: ")
        if len(password) > MAX_CREDENTIAL_LENGTH:
            print(f"Password too long. Limit input to {MAX_CREDENTIAL_LENGTH} characters.")
            return None
    except EOFError:
        return None
    return username, password


def run_shell(handler: ClientCommandHandler):
    while True:
        try:
            line = input("ftp> ")
        except EOFError:
            print()
            break
        try:
            if not handler.dispatch(line):
                return
        except (FTPClientError, OSError) as e:
            logger.error(f"Command failed: {e}")
            print(e)
    handler.session.close()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if not args.ip:
        print(USAGE)
        return 1

    session = Session(args.ip, args.port, timeout=args.timeout)
    session.connect()

    if session.is_connected:
        credentials = prompt_credentials()
        if credentials is not None:
            if not session.login(*credentials):
                print("Login failed; continuing without authentication.")

    try:
        run_shell(ClientCommandHandler(session))
    except KeyboardInterrupt:
        print()
        logger.info("Interrupted by user")
        session.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
