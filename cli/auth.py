#!/usr/bin/env python3

import sys
from getpass import getpass

from errors import AuthenticationError
from logger import get_logger

logger = get_logger()


def cmd_register(args, services):
    """Create an account and sign in."""
    password = getpass("Password: ")
    if password != getpass("Repeat password: "):
        logger.error("Passwords do not match.")
        sys.exit(1)

    try:
        session = services.identity.register(args.email, password)
    except AuthenticationError as e:
        logger.error(f"Registration failed: {e}")
        sys.exit(1)

    services.ledgers.load(session.user_id)
    logger.info(f"✓ Registered and signed in as {session.email}")


def cmd_login(args, services):
    """Sign in with email and password."""
    try:
        session = services.identity.authenticate(args.email, getpass("Password: "))
    except AuthenticationError as e:
        logger.error(f"Sign-in failed: {e}")
        sys.exit(1)

    logger.info(f"✓ Signed in as {session.email}")


def cmd_logout(args, services):
    """Sign out the current user."""
    session = services.identity.current_session()
    if session is None:
        logger.info("Nobody is signed in.")
        return

    services.identity.sign_out()
    logger.info(f"✓ Signed out {session.email}")


def cmd_whoami(args, services):
    """Show the signed-in user."""
    session = services.identity.current_session()
    if session is None:
        logger.info("Nobody is signed in.")
        return
    logger.info(f"Signed in as {session.email} (ID: {session.user_id})")


def setup_parser(subparsers):
    """Setup auth subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "auth",
        help="Sign in and out",
        description="Register, sign in and sign out",
    )

    auth_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available auth commands",
        dest="subcommand",
        required=True,
    )

    register_parser = auth_subparsers.add_parser("register", help="Create an account")
    register_parser.add_argument("email", help="Email address")
    register_parser.set_defaults(func=cmd_register)

    login_parser = auth_subparsers.add_parser("login", help="Sign in")
    login_parser.add_argument("email", help="Email address")
    login_parser.set_defaults(func=cmd_login)

    logout_parser = auth_subparsers.add_parser("logout", help="Sign out")
    logout_parser.set_defaults(func=cmd_logout)

    whoami_parser = auth_subparsers.add_parser("whoami", help="Show the signed-in user")
    whoami_parser.set_defaults(func=cmd_whoami)
