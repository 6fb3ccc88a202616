"""Argument parser configuration for the numberdesk CLI"""

import argparse
from datetime import date


## Argument Adding Utilities

def add_selection_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the id selection and paging arguments shared by batch commands."""

    parser.add_argument(
        "ids",
        nargs="*",
        help="Phone number ids to select on the loaded page"
    )
    parser.add_argument(
        "--all",
        dest="select_all",
        action="store_true",
        help="Select every number on the loaded page"
    )
    parser.add_argument(
        "--page",
        type=int,
        default=1,
        help="Page of the number list to load (default: 1)"
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Numbers per page (default: api.page_size from config)"
    )
    parser.add_argument(
        "-y", "--yes",
        dest="assume_yes",
        action="store_true",
        help="Do not ask for confirmation"
    )


## Command Setup Functions

def setup_batch_commands(subparsers) -> None:
    """Setup assign, unassign, delete and reputation commands."""

    assign_parser = subparsers.add_parser(
        "assign",
        help="Assign available numbers to a user",
        description="Assign the selected available numbers to a user account"
    )
    add_selection_arguments(assign_parser)
    assign_parser.add_argument(
        "--user",
        required=True,
        help="Id of the user receiving the numbers"
    )
    assign_parser.add_argument(
        "--billing-start",
        type=date.fromisoformat,
        default=None,
        help="Billing start date, YYYY-MM-DD (default: today)"
    )
    assign_parser.add_argument(
        "--notes",
        default="",
        help="Assignment notes"
    )

    unassign_parser = subparsers.add_parser(
        "unassign",
        help="Unassign assigned numbers",
        description="Return the selected assigned numbers to the pool"
    )
    add_selection_arguments(unassign_parser)
    unassign_parser.add_argument(
        "--reason",
        default="Bulk unassigned by admin",
        help="Reason recorded with the unassignment"
    )
    unassign_parser.add_argument(
        "--keep-billing",
        action="store_true",
        help="Do not cancel pending billing records"
    )
    unassign_parser.add_argument(
        "--refund",
        type=float,
        default=None,
        help="Create a refund of this amount per number"
    )

    delete_parser = subparsers.add_parser(
        "delete",
        help="Delete numbers that are not assigned",
        description="Permanently delete the selected numbers (assigned numbers are skipped)"
    )
    add_selection_arguments(delete_parser)

    reputation_parser = subparsers.add_parser(
        "reputation",
        help="Check reputation of numbers",
        description="Refresh reputation data one number at a time with a randomised pause"
    )
    add_selection_arguments(reputation_parser)


def setup_config_commands(subparsers) -> None:
    """Setup the config command."""

    config_parser = subparsers.add_parser(
        "config",
        help="Show or change settings",
        description="Show or change persistent settings"
    )
    config_sub = config_parser.add_subparsers(dest="config_command", required=True)

    config_sub.add_parser("show", help="Print the current configuration")

    set_parser = config_sub.add_parser("set", help="Set a configuration value")
    set_parser.add_argument("key", help="Dotted key, e.g. batch.reputation_delay_max")
    set_parser.add_argument("value", help="New value")

    config_sub.add_parser("reset", help="Restore default settings")


def setup_argument_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""

    parser = argparse.ArgumentParser(
        prog="numberdesk",
        description="Batch administration for the phone number pool"
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    setup_batch_commands(subparsers)
    setup_config_commands(subparsers)

    return parser
