"""Main CLI entry point."""

import asyncio
from typing import Optional

from rich.console import Console

from numberdesk.core.api import AssignmentRequest, UnassignRequest
from numberdesk.core.batch import ActionKind
from numberdesk.features.batch import run_batch_action
from numberdesk.utils.config_manager import ConfigManager
from numberdesk.utils.errors import NumberDeskError, format_error_message
from numberdesk.utils.logging import SensitiveDataMasker, async_log_call, get_logger, init_logging

from .cli_parser import setup_argument_parser

logger = get_logger(__name__)

BATCH_COMMANDS = ("assign", "unassign", "delete", "reputation")


def build_assignment(args) -> AssignmentRequest:
    return AssignmentRequest(
        user_id=args.user,
        billing_start_date=args.billing_start,
        notes=args.notes,
    )


def build_unassignment(args) -> UnassignRequest:
    refund: Optional[float] = args.refund
    return UnassignRequest(
        reason=args.reason,
        cancel_pending_billing=not args.keep_billing,
        create_refund=refund is not None,
        refund_amount=refund or 0.0,
    )


async def handle_batch_command(args, console: Console) -> int:
    """Run one of the batch commands.

    Returns:
        Exit code (0 = every call succeeded, 1 = nothing ran or some calls failed)
    """
    action = ActionKind.from_string(args.command)

    if not args.ids and not args.select_all:
        console.print(f"[yellow]{action.rule.empty_message}[/yellow]")
        return 1

    assignment = build_assignment(args) if action is ActionKind.ASSIGN else None
    unassignment = build_unassignment(args) if action is ActionKind.UNASSIGN else None

    summary = await run_batch_action(
        action,
        ids=args.ids,
        select_all=args.select_all,
        page=args.page,
        limit=args.limit,
        assume_yes=args.assume_yes,
        assignment=assignment,
        unassignment=unassignment,
        console=console,
    )

    if summary is None:
        return 1
    return 1 if summary.has_failures else 0


def handle_config_command(args, console: Console) -> int:
    """Show, set or reset persistent settings."""
    config = ConfigManager()

    if args.config_command == "show":
        console.print_json(data=SensitiveDataMasker().mask_dict(config.config.model_dump()))
        return 0

    if args.config_command == "reset":
        config.reset_to_defaults()
        console.print("[green]Configuration reset to defaults[/green]")
        return 0

    config.set_config(args.key, args.value)
    console.print(f"[green]{args.key} = {config.get_config(args.key)!r}[/green]")
    return 0


@async_log_call
async def dispatch_command(args, console: Console) -> int:
    """Dispatch a parsed command.

    Args:
        args: Parsed arguments
        console: Rich console

    Returns:
        Exit code (0 = success, 1 = error)
    """
    try:
        if args.command in BATCH_COMMANDS:
            return await handle_batch_command(args, console)
        if args.command == "config":
            return handle_config_command(args, console)
        raise ValueError(f"Unknown command: {args.command}")

    except NumberDeskError as e:
        logger.error(f"Command failed: {e.message}")
        console.print(f"[red]Error: {format_error_message(e)}[/red]")
        return 1

    except ValueError as e:
        logger.error(f"Invalid command: {e}")
        console.print(f"[red]Error: {e}[/red]")
        return 1

    except Exception as e:
        logger.error(f"Command failed: {e}")
        console.print(f"[red]Unexpected error: {e}[/red]")
        return 1


def main(argv=None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code
    """
    console = Console()

    try:
        parser = setup_argument_parser()
        args = parser.parse_args(argv)

        try:
            config = ConfigManager()
        except NumberDeskError as e:
            logger.error(f"Configuration error: {e.message}")
            console.print(f"[red]Configuration error: {format_error_message(e)}[/red]")
            return 1

        init_logging(args.log_level or config.config.logging.log_level)

        return asyncio.run(dispatch_command(args, console))

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return 130  # Standard SIGINT exit code

    except Exception as e:
        logger.error(f"Fatal error: {e}")
        console.print(f"[red]Fatal error: {e}[/red]")
        return 1


if __name__ == "__main__":
    exit(main())
