"""Command line interface for the squash tool."""

from dataclasses import replace
from pathlib import Path
from typing import Optional
import argparse
import asyncio
import logging
import os
import sys

from .core.config import SquashConfig, STRATEGIES
from .core.resolver import SelectionResolver
from .core.types import (
    SquashError, NoWorkspaceError, RewriteFailedError, SelectionMode, SquashPlan, PushOutcome
)
from .git.operations import GitOperations
from .git.rewrite import build_rebase_instructions
from .ai.claude import ClaudeClient
from .ai.mock import MockAIClient
from .ui.console import ConsoleUI
from .tool import SquashTool

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING

    # Configure root logger
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    # Reduce noise from external libraries
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('anthropic').setLevel(logging.WARNING)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the command line argument parser."""
    parser = argparse.ArgumentParser(
        prog='squashmaster',
        description='SquashMaster - Unite a run of git commits into one',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                              # Pick the oldest commit to squash interactively
  %(prog)s --pick                       # Pick several commits interactively
  %(prog)s --from a1b2c3d -m "Add cache"  # Squash HEAD down to a1b2c3d
  %(prog)s --commits a1b2c3d e4f5a6b    # Squash exactly these consecutive commits
  %(prog)s --from a1b2c3d --dry-run     # Show the plan without rewriting
  %(prog)s --from a1b2c3d --push --yes  # Squash and push without prompts
  %(prog)s --list                       # Show the commit log

Environment Variables:
  ANTHROPIC_API_KEY      Required for --suggest-message (unless --test-mode)
  SQUASHMASTER_VERBOSE   Set to enable debug logging
        """
    )

    parser.add_argument(
        '--repo', '-C',
        type=Path,
        help='Repository working directory (default: current directory)',
        metavar='PATH'
    )

    parser.add_argument(
        '--list',
        action='store_true',
        help='List commits newest first and exit'
    )

    # Selection
    selection_group = parser.add_mutually_exclusive_group()
    selection_group.add_argument(
        '--from',
        dest='from_commit',
        help='Oldest commit to include; everything newer is squashed with it',
        metavar='COMMIT'
    )

    selection_group.add_argument(
        '--commits',
        nargs='+',
        help='Consecutive commits to squash, in any order',
        metavar='COMMIT'
    )

    selection_group.add_argument(
        '--pick',
        action='store_true',
        help='Pick several commits interactively instead of a boundary'
    )

    parser.add_argument(
        '--message', '-m',
        help='Message for the squashed commit (default: newest commit message)',
        metavar='MESSAGE'
    )

    parser.add_argument(
        '--strategy',
        choices=STRATEGIES,
        default='auto',
        help='Rewrite strategy (default: %(default)s)'
    )

    parser.add_argument(
        '--remote',
        default='origin',
        help='Remote to push to (default: %(default)s)',
        metavar='NAME'
    )

    parser.add_argument(
        '--push',
        action='store_true',
        help='Push the branch after squashing'
    )

    # Execution control
    execution_group = parser.add_mutually_exclusive_group()
    execution_group.add_argument(
        '--dry-run',
        action='store_true',
        help='Show plan without executing'
    )

    execution_group.add_argument(
        '--yes', '-y',
        action='store_true',
        help='Do not ask for confirmation'
    )

    # AI message suggestion
    parser.add_argument(
        '--suggest-message',
        action='store_true',
        help='Let Claude draft the default commit message'
    )

    ai_group = parser.add_mutually_exclusive_group()
    ai_group.add_argument(
        '--test-mode',
        action='store_true',
        help='Use mock AI client instead of Claude (no API key required)'
    )

    ai_group.add_argument(
        '--model',
        default='claude-3-7-sonnet-20250219',
        help='Claude model to use (default: %(default)s)',
        metavar='MODEL'
    )

    # Output control
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose logging'
    )

    return parser


def validate_environment(use_test_mode: bool) -> None:
    """Validate required environment variables."""
    if not use_test_mode and not os.environ.get('ANTHROPIC_API_KEY'):
        print("Error: ANTHROPIC_API_KEY environment variable not set", file=sys.stderr)
        print("Either set the API key or use --test-mode for testing", file=sys.stderr)
        sys.exit(1)


def create_ai_client(args, config: SquashConfig):
    """Create appropriate AI client based on arguments."""
    if not args.suggest_message:
        return None
    if args.test_mode:
        logger.info("Using mock AI client")
        return MockAIClient(config)
    logger.info("Using Claude AI client")
    return ClaudeClient(config=config)


def resolve_workspace(repo: Optional[Path]) -> Path:
    """Directory the squash runs in."""
    path = repo if repo is not None else Path.cwd()
    if not path.is_dir():
        raise NoWorkspaceError(f"No workspace folder found at {path}")
    return path


def display_plan(plan: SquashPlan, strategy: str) -> None:
    """Display the squash plan to the user."""
    print("\n" + "=" * 80)
    print("SQUASH PLAN")
    print("=" * 80)

    print(f"\nStrategy: {strategy}")
    print(f"Squashing {plan.count} commits:")
    for commit in plan.ordered_commits:
        print(f"  {commit.id}  {commit.subject}  ({commit.author})")
    if plan.preserved_commits:
        print(f"Keeping {len(plan.preserved_commits)} newer commit(s) on top")

    if strategy == "rebase":
        print("\nRebase script:")
        for instruction in build_rebase_instructions(plan):
            print(f"  {instruction}")

    print("\nCommit message:")
    print("-" * 40)
    for line in plan.result_message.split('\n'):
        print(line)
    print("-" * 40)

    print(f"\nSummary: {plan.summary_stats()}")


def confirm_execution() -> bool:
    """Ask user to confirm execution."""
    while True:
        response = input("\nProceed with squashing? (y/n): ").lower().strip()
        if response in ('y', 'yes'):
            return True
        elif response in ('n', 'no'):
            return False
        else:
            print("Please enter 'y' or 'n'")


async def build_plan(tool: SquashTool, ui: ConsoleUI, args) -> Optional[SquashPlan]:
    """Resolve the selection from flags, falling back to the pickers."""
    history = await tool.load_history()
    resolver = SelectionResolver(history)

    if args.from_commit:
        plan = resolver.from_boundary(resolver.find(args.from_commit), args.message)
    elif args.commits:
        plan = resolver.from_selection([resolver.find(ref) for ref in args.commits], args.message)
    elif args.pick:
        selected = ui.select_commits(history)
        if not selected:
            return None
        plan = resolver.from_selection(selected, args.message)
    else:
        boundary = ui.select_boundary(history)
        if boundary is None:
            return None
        plan = resolver.from_boundary(boundary, args.message)

    if args.message:
        return plan

    default = await tool.suggest_message(list(plan.ordered_commits))
    if args.yes:
        entered = ""
    else:
        entered = ui.prompt_message(default)
        if entered is None:
            return None
    return replace(plan, result_message=entered or default)


async def run_pipeline(tool: SquashTool, ui: ConsoleUI, args) -> int:
    """Select, rewrite and optionally push, step by step."""
    plan = await build_plan(tool, ui, args)
    if plan is None:
        print("Aborted.")
        return 0

    strategy = tool.executor.choose_strategy(plan, args.strategy)
    display_plan(plan, strategy)

    if args.dry_run:
        print("\nDry run complete. Run without --dry-run to apply changes.")
        return 0

    if not args.yes and not confirm_execution():
        print("Aborted.")
        return 0

    result = await tool.execute(plan, strategy)
    print(f"\nAll {plan.count} commits squashed into {result.new_head}")

    if args.push:
        confirm = (lambda warning: True) if args.yes else ui.confirm
    elif not args.yes and ui.offer_push("The squash is local only."):
        confirm = ui.confirm
    else:
        return 0

    outcome = await tool.sync_remote(confirm)
    if outcome is PushOutcome.ABORTED:
        print("Push cancelled; the remote was not changed.")
    elif outcome is PushOutcome.PUBLISHED:
        print(f"Branch has been published to {tool.config.remote_name} and pushed")
    else:
        print(f"Changes have been force-pushed to {tool.config.remote_name}")
    return 0


async def async_main(args: Optional[list] = None) -> int:
    """Async main entry point for the CLI."""
    parser = create_argument_parser()
    parsed_args = parser.parse_args(args)

    # Setup logging
    env_verbose = bool(os.environ.get('SQUASHMASTER_VERBOSE', ""))
    verbose = parsed_args.verbose or env_verbose
    setup_logging(verbose)

    try:
        # Create configuration
        config = SquashConfig.from_cli_args(parsed_args)
        logger.debug("Configuration: %s", config)

        repo_path = resolve_workspace(parsed_args.repo)
        git_ops = GitOperations(repo_path, config=config)

        if parsed_args.list:
            ConsoleUI().display_commits(git_ops.list_commits())
            return 0

        if parsed_args.suggest_message:
            validate_environment(parsed_args.test_mode)

        ui = ConsoleUI()
        tool = SquashTool(git_ops, config, progress=ui,
                          ai_client=create_ai_client(parsed_args, config))

        stepwise = (parsed_args.from_commit or parsed_args.commits or parsed_args.dry_run
                    or parsed_args.yes or parsed_args.push)
        if stepwise:
            return await run_pipeline(tool, ui, parsed_args)

        mode = SelectionMode.EXPLICIT if parsed_args.pick else SelectionMode.BOUNDARY
        result = await tool.run(ui, mode, parsed_args.message, parsed_args.strategy)
        if result.cancelled:
            print("Aborted.")
        return 0

    except RewriteFailedError as e:
        logger.error("Rewrite failed: %s", e.output)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except SquashError as e:
        logger.debug("Squash error: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user.", file=sys.stderr)
        return 1

    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        print(f"Unexpected error: {e}", file=sys.stderr)
        return 1


def main(args: Optional[list] = None) -> int:
    """Main entry point for the CLI."""
    return asyncio.run(async_main(args))


if __name__ == '__main__':
    sys.exit(main())
