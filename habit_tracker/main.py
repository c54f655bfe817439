#!/usr/bin/env python3
"""
habit-tracker - track daily habits, streaks and success rates from the terminal.
"""

import argparse
import logging
import sys

from habit_tracker.core.config import load_config, save_config, get_default_config_path
from habit_tracker.core.models import Frequency, Mood
from habit_tracker.core.paths import get_path_manager
from habit_tracker.utils.log import configure_logging
from habit_tracker.commands import (
    ManageCommand,
    TrackCommand,
    StatsCommand,
    ExportCommand,
    ConfigCommand,
    CategoryCommand
)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all subcommands."""
    parser = argparse.ArgumentParser(
        description="Track habits, streaks and success rates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  habit-tracker add "Read" --unit pages   # Start tracking a habit
  habit-tracker done Read                 # Mark it done today
  habit-tracker done Read --date 2024-05-01
  habit-tracker list                      # Streaks at a glance
  habit-tracker stats Read --days 90      # Detailed statistics
  habit-tracker heatmap Read              # Calendar density grid
  habit-tracker category assign           # Group habits by keyword
  habit-tracker export --format csv       # Export a summary
        """
    )

    default_config = get_default_config_path()

    parser.add_argument(
        '--config',
        help=f'Path to configuration file (default: {default_config})',
        default=None
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Verbose output'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # Add command
    add_parser = subparsers.add_parser('add', help='Add a habit')
    add_parser.add_argument('name', help='Habit name')
    add_parser.add_argument('--description', help='Longer description')
    add_parser.add_argument(
        '--frequency',
        choices=[f.value for f in Frequency],
        default=Frequency.DAILY.value,
        help='How often the habit is meant to be done'
    )
    add_parser.add_argument('--color', help='Display color, e.g. "#4A90D9"')
    add_parser.add_argument('--icon', help='Icon name')
    add_parser.add_argument('--target', type=int, help='Target value per completion')
    add_parser.add_argument('--unit', help='Unit of the target value')
    add_parser.add_argument('--category', help='Category name or id')

    # List command
    list_parser = subparsers.add_parser('list', help='List habits with their streaks')
    list_parser.add_argument(
        '--all',
        action='store_true',
        help='Include archived habits'
    )
    list_parser.add_argument('--category', help='Only habits in this category')

    # Done command
    done_parser = subparsers.add_parser('done', help='Mark a habit as done')
    done_parser.add_argument('habit', help='Habit name or id')
    done_parser.add_argument('--date', help='Day of the completion (YYYY-MM-DD, default: today)')
    done_parser.add_argument('--value', type=int, help='Amount achieved')
    done_parser.add_argument('--note', help='Free-form note')
    done_parser.add_argument('--mood', choices=[m.value for m in Mood], help='How it felt')

    # Skip command
    skip_parser = subparsers.add_parser('skip', help='Mark a habit as skipped')
    skip_parser.add_argument('habit', help='Habit name or id')
    skip_parser.add_argument('--date', help='Day to skip (YYYY-MM-DD, default: today)')
    skip_parser.add_argument('--note', help='Reason for skipping')

    # Archive and delete commands
    archive_parser = subparsers.add_parser('archive', help='Archive a habit')
    archive_parser.add_argument('habit', help='Habit name or id')

    delete_parser = subparsers.add_parser('delete', help='Delete a habit and its history')
    delete_parser.add_argument('habit', help='Habit name or id')

    # Stats command
    stats_parser = subparsers.add_parser('stats', help='Show streaks and success rates')
    stats_parser.add_argument('habit', nargs='?', help='Habit name or id (default: all habits)')
    stats_parser.add_argument('--days', type=int, help='Success-rate window in days')
    stats_parser.add_argument('--json', action='store_true', help='Print JSON')

    # Heatmap command
    heatmap_parser = subparsers.add_parser('heatmap', help='Show a completion calendar')
    heatmap_parser.add_argument('habit', help='Habit name or id')
    heatmap_parser.add_argument('--weeks', type=int, default=12, help='Number of weeks to show')

    # Category command
    category_parser = subparsers.add_parser('category', help='Manage habit categories')
    category_sub = category_parser.add_subparsers(dest='category_action', help='Category actions')
    category_sub.add_parser('list', help='List categories')
    category_add = category_sub.add_parser('add', help='Add a category')
    category_add.add_argument('name', help='Category name')
    category_add.add_argument('--color', help='Display color')
    category_add.add_argument('--icon', help='Icon')
    category_delete = category_sub.add_parser('delete', help='Delete a category')
    category_delete.add_argument('category', help='Category name or id')
    category_sub.add_parser('assign', help='Assign uncategorized habits by keyword')

    # Export command
    export_parser = subparsers.add_parser('export', help='Export habit data')
    export_parser.add_argument(
        '--format',
        choices=['json', 'csv'],
        default='json',
        help='Export format'
    )
    export_parser.add_argument('--output', '-o', metavar='PATH', help='Write to a file instead of stdout')

    # Config command
    config_parser = subparsers.add_parser('config', help='Show or change settings')
    config_parser.add_argument('--timezone', help='"local" or an IANA zone such as "Europe/Berlin"')
    config_parser.add_argument('--window', type=int, help='Default success-rate window in days')
    config_parser.add_argument('--first-day', choices=['sunday', 'monday'], help='First day of the week')
    config_parser.add_argument(
        '--log-to-file',
        choices=['on', 'off'],
        help='Write a rotating log file in the log directory'
    )

    return parser


def main(argv=None):
    """Main entry point for habit-tracker."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Show help if no command specified
    if not args.command:
        parser.print_help()
        return 1

    config = load_config(args.config)

    log_file = str(get_path_manager().log_path) if config.log_to_file else None
    configure_logging(verbose=args.verbose, log_file=log_file)
    logger = logging.getLogger(__name__)

    if args.verbose:
        actual_config_path = args.config if args.config else get_default_config_path()
        print(f"Using config: {actual_config_path}")
        print(f"Using data: {config.data_path}")

    try:
        if args.command == 'add':
            success = ManageCommand(config, verbose=args.verbose).add(
                args.name,
                description=args.description,
                frequency=args.frequency,
                color=args.color,
                icon=args.icon,
                target=args.target,
                unit=args.unit,
                category=args.category,
            )

        elif args.command == 'list':
            success = ManageCommand(config, verbose=args.verbose).list_habits(
                include_archived=args.all, category=args.category
            )

        elif args.command == 'archive':
            success = ManageCommand(config, verbose=args.verbose).archive(args.habit)

        elif args.command == 'delete':
            success = ManageCommand(config, verbose=args.verbose).delete(args.habit)

        elif args.command == 'done':
            success = TrackCommand(config, verbose=args.verbose).done(
                args.habit,
                date_str=args.date,
                value=args.value,
                note=args.note,
                mood=args.mood,
            )

        elif args.command == 'skip':
            success = TrackCommand(config, verbose=args.verbose).skip(
                args.habit, date_str=args.date, note=args.note
            )

        elif args.command == 'stats':
            success = StatsCommand(config, verbose=args.verbose).run(
                ref=args.habit, days=args.days, as_json=args.json
            )

        elif args.command == 'heatmap':
            success = StatsCommand(config, verbose=args.verbose).heatmap(args.habit, weeks=args.weeks)

        elif args.command == 'category':
            cmd = CategoryCommand(config, verbose=args.verbose)
            if args.category_action == 'add':
                success = cmd.add(args.name, color=args.color, icon=args.icon)
            elif args.category_action == 'delete':
                success = cmd.delete(args.category)
            elif args.category_action == 'assign':
                success = cmd.assign()
            else:
                success = cmd.list_categories()

        elif args.command == 'export':
            success = ExportCommand(config, verbose=args.verbose).run(fmt=args.format, output=args.output)

        elif args.command == 'config':
            log_to_file = None
            if args.log_to_file is not None:
                log_to_file = args.log_to_file == 'on'
            cmd = ConfigCommand(config, verbose=args.verbose)
            success = cmd.run(
                timezone=args.timezone,
                window=args.window,
                first_day=args.first_day,
                log_to_file=log_to_file,
            )
            if success:
                save_config(config, args.config)

        else:
            print(f"Unknown command '{args.command}'.")
            return 1

        return 0 if success else 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        return 130
    except Exception as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}")
        if not args.verbose:
            print("Re-run with --verbose for more detail.")
        else:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
