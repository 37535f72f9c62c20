import argparse
import logging
import sys
import webbrowser
from datetime import datetime, timedelta, timezone

from api_client import SpeedrunClient
from config import CONFIG_FILE, WATCH_DATA_FILE, LOG_FILE, DEFAULT_DEFER_DAYS
from errors import ConfigurationError, RecordError
from report import build_report, render_report, unread_notifications
from resolver import RecordResolver
from settings import SettingsManager
from watch_data import WatchDataManager, parse_timestamp

logger = logging.getLogger(__name__)


def setup_logging(log_file, verbose=False):
    logging.basicConfig(filename=log_file, level=logging.DEBUG if verbose else logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(name)s - %(message)s')


def cmd_records(args):
    settings = SettingsManager(args.config)
    watch_data = WatchDataManager(args.data)
    client = SpeedrunClient(api_key=settings.api_key)
    notifications = unread_notifications(client, settings.api_key)
    resolver = RecordResolver(settings.games, client, watch_data)
    for line in render_report(build_report(settings.games, resolver, watch_data), notifications):
        print(line)


def cmd_check(args):
    watch_data = WatchDataManager(args.data)
    watch_data.mark_watched(args.run_id)
    watch_data.save()


def cmd_unwatchable(args):
    watch_data = WatchDataManager(args.data)
    watch_data.mark_unwatchable(args.run_id)
    watch_data.save()


def cmd_defer(args):
    if args.until:
        try:
            until = parse_timestamp(args.until)
        except ValueError as e:
            raise ConfigurationError(f"Invalid timestamp {args.until!r}: {e}") from e
    else:
        until = datetime.now(timezone.utc) + timedelta(days=args.days)
    watch_data = WatchDataManager(args.data)
    watch_data.defer(args.run_id, until)
    watch_data.save()


def cmd_watch(args):
    settings = SettingsManager(args.config)
    run = SpeedrunClient(api_key=settings.api_key).fetch_run(args.run_id)
    for url in run.videos or [run.weblink]:
        if url and not webbrowser.open(url):
            logger.warning(f"Could not open {url}")
    watch_data = WatchDataManager(args.data)
    watch_data.mark_watched(run.id)
    watch_data.save()


def build_parser():
    parser = argparse.ArgumentParser(prog='srcom-records',
                                     description="Lists new speedrun.com records you have not watched yet.")
    parser.add_argument('--config', default=CONFIG_FILE, help="configuration file (default: %(default)s)")
    parser.add_argument('--data', default=WATCH_DATA_FILE, help="watch data file (default: %(default)s)")
    parser.add_argument('--log-file', default=LOG_FILE, help="log file (default: %(default)s)")
    parser.add_argument('-v', '--verbose', action='store_true', help="log debug messages")
    parser.set_defaults(func=cmd_records)
    subparsers = parser.add_subparsers(dest='command')

    subparsers.add_parser('records', help="show new records").set_defaults(func=cmd_records)

    check = subparsers.add_parser('check', help="mark a run as watched")
    check.add_argument('run_id')
    check.set_defaults(func=cmd_check)

    unwatchable = subparsers.add_parser('unwatchable', help="never consider a run as a record")
    unwatchable.add_argument('run_id')
    unwatchable.set_defaults(func=cmd_unwatchable)

    defer = subparsers.add_parser('defer', help="hide a run for a while")
    defer.add_argument('run_id')
    when = defer.add_mutually_exclusive_group()
    when.add_argument('--days', type=float, default=DEFAULT_DEFER_DAYS, help="days to defer (default: %(default)s)")
    when.add_argument('--until', help="ISO-8601 timestamp to defer until")
    defer.set_defaults(func=cmd_defer)

    watch = subparsers.add_parser('watch', help="open a run's videos and mark it as watched")
    watch.add_argument('run_id')
    watch.set_defaults(func=cmd_watch)
    return parser


def main(argv=None):
    """
    Uygulamanın ana giriş noktası. Süreç çıkış kodunu döndürür.
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    try:
        args.func(args)
    except (RecordError, OSError) as e:
        logger.error(f"{args.command or 'records'} failed: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
