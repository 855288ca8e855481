import os
import sys
import logging
import argparse

from .config import load_config
from .logging_setup import setup_logging
from .filesystem import is_script_running
from .notifications import NotificationManager
from .monitor import DiskMonitor
from .transfer import TransferManager
from . import __version__

def _common_arguments(parser, name):
    parser.add_argument('--dry-run', action='store_true', help='Show what would be done without changing anything')
    parser.add_argument('--console-log', action='store_true', help='Log to console in addition to file')
    parser.add_argument('--config', help='Path to config')
    parser.add_argument('--version', action='version', version=f'{name} v{__version__}')

def _load(args, require_ftp=False):
    try:
        config = load_config(args.config, require_ftp=require_ftp)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        sys.exit(1)
    return config, setup_logging(config, args.console_log)

def _exit_if_running(logger):
    script_name = os.path.basename(sys.argv[0])
    is_running, running_instances = is_script_running(script_name)
    if is_running:
        logger.error("Another instance is already running:")
        for instance in running_instances:
            logger.error(f"  {instance}")
        sys.exit(1)

def disk_monitor_main(argv=None):
    parser = argparse.ArgumentParser(description='Disk usage monitor')
    parser.add_argument('mode', nargs='?', choices=['run', 'repeat-check'], default='run',
                        help="'repeat-check' only re-sends critical alerts that are due")
    _common_arguments(parser, 'Housekeeper Disk Monitor')
    args = parser.parse_args(argv)

    config, logger = _load(args)
    _exit_if_running(logger)

    notification_mgr = NotificationManager(config, args.dry_run)
    monitor = DiskMonitor(config, args.dry_run, notification_mgr=notification_mgr)

    try:
        if args.mode == 'repeat-check':
            monitor.repeat_check()
        else:
            monitor.run()
    except Exception as e:
        logger.error(f"Error during execution: {e}")
        notification_mgr.notify_error(str(e))
        raise
    return 0

def ftp_transfer_main(argv=None):
    parser = argparse.ArgumentParser(description='FTP upload with retries')
    parser.add_argument('mode', nargs='?', choices=['upload', 'retry'], default='upload',
                        help="'retry' also re-attempts transfers recorded as failed")
    parser.add_argument('--retry-only', action='store_true',
                        help='Only re-attempt recorded failures, skip the directory scan')
    _common_arguments(parser, 'Housekeeper FTP Transfer')
    args = parser.parse_args(argv)

    config, logger = _load(args, require_ftp=True)
    _exit_if_running(logger)

    logger.info("=== FTP File Transfer Script Started ===")

    local_dir = config['Paths']['LOCAL_DIR']
    if not os.path.isdir(local_dir):
        logger.error(f"ERROR: Local directory not found: {local_dir}")
        sys.exit(1)

    notification_mgr = NotificationManager(config, args.dry_run)
    transfer_mgr = TransferManager(config, notification_mgr, dry_run=args.dry_run)

    try:
        still_failed = []
        if not args.retry_only:
            still_failed = transfer_mgr.process_directory().failed
        if args.retry_only or args.mode == 'retry':
            still_failed = transfer_mgr.retry_failed_transfers().failed
    except Exception as e:
        logger.error(f"Error during execution: {e}")
        notification_mgr.notify_error(str(e))
        raise

    logger.info("=== FTP File Transfer Script Completed ===")
    return 1 if still_failed else 0
