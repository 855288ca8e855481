import shutil
import logging
import subprocess
from dataclasses import dataclass, field

from .filesystem import delete_old_files, get_fs_usage, _format_bytes

LOG_PATTERNS = ('*.log', '*.gz')

@dataclass(frozen=True)
class CleanupStep:
    description: str
    path_key: str
    days: int
    patterns: tuple = ()

STANDARD_PLAN = (
    CleanupStep("Cleaned temporary files", 'TEMP_DIR', 7),
    CleanupStep("Removed log files older than 30 days", 'LOG_DIR', 30, LOG_PATTERNS),
    CleanupStep("Removed backup files older than 90 days", 'BACKUP_DIR', 90),
)

EMERGENCY_PLAN = (
    CleanupStep("Cleaned temporary files", 'TEMP_DIR', 7),
    CleanupStep("Removed log files older than 15 days", 'LOG_DIR', 15, LOG_PATTERNS),
    CleanupStep("Removed backup files older than 60 days", 'BACKUP_DIR', 60),
)

# Run after the package cache during an emergency
EMERGENCY_EXTRA_PLAN = (
    CleanupStep("Removed temporary files older than 1 day", 'TEMP_DIR', 1),
    CleanupStep("Removed log files older than 7 days", 'LOG_DIR', 7, ('*.log',)),
)

@dataclass
class CleanupReport:
    actions: list = field(default_factory=list)
    files_deleted: int = 0
    bytes_freed: int = 0

    def add(self, description, count=0, size=0):
        self.actions.append(description)
        self.files_deleted += count
        self.bytes_freed += size

def clean_package_cache(dry_run=False):
    """
    Clean the apt package cache when apt-get is available.

    Returns:
        bool: True if the cache was cleaned, False if apt-get is missing or failed
    """
    apt_get = shutil.which('apt-get')
    if not apt_get:
        logging.debug("apt-get not found, skipping package cache cleanup")
        return False

    logging.info("Cleaning apt package cache")
    if dry_run:
        logging.info("DRY RUN: Would run apt-get clean")
        return True

    try:
        subprocess.run([apt_get, 'clean'], capture_output=True, text=True, check=True)
        return True
    except subprocess.CalledProcessError as e:
        logging.error(f"apt-get clean failed with exit code {e.returncode}: {e.stderr.strip()}")
    except OSError as e:
        logging.error(f"Unable to run apt-get clean: {e}")
    return False

class CleanupManager:
    def __init__(self, config, dry_run=False):
        self.config = config
        self.dry_run = dry_run
        self.monitor_path = config['Paths']['MONITOR_PATH']
        self.clean_packages = config['Settings']['CLEAN_PACKAGE_CACHE']

    def check_usage(self):
        current_usage = get_fs_usage(self.monitor_path)
        logging.info(f"Current disk usage: {current_usage}%")
        return current_usage

    def _run_steps(self, steps, report):
        for step in steps:
            directory = self.config['Paths'][step.path_key]
            if step.patterns:
                logging.info(f"Cleaning {', '.join(step.patterns)} files older than {step.days} days in {directory}")
            else:
                logging.info(f"Cleaning files older than {step.days} days in {directory}")

            count, size = delete_old_files(directory, step.days, step.patterns, self.dry_run)
            if count:
                logging.info(f"{'Would remove' if self.dry_run else 'Removed'} {count} files ({_format_bytes(size)}) from {directory}")
            report.add(step.description, count, size)

    def _clean_packages(self, report):
        if not self.clean_packages:
            return
        if clean_package_cache(self.dry_run):
            report.add("Cleaned package cache")

    def run_standard(self):
        report = CleanupReport()
        self._run_steps(STANDARD_PLAN, report)
        self._clean_packages(report)
        return report

    def run_emergency(self):
        logging.info("Performing emergency cleanup procedures...")
        report = CleanupReport()
        self._run_steps(EMERGENCY_PLAN, report)
        self._clean_packages(report)

        logging.info("Performing additional emergency cleanup procedures...")
        self._run_steps(EMERGENCY_EXTRA_PLAN, report)
        return report
