import os
import math
import time
import shutil
import fnmatch
import logging
import psutil

SECONDS_PER_DAY = 86400

def get_fs_usage(path):
    """
    Get filesystem usage percentage for the given path, rounded up the way df reports it.

    Reserved blocks are excluded, so the value is used / (used + available).
    """
    usage = shutil.disk_usage(path)
    denominator = usage.used + usage.free
    if denominator == 0:
        return 0
    return math.ceil(usage.used * 100 / denominator)

def _format_bytes(bytes: int) -> str:
    """Format bytes into human readable format."""
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if bytes < 1024:
            return f"{bytes:.2f}{unit}"
        bytes /= 1024
    return f"{bytes:.2f}PB"

def file_age_days(path, now=None):
    """
    Whole days since the file was last modified, rounded down.

    Args:
        path (str): Path to the file
        now (float): Reference timestamp, defaults to the current time

    Returns:
        int: Age in days
    """
    if now is None:
        now = time.time()
    return int((now - os.lstat(path).st_mtime) // SECONDS_PER_DAY)

def matches_patterns(filename, patterns):
    if not patterns:
        return True
    return any(fnmatch.fnmatch(filename, pattern) for pattern in patterns)

def delete_old_files(directory, days, patterns=None, dry_run=False, now=None):
    """
    Recursively delete regular files older than the given number of days.

    A file qualifies when its age in whole days is greater than `days`,
    matching `find -mtime +days`. Symbolic links are neither followed nor removed.

    Args:
        directory (str): Directory to scan
        days (int): Minimum age in days, exclusive
        patterns (list): Optional glob patterns matched against file names
        dry_run (bool): If True, only log actions without performing them
        now (float): Reference timestamp, defaults to the current time

    Returns:
        tuple: (number of files deleted, bytes freed)
    """
    if not os.path.isdir(directory):
        logging.debug(f"Directory does not exist, skipping: {directory}")
        return 0, 0

    if now is None:
        now = time.time()

    deleted = 0
    freed = 0

    def _on_error(error):
        logging.warning(f"Error scanning {error.filename}: {error.strerror}")

    for root, _, files in os.walk(directory, onerror=_on_error):
        for file in files:
            if not matches_patterns(file, patterns):
                continue

            file_path = os.path.join(root, file)
            try:
                if os.path.islink(file_path) or not os.path.isfile(file_path):
                    continue
                if file_age_days(file_path, now) <= days:
                    continue

                file_size = os.path.getsize(file_path)
                if not dry_run:
                    os.remove(file_path)
                logging.debug(f"{'Would delete' if dry_run else 'Deleted'} {file_path} ({_format_bytes(file_size)})")
                deleted += 1
                freed += file_size
            except OSError as e:
                logging.warning(f"Error deleting file {file_path}: {e}")
                continue

    return deleted, freed

def list_regular_files(directory):
    """Names of regular files directly inside directory, sorted."""
    names = []
    for entry in os.scandir(directory):
        try:
            if entry.is_file():
                names.append(entry.name)
        except OSError as e:
            logging.warning(f"Error accessing {entry.path}: {e}")
    return sorted(names)

def is_script_running(script_name):
    """
    Check if another instance of the script is already running.

    Args:
        script_name (str): File name of the entry script, e.g. "disk-monitor.py"

    Returns:
        tuple: (bool, list) - (is_running, list of running instances)
    """
    current_process = psutil.Process()
    running_instances = []

    for process in psutil.process_iter(['pid', 'name', 'cmdline']):
        if process.pid == current_process.pid:
            continue
        try:
            if process.name().startswith('python') or process.name() == script_name[:15]:
                cmdline = process.cmdline()
                if len(cmdline) >= 2 and any(os.path.basename(arg) == script_name for arg in cmdline[1:]):
                    if not is_child_process(current_process, process):
                        running_instances.append(' '.join(cmdline))
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            continue

    return bool(running_instances), running_instances

def is_child_process(parent, child):
    """Check if one process is a child of another."""
    try:
        return child.ppid() == parent.pid
    except psutil.NoSuchProcess:
        return False
