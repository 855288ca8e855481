import os
import time
import logging

class AlertState:
    """Timestamp file tracking when the last critical alert went out."""

    def __init__(self, path, interval_minutes, dry_run=False):
        self.path = path
        self.interval_seconds = interval_minutes * 60
        self.dry_run = dry_run

    def last_alert_time(self):
        try:
            with open(self.path, 'r') as state_file:
                return int(state_file.read().strip())
        except FileNotFoundError:
            return None
        except (OSError, ValueError) as e:
            logging.warning(f"Unreadable alert timestamp file {self.path}: {e}")
            return None

    def should_send(self, now=None):
        last_alert = self.last_alert_time()
        if last_alert is None:
            return True
        if now is None:
            now = time.time()
        return now - last_alert >= self.interval_seconds

    def record(self, now=None):
        if now is None:
            now = time.time()
        if self.dry_run:
            logging.info("DRY RUN: Would update alert timestamp")
            return
        with open(self.path, 'w') as state_file:
            state_file.write(f"{int(now)}\n")
        logging.info("Updated alert timestamp for repeated alerts")

    def clear(self):
        if not os.path.exists(self.path):
            return False
        if not self.dry_run:
            try:
                os.remove(self.path)
            except FileNotFoundError:
                return False
        logging.info("Removed alert timestamp file as disk usage is no longer critical")
        return True
