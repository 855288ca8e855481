import logging
from enum import Enum
from dataclasses import dataclass, field

from .alert_state import AlertState
from .cleanup import CleanupManager
from .notifications import NotificationManager

class UsageLevel(Enum):
    OK = 'ok'
    WARNING = 'warning'
    CLEANUP = 'cleanup'
    CRITICAL = 'critical'

@dataclass
class MonitorResult:
    level: UsageLevel
    usage: int
    new_usage: int | None = None
    actions: list = field(default_factory=list)
    alerts_sent: list = field(default_factory=list)

class DiskMonitor:
    """
    Compare disk usage of the monitored filesystem against the configured
    thresholds, clean up when needed and report what was done.

    Levels are checked from the top down:
      usage >= CRITICAL   -> alert, emergency cleanup, follow-up report
      usage >  THRESHOLD  -> standard cleanup and report
      usage >= WARNING    -> warning only
    """

    def __init__(self, config, dry_run=False, notification_mgr=None, cleanup_mgr=None, alert_state=None):
        settings = config['Settings']
        self.config = config
        self.dry_run = dry_run
        self.warning = settings['WARNING_PERCENTAGE']
        self.threshold = settings['THRESHOLD_PERCENTAGE']
        self.critical = settings['CRITICAL_PERCENTAGE']
        self.notification_mgr = notification_mgr or NotificationManager(config, dry_run)
        self.cleanup_mgr = cleanup_mgr or CleanupManager(config, dry_run)
        self.alert_state = alert_state or AlertState(
            config['Paths']['ALERT_STATE_FILE'],
            settings['REPEAT_ALERT_INTERVAL'],
            dry_run
        )

    def classify(self, usage):
        if usage >= self.critical:
            return UsageLevel.CRITICAL
        if usage > self.threshold:
            return UsageLevel.CLEANUP
        if usage >= self.warning:
            return UsageLevel.WARNING
        return UsageLevel.OK

    def run(self):
        usage = self.cleanup_mgr.check_usage()
        level = self.classify(usage)
        result = MonitorResult(level=level, usage=usage)

        if level is UsageLevel.CRITICAL:
            self._handle_critical(result)
        elif level is UsageLevel.CLEANUP:
            self._handle_cleanup(result)
        elif level is UsageLevel.WARNING:
            logging.warning(f"Warning: Disk usage is above warning threshold ({self.warning:g}%).")
            if self.notification_mgr.notify_warning(usage):
                result.alerts_sent.append('warning')
        else:
            logging.info("Disk usage is below all thresholds. No action needed.")
            self.alert_state.clear()

        return result

    def _handle_critical(self, result):
        usage = result.usage
        logging.critical(f"CRITICAL: Disk usage is above critical threshold ({self.critical:g}%)!")

        if self.notification_mgr.notify_critical(usage):
            result.alerts_sent.append('critical')
        self.alert_state.record()

        report = self.cleanup_mgr.run_emergency()
        result.actions = report.actions

        new_usage = self.cleanup_mgr.check_usage()
        result.new_usage = new_usage
        logging.info(f"Emergency cleanup completed. New disk usage: {new_usage}%")

        alerts_disabled = False
        if new_usage < self.critical:
            alerts_disabled = self.alert_state.clear()

        if self.notification_mgr.notify_emergency_followup(usage, new_usage, alerts_disabled):
            result.alerts_sent.append('followup')

    def _handle_cleanup(self, result):
        usage = result.usage
        logging.info(f"Disk usage is above threshold ({self.threshold:g}%). Starting cleanup...")

        report = self.cleanup_mgr.run_standard()
        result.actions = report.actions

        new_usage = self.cleanup_mgr.check_usage()
        result.new_usage = new_usage
        logging.info(f"Cleanup completed. New disk usage: {new_usage}%")

        if self.notification_mgr.notify_cleanup(usage, new_usage, report.actions):
            result.alerts_sent.append('cleanup')

    def repeat_check(self):
        usage = self.cleanup_mgr.check_usage()
        result = MonitorResult(level=self.classify(usage), usage=usage)

        if usage < self.critical:
            logging.info("Disk usage is below critical threshold. No repeated alert needed.")
            self.alert_state.clear()
            return result

        if not self.alert_state.should_send():
            logging.info("Skipping repeated alert - not enough time has passed since last alert")
            return result

        logging.warning(f"Sending repeated critical alert (disk usage: {usage}%)")
        if self.notification_mgr.notify_critical_reminder(usage):
            result.alerts_sent.append('reminder')
        self.alert_state.record()
        return result
