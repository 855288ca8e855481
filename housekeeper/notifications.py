import logging
from notifications import NotificationHandler as BaseNotificationHandler
from . import __version__

EMAIL_SUBJECT = "Disk Usage Alert"
CRITICAL_EMAIL_SUBJECT = "CRITICAL: Disk Usage Alert"
WARNING_EMAIL_SUBJECT = "WARNING: Disk Usage Alert"

class NotificationManager:
    def __init__(self, config, dry_run=False):
        self.config = config
        self.dry_run = dry_run
        self.enabled = config['Settings']['NOTIFICATIONS_ENABLED']
        self.critical = config['Settings']['CRITICAL_PERCENTAGE']
        self.warning = config['Settings']['WARNING_PERCENTAGE']
        self.threshold = config['Settings']['THRESHOLD_PERCENTAGE']
        self.repeat_interval = config['Settings']['REPEAT_ALERT_INTERVAL']
        self.log_path = config['Paths']['LOG_PATH']
        self.handler = BaseNotificationHandler(config, __version__)

    def _send(self, title, body, severity):
        if self.dry_run:
            logging.info(f"DRY RUN: Skipping notification '{title}'")
            return False
        if not self.enabled:
            logging.debug(f"Notifications disabled, not sending '{title}'")
            return False
        return self.handler.send(title, body, severity)

    def notify_critical(self, usage):
        message = (
            "!!! CRITICAL DISK USAGE ALERT !!!\n\n"
            f"Current disk usage: {usage}% has exceeded the CRITICAL threshold of {self.critical:g}%\n\n"
            "URGENT ACTION REQUIRED!\n\n"
            "The system will now attempt emergency cleanup procedures, but manual intervention may be necessary.\n"
            "Please investigate immediately to prevent system failure.\n\n"
            f"Repeated alerts will be sent every {self.repeat_interval:g} minutes until the situation is resolved.\n"
        )
        return self._send(CRITICAL_EMAIL_SUBJECT, message, 'failure')

    def notify_critical_reminder(self, usage):
        message = (
            "!!! CRITICAL DISK USAGE ALERT - REMINDER !!!\n\n"
            f"Current disk usage: {usage}% is still above the CRITICAL threshold of {self.critical:g}%\n\n"
            "URGENT ACTION REQUIRED!\n\n"
            "This is a repeated alert. The system is still in a critical state.\n"
            "Please investigate immediately to prevent system failure.\n\n"
            f"This alert will continue to be sent every {self.repeat_interval:g} minutes until the situation is resolved.\n"
        )
        return self._send(f"{CRITICAL_EMAIL_SUBJECT} - REMINDER", message, 'failure')

    def notify_emergency_followup(self, previous_usage, new_usage, alerts_disabled):
        message = (
            "Emergency Cleanup Results\n"
            "=======================\n\n"
            f"Previous disk usage: {previous_usage}%\n"
            f"Current disk usage: {new_usage}%\n"
            f"Space freed: {previous_usage - new_usage}%\n\n"
        )
        if new_usage >= self.critical:
            message += (
                "WARNING: Disk usage is still above critical threshold!\n"
                "Manual intervention is required immediately.\n"
                f"\nThis script will continue to send alerts every {self.repeat_interval:g} minutes until the situation is resolved.\n"
            )
            severity = 'failure'
        else:
            if alerts_disabled:
                message += "\nDisk usage is now below critical threshold. Repeated alerts have been disabled.\n"
            severity = 'success'
        return self._send(f"Follow-up: {CRITICAL_EMAIL_SUBJECT}", message, severity)

    def notify_cleanup(self, usage, new_usage, actions):
        message = (
            "Disk Usage Report\n"
            "=================\n\n"
            f"Current disk usage: {usage}%\n\n"
            f"Disk usage exceeded threshold of {self.threshold:g}%. Cleanup actions performed:\n\n"
        )
        message += ''.join(f"- {action}\n" for action in actions)
        message += (
            f"\nCleanup completed. New disk usage: {new_usage}%\n"
            f"Space freed: {usage - new_usage}%\n"
        )
        severity = 'info'
        if new_usage >= self.critical - 5:
            message += (
                "\nWARNING: Disk usage is approaching critical levels!\n"
                "Additional action may be required soon.\n"
            )
            severity = 'warning'
        return self._send(EMAIL_SUBJECT, message, severity)

    def notify_warning(self, usage):
        message = (
            "Disk Usage Warning\n"
            "================\n\n"
            f"Current disk usage: {usage}% has exceeded the warning threshold of {self.warning:g}%\n\n"
            "While no immediate action is required, disk usage is trending upward.\n"
            "Consider reviewing disk usage and planning for potential cleanup.\n\n"
            "Recommendations:\n"
            "- Review large files and directories using 'du -h --max-depth=1 /'\n"
            "- Check for unused applications that can be removed\n"
            "- Consider archiving or moving old data to external storage\n"
        )
        return self._send(WARNING_EMAIL_SUBJECT, message, 'warning')

    def notify_transfer_failures(self, failed_files):
        message = (
            f"FTP transfer process completed with {len(failed_files)} failures.\n\n"
            f"Failed files: {', '.join(failed_files)}\n\n"
            f"Please check the log file at {self.log_path} for more details."
        )
        return self._send("FTP Transfer Failures", message, 'failure')

    def notify_retry_failures(self, failed_files):
        message = (
            f"FTP retry process completed with {len(failed_files)} persistent failures.\n\n"
            f"Failed files: {', '.join(failed_files)}\n\n"
            "Manual intervention may be required."
        )
        return self._send("FTP Retry Failures", message, 'failure')

    def notify_error(self, error_message):
        return self._send("Housekeeper Error", f"Error Details: {error_message}", 'failure')
