import apprise
import logging
import platform
from typing import Any
from dataclasses import dataclass
from urllib.parse import urlparse
from .discord_service import DiscordService

SEVERITY_TYPES = {
    'info': apprise.NotifyType.INFO,
    'success': apprise.NotifyType.SUCCESS,
    'warning': apprise.NotifyType.WARNING,
    'failure': apprise.NotifyType.FAILURE,
}

@dataclass
class NotificationConfig:
    enabled: bool
    urls: list[str]
    hostname: str = platform.node()
    version: str | None = None

class NotificationHandler:
    def __init__(self, config: dict[str, Any], version: str | None = None):
        settings = config.get('Settings', {})

        self.config = NotificationConfig(
            enabled=settings.get('NOTIFICATIONS_ENABLED', False),
            urls=settings.get('NOTIFICATION_URLS', []),
            version=version
        )

        self.apobj = None
        self.discord_services: list[DiscordService] = []

        if self.config.enabled and self.config.urls:
            self.apobj = apprise.Apprise()

            for url in self.config.urls:
                if url.startswith('discord'):
                    webhook_url = self._convert_discord_url(url)
                    if webhook_url:
                        self.discord_services.append(DiscordService(webhook_url))
                elif not self.apobj.add(url):  # type: ignore
                    logging.error(f"Unsupported notification URL: {urlparse(url).scheme}://...")

    def _convert_discord_url(self, apprise_url: str) -> str | None:
        try:
            parsed = urlparse(apprise_url)
            if parsed.scheme != 'discord':
                return None
            webhook_id = parsed.hostname
            webhook_token = parsed.path.lstrip('/')
            if not webhook_id or not webhook_token:
                return None
            return f"https://discord.com/api/webhooks/{webhook_id}/{webhook_token}"
        except Exception as e:
            logging.error(f"Failed to convert Discord Apprise URL: {str(e)}")
            return None

    def _footer(self) -> str:
        return f"Host: {self.config.hostname} | Version: {self.config.version or 'unknown'}"

    def send(self, title: str, body: str, severity: str = 'info') -> bool:
        if not self.config.enabled:
            return False

        notify_type = SEVERITY_TYPES.get(severity)
        if notify_type is None:
            raise ValueError(f"Unknown notification severity: {severity}")

        success = True

        for service in self.discord_services:
            if not service.send_message(title, body, severity, self._footer()):
                success = False

        if self.apobj and len(self.apobj) > 0:
            try:
                if not self.apobj.notify(  # type: ignore
                    title=title,
                    body=f"{body}\n\n{self._footer()}",
                    body_format=apprise.NotifyFormat.TEXT,
                    notify_type=notify_type
                ):
                    success = False
            except Exception as e:
                logging.error(f"Failed to send Apprise notification: {str(e)}")
                success = False

        if success:
            logging.info(f"Notification sent: {title}")
        return success
