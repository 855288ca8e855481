from datetime import datetime, timezone

from .util import send_webhook

# Discord rejects embed descriptions above this length
MAX_DESCRIPTION_LENGTH = 4096

SEVERITY_COLORS = {
    'info': 0x3498db,
    'success': 0x00ff00,
    'warning': 0xffa500,
    'failure': 0xff0000,
}

SEVERITY_ICONS = {
    'info': 'ℹ️',
    'success': '✅',
    'warning': '⚠️',
    'failure': '❌',
}

class DiscordService:
    def __init__(self, webhook_url: str):
        self.webhook_url = webhook_url

    def send_message(self, title: str, body: str, severity: str = 'info', footer: str | None = None) -> bool:
        description = body
        if len(description) > MAX_DESCRIPTION_LENGTH:
            description = description[:MAX_DESCRIPTION_LENGTH - 1] + '…'

        embed = {
            "title": f"{SEVERITY_ICONS.get(severity, '')} {title}".strip(),
            "color": SEVERITY_COLORS.get(severity, SEVERITY_COLORS['info']),
            "description": description,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
        if footer:
            embed["footer"] = {"text": footer}

        return send_webhook("Discord", self.webhook_url, {"embeds": [embed]})
