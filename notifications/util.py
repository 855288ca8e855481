import logging
from typing import Any

import requests

WEBHOOK_TIMEOUT = 10


def send_webhook(service_name: str, webhook_url: str, payload: dict[str, Any]) -> bool:
    try:
        response = requests.post(webhook_url, json=payload, timeout=WEBHOOK_TIMEOUT)
        response.raise_for_status()
        return True
    except Exception as e:
        logging.error(f"Failed to send {service_name} webhook: {str(e)}")
        return False
