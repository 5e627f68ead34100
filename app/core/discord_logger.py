import logging
import time
import requests
from .settings import settings

# Last send time per level, so the same kind of alert is not sent too often
_last_alert_time = {}
FLOOD_INTERVAL = 20  # seconds between alerts of the same level


def send_discord_alert(message: str, level: str = "INFO"):
    """
    Sends a lightweight alert to Discord with flood control.
    Does nothing when no webhook URL is configured.
    """
    if not settings.DISCORD_WEBHOOK_URL:
        return

    now = time.time()
    last_time = _last_alert_time.get(level, 0)

    if now - last_time < FLOOD_INTERVAL:
        return

    _last_alert_time[level] = now

    emoji = {
        "INFO": "ℹ️",
        "WARN": "⚠️",
        "ERROR": "🔥",
        "CRITICAL": "💀"
    }.get(level, "⚡")

    payload = {"content": f"{emoji} **[{level}] EEG Tariffs:** {message}"}

    try:
        requests.post(settings.DISCORD_WEBHOOK_URL, json=payload, timeout=2)
    except requests.RequestException as e:
        # The alert sink must never take the caller down with it
        logging.getLogger("eeg_tariffs").warning(f"Could not deliver Discord alert: {e}")
