"""Persistence throttle for partial transcript writes."""
from assistant_relay.config.settings import ThrottleSettings

DEFAULT_THROTTLE = ThrottleSettings()


def should_persist(index: int, settings: ThrottleSettings = DEFAULT_THROTTLE) -> bool:
    """
    Whether the text fragment at 0-based ``index`` triggers a partial write.

    Writes are dense for the first few fragments so observers see text
    almost immediately, then drop to one write every ``every_n`` fragments.
    """
    if index % settings.every_n == 0:
        return True
    return index < settings.early_window and index % settings.early_every == 0
