"""Configuration models."""
from .models import RelayConfig
from .settings import SearchSettings, ThrottleSettings

__all__ = ["RelayConfig", "SearchSettings", "ThrottleSettings"]
