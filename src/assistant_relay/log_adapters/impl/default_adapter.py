import json
import logging
from typing import Any, Dict, Optional

from assistant_relay.log_adapters.abc import LogAdapter

logger = logging.getLogger(__name__)
DEFAULT_LIBRARY_LOGGER_NAME = "assistant_relay"
MAX_EVENT_DATA_CHARS = 2000

class DefaultLogAdapter(LogAdapter):
    plugin_id: str = "default_log_adapter_v1"
    description: str = "Configures standard Python logging for the library and logs structured lifecycle events."

    _library_logger: Optional[logging.Logger] = None

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        cfg = config or {}
        log_level_str = str(cfg.get("log_level", "INFO")).upper()
        log_level = getattr(logging, log_level_str, logging.INFO)
        library_logger_name = cfg.get("library_logger_name", DEFAULT_LIBRARY_LOGGER_NAME)
        self._library_logger = logging.getLogger(library_logger_name)
        add_console_handler = cfg.get("add_console_handler_if_no_handlers", True)
        if add_console_handler and not self._library_logger.handlers:
            console_h = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s - %(name)s - [%(levelname)s] - %(message)s (%(module)s:%(lineno)d)")
            console_h.setFormatter(formatter)
            self._library_logger.addHandler(console_h)
            self._library_logger.propagate = False
            logger.debug(f"Added default console handler to logger '{library_logger_name}'.")
        self._library_logger.setLevel(log_level)
        logger.info(f"{self.plugin_id}: Logging configured for '{library_logger_name}' at level {log_level_str}.")

    async def process_event(self, event_type: str, data: Dict[str, Any]) -> None:
        if not self._library_logger:
            logger.debug(f"EMERGENCY LOG (logger not init): EVENT: {event_type} | RAW_DATA: {str(data)[:500]}...")
            return
        try:
            log_data_str = json.dumps(data, sort_keys=True, default=str)
        except (TypeError, ValueError):
            log_data_str = str(data)
        if len(log_data_str) > MAX_EVENT_DATA_CHARS:
            log_data_str = log_data_str[:MAX_EVENT_DATA_CHARS] + "..."
        self._library_logger.info(f"EVENT: {event_type} | DATA: {log_data_str}")

    async def teardown(self) -> None:
        logger.info(f"{self.plugin_id}: Tearing down.")
        self._library_logger = None
