import json
import logging
from datetime import datetime
from typing import Optional, Dict, Any

from ...application.ports.event_logger import EventLogger


class StdEventLogger(EventLogger):
    """Structured event channel on top of the std logging module."""

    def __init__(self, name: str = "bitebyte.events") -> None:
        self._logger = logging.getLogger(name)

    def log(self, event: str, success: bool = True, details: Optional[Dict[str, Any]] = None) -> None:
        entry = {
            "timestamp": datetime.utcnow().isoformat(),
            "event": event,
            "success": success,
            "details": details or {},
        }
        level = logging.INFO if success else logging.WARNING
        self._logger.log(level, f"EVENT: {json.dumps(entry, default=str)}")
