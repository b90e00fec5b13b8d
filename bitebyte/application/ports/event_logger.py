from typing import Optional, Dict, Any, Protocol


class EventLogger(Protocol):
    def log(self, event: str, success: bool = True, details: Optional[Dict[str, Any]] = None) -> None:
        ...
