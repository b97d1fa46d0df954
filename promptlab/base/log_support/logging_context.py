"""Per-request fields stamped on every operational log event."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Platform, model and request id of the request being served.

    ``extra`` holds ad-hoc fields; they never override the named ones.
    """

    platform: Optional[str] = None
    model: Optional[str] = None
    request_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def bind(self, **fields: Any) -> "LogContext":
        """Return a copy with ``fields`` merged into ``extra``."""
        return replace(self, extra={**self.extra, **fields})

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {k: v for k, v in self.extra.items() if v is not None}
        for key in ("platform", "model", "request_id"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out


__all__ = ["LogContext"]
