"""
Audit Logger

DESIGN DECISION: Every mutation of stored data is logged.
This provides:
1. Traceability of every balance change
2. Debugging capability when balances drift
3. A visible record of destructive operations

The audit logger:
- Is async so repositories can await it inline
- Never raises (a logging failure must not fail a ledger write)
- Renders structured JSON through structlog
"""

import logging
from typing import Optional

import structlog

from pocket_ledger.models.audit import AuditEvent, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route structlog output through the standard library at the given level.

    structlog's filter_by_level drops anything below the stdlib logger level,
    so this must run once at startup for INFO/DEBUG events to appear.
    """
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper(), logging.INFO))


_SEVERITY_METHODS = {
    AuditSeverity.DEBUG: "debug",
    AuditSeverity.INFO: "info",
    AuditSeverity.WARNING: "warning",
    AuditSeverity.ERROR: "error",
    AuditSeverity.CRITICAL: "critical",
}


class AuditLogger:
    """
    Central audit logging service.

    Writes each AuditEvent as one structured log record, at the level
    matching the event severity.
    """

    def __init__(self, logger_name: Optional[str] = None):
        self._logger = structlog.get_logger(logger_name or "pocket_ledger.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the log write itself failed.
        """
        method = getattr(self._logger, _SEVERITY_METHODS[event.severity])
        try:
            method("audit_event", **event.to_log_dict())
        except Exception:
            return False
        return True
