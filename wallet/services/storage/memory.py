"""
In-Memory Audit Storage

Keeps the audit trail for the lifetime of the process.
Used by default and in tests; nothing here survives a restart.
"""

from wallet.models.audit import AuditEvent
from wallet.services.storage.interface import AuditStorageInterface


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        return [
            event for event in self._events
            if event.entity_type == entity_type and event.entity_id == entity_id
        ]

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events[-limit:])) if limit > 0 else []

    def __len__(self) -> int:
        return len(self._events)
