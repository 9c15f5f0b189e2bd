from __future__ import annotations

import json
import logging
from typing import Protocol

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .model import NotificationEvent

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """Delivery is the sink's business; the engine only hands it the event."""

    def emit(self, event: NotificationEvent) -> None:
        raise NotImplementedError


class MySQLNotificationSink(NotificationSink):
    """Persists events to the `notifications` table read by the app's inbox."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def emit(self, event: NotificationEvent) -> None:
        payload = event.payload
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(
                    user_id, type, title, description,
                    related_entity_type, related_entity_id, payload
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(event.user_id),
                    event.type.value,
                    payload.get("title", ""),
                    payload.get("description"),
                    payload.get("related_entity_type"),
                    payload.get("related_entity_id"),
                    json.dumps(payload, default=str),
                ),
            )


class NotificationEmitter:
    """Best-effort wrapper: a failing sink is logged, never raised.

    Called after the state transition committed, so nothing here may undo it.
    """

    def __init__(self, sink: NotificationSink):
        self._sink = sink

    def emit(self, event: NotificationEvent) -> bool:
        try:
            self._sink.emit(event)
        except Exception:
            logger.exception(
                "Failed to emit %s notification for user_id=%s",
                event.type.value,
                event.user_id,
            )
            return False
        return True
