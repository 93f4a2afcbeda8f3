"""Notification persistence contract.

Dispatch itself never persists anything; ``NotificationRepository`` is the
surface a scheduler or REST layer would store notifications through.
``InMemoryNotificationRepository`` implements it for tests and local runs.
"""

from datetime import datetime
from typing import Dict, List, Optional, Protocol, runtime_checkable

from notification_dispatch.errors import NotificationError
from notification_dispatch.infrastructure.logging import get_module_logger
from notification_dispatch.models import (
    Notification,
    NotificationFilters,
    NotificationPriority,
    NotificationStatus,
    utc_now,
)

logger = get_module_logger()

_PRIORITY_RANK = {
    NotificationPriority.LOW: 0,
    NotificationPriority.NORMAL: 1,
    NotificationPriority.HIGH: 2,
    NotificationPriority.URGENT: 3,
}

SORT_FIELDS = ("created_at", "updated_at", "priority")


@runtime_checkable
class NotificationRepository(Protocol):
    def save(self, notification: Notification) -> None: ...

    def get_by_id(self, notification_id: str) -> Notification: ...

    def update(self, notification: Notification) -> None: ...

    def list(
        self, filters: Optional[NotificationFilters] = None
    ) -> List[Notification]: ...

    def delete(self, notification_id: str) -> None: ...

    def get_pending_notifications(self, limit: int = 0) -> List[Notification]: ...


class InMemoryNotificationRepository:
    """Dict-backed repository; stores and returns copies."""

    def __init__(self):
        self._items: Dict[str, Notification] = {}

    def __len__(self) -> int:
        return len(self._items)

    def save(self, notification: Notification) -> None:
        self._items[notification.id] = notification.model_copy(deep=True)
        logger.debug("notification_saved", notification_id=notification.id)

    def get_by_id(self, notification_id: str) -> Notification:
        """Raises NOT_FOUND for an unknown id."""
        stored = self._items.get(notification_id)
        if stored is None:
            raise NotificationError.not_found(
                f"notification not found: {notification_id}"
            )
        return stored.model_copy(deep=True)

    def update(self, notification: Notification) -> None:
        """Replace a stored notification, refreshing ``updated_at``."""
        if notification.id not in self._items:
            raise NotificationError.not_found(
                f"notification not found: {notification.id}"
            )
        stored = notification.model_copy(deep=True)
        stored.updated_at = utc_now()
        self._items[notification.id] = stored

    def delete(self, notification_id: str) -> None:
        if self._items.pop(notification_id, None) is None:
            raise NotificationError.not_found(
                f"notification not found: {notification_id}"
            )

    def list(self, filters: Optional[NotificationFilters] = None) -> List[Notification]:
        """Filter, sort and page stored notifications.

        Date bounds apply to ``created_at`` and are inclusive. Unknown sort
        fields fail with VALIDATION_FAILED.
        """
        filters = filters or NotificationFilters()
        if filters.sort_by not in SORT_FIELDS:
            raise NotificationError.validation(
                "sort_by", f"unsupported sort field: {filters.sort_by}"
            )
        if filters.sort_order not in ("asc", "desc"):
            raise NotificationError.validation(
                "sort_order", f"unsupported sort order: {filters.sort_order}"
            )

        matches = [n for n in self._items.values() if _matches(n, filters)]
        if filters.sort_by == "priority":
            matches.sort(key=lambda n: _PRIORITY_RANK[n.priority])
        else:
            matches.sort(key=lambda n: getattr(n, filters.sort_by))
        if filters.sort_order == "desc":
            matches.reverse()

        matches = matches[filters.offset :]
        if filters.limit:
            matches = matches[: filters.limit]
        return [n.model_copy(deep=True) for n in matches]

    def get_pending_notifications(
        self, limit: int = 0, now: Optional[datetime] = None
    ) -> List[Notification]:
        """Pending notifications that are due, oldest first."""
        now = now or utc_now()
        due = sorted(
            (
                n
                for n in self._items.values()
                if n.status == NotificationStatus.PENDING and not n.is_scheduled(now)
            ),
            key=lambda n: n.created_at,
        )
        if limit:
            due = due[:limit]
        return [n.model_copy(deep=True) for n in due]


def _matches(notification: Notification, filters: NotificationFilters) -> bool:
    if filters.type and notification.type.value != filters.type:
        return False
    if filters.status and notification.status.value != filters.status:
        return False
    if filters.priority and notification.priority.value != filters.priority:
        return False
    if filters.recipient and notification.recipient != filters.recipient:
        return False
    if filters.date_from and notification.created_at < filters.date_from:
        return False
    if filters.date_to and notification.created_at > filters.date_to:
        return False
    return True
