"""Builders for the leave lifecycle events handed to the notification sink."""

from __future__ import annotations

from ..core.enums import NotificationType
from ..leaves.model import LeaveRequest
from .model import NotificationEvent


def _base_payload(request: LeaveRequest) -> dict:
    return {
        "date_range": {
            "start": request.start_date.isoformat(),
            "end": request.end_date.isoformat(),
            "display": request.date_range,
        },
        "related_entity_type": "leave_request",
        "related_entity_id": request.request_id,
    }


def leave_approved_event(request: LeaveRequest) -> NotificationEvent:
    payload = _base_payload(request)
    payload["title"] = "Leave request approved"
    payload["description"] = f"Your leave on {request.date_range} has been approved."
    return NotificationEvent(type=NotificationType.LEAVE_APPROVED, user_id=request.user_id, payload=payload)


def leave_rejected_event(request: LeaveRequest) -> NotificationEvent:
    payload = _base_payload(request)
    payload["title"] = "Leave request rejected"
    payload["reason"] = request.rejection_reason
    payload["description"] = (
        f"Your leave on {request.date_range} was rejected. Reason: {request.rejection_reason}"
    )
    return NotificationEvent(type=NotificationType.LEAVE_REJECTED, user_id=request.user_id, payload=payload)
