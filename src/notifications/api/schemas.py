"""Pydantic request/response schemas for the Notifications API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    notification_id: str
    user_id: str
    message: str
    link: str | None = None
    is_read: bool
    created_at: datetime | None = None


class NotificationListResponse(BaseModel):
    notifications: list[NotificationResponse]
    unread_count: int


class MarkReadRequest(BaseModel):
    user_id: str


class MarkAllReadResponse(BaseModel):
    marked: int


class StatusResponse(BaseModel):
    status: str = "ok"
