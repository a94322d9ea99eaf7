from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List
from glamrent.config import DEFAULT_PAGE_LIMIT
from glamrent.exceptions import BookingError
from glamrent.services.notification_service import NotificationEmitter
from glamrent.schemas.notification_schema import NotificationResponse, MarkReadResponse, UnreadCountResponse
from glamrent.database import get_db
from glamrent.security.auth import Principal, get_current_principal
from glamrent.logger import get_logger

notification_router = APIRouter()
logger = get_logger(__name__)


@notification_router.get(
    "/notifications", response_model=List[NotificationResponse], status_code=status.HTTP_200_OK
)
def get_my_notifications(
    skip: int = Query(0, ge=0, description="Number of notifications to skip"),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=100, description="Number of notifications to retrieve"),
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Current principal's notifications, newest first"""
    try:
        notifications = NotificationEmitter(db).list_for_recipient(principal.id, skip=skip, limit=limit)
        return [NotificationResponse.model_validate(n) for n in notifications]

    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        logger.error(f"Error fetching notifications for {principal.id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while fetching notifications",
        )


@notification_router.get(
    "/notifications/unread-count", response_model=UnreadCountResponse, status_code=status.HTTP_200_OK
)
def get_unread_count(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    try:
        return UnreadCountResponse(unread=NotificationEmitter(db).unread_count(principal.id))

    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        logger.error(f"Error counting notifications for {principal.id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while counting notifications",
        )


@notification_router.post(
    "/notifications/mark-read", response_model=MarkReadResponse, status_code=status.HTTP_200_OK
)
def mark_all_read(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Mark every notification of the current principal as read"""
    try:
        updated = NotificationEmitter(db).mark_all_read(principal.id)
        return MarkReadResponse(message="All notifications marked as read.", updated=updated)

    except BookingError as e:
        raise e.to_http()
    except Exception as e:
        logger.error(f"Error marking notifications read for {principal.id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error occurred while marking notifications as read",
        )
