"""
Push Notification Router
Registers the Web Push subscriptions duel notifications are delivered to
"""
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from ..dependencies import get_push_service, get_user_model
from ..models.user import UserModel
from ..services.push_service import PushNotificationService

router = APIRouter(prefix="/api/notifications", tags=["Push Notifications"])


class PushSubscription(BaseModel):
    userId: str = Field(..., min_length=1)
    endpoint: str = Field(..., min_length=1)
    keys: dict  # Contains p256dh and auth


class PushUnsubscribe(BaseModel):
    userId: str = Field(..., min_length=1)
    endpoint: str = Field(..., min_length=1)


@router.post("/subscribe")
async def subscribe_to_push(
    subscription: PushSubscription,
    users: UserModel = Depends(get_user_model),
    push: PushNotificationService = Depends(get_push_service)
):
    """
    Save a player's push subscription (one per player per device endpoint)
    """
    try:
        if not await users.exists(subscription.userId):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        created = await push.subscribe(subscription.userId, subscription.endpoint, subscription.keys)
        return {
            "success": True,
            "message": "Subscription saved" if created else "Subscription updated"
        }
    except HTTPException:
        raise
    except Exception as e:
        print(f"❌ Error saving push subscription: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save push subscription"
        )


@router.post("/unsubscribe")
async def unsubscribe_from_push(
    request_data: PushUnsubscribe,
    push: PushNotificationService = Depends(get_push_service)
):
    try:
        removed = await push.unsubscribe(request_data.userId, request_data.endpoint)
    except Exception as e:
        print(f"❌ Error removing push subscription: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to remove push subscription"
        )
    if not removed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subscription not found")
    return {"success": True, "message": "Subscription removed"}
