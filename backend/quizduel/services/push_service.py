"""
Push Notification Service
Sends Web Push notifications to players using pywebpush
"""
import os
import json
import asyncio
from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import urlparse
from pywebpush import webpush, WebPushException

# Push services answer these when a subscription is gone for good
EXPIRED_SUBSCRIPTION_CODES = (404, 410)


class PushNotificationService:
    """Delivers titled messages to every device a player subscribed with"""

    def __init__(self, database):
        self.subscriptions = database.push_subscriptions
        self.vapid_private_key = os.environ.get("VAPID_PRIVATE_KEY")
        self.vapid_public_key = os.environ.get("VAPID_PUBLIC_KEY")
        self.vapid_claims = {
            "sub": os.environ.get("VAPID_SUBJECT", "mailto:admin@quizduel.app")
        }

        if not self.vapid_private_key or not self.vapid_public_key:
            print("⚠️ VAPID keys not configured. Push notifications will not work.")

    async def subscribe(self, user_id: str, endpoint: str, keys: dict) -> bool:
        """Store a device subscription. Returns True if it is new."""
        now = datetime.utcnow()
        result = await self.subscriptions.update_one(
            {"userId": user_id, "endpoint": endpoint},
            {"$set": {"keys": keys, "updatedAt": now}, "$setOnInsert": {"createdAt": now}},
            upsert=True
        )
        print(f"📱 Push subscription saved: user={user_id}, endpoint={endpoint[:50]}...")
        return result.upserted_id is not None

    async def unsubscribe(self, user_id: str, endpoint: str) -> bool:
        result = await self.subscriptions.delete_one({"userId": user_id, "endpoint": endpoint})
        return result.deleted_count > 0

    async def send(self, user_id: str, title: str, body: str, data: Optional[Dict[str, Any]] = None) -> bool:
        """
        Send a notification to all of a player's devices.

        Args:
            user_id: The player's ID
            title: Notification title
            body: Notification text
            data: Structured payload for the client (duelId etc.)

        Returns:
            bool: True if at least one device accepted it. Never raises.
        """
        if not self.vapid_private_key:
            print(f"❌ Cannot send push to {user_id}: VAPID keys not configured")
            return False

        try:
            subscriptions = await self.subscriptions.find({"userId": user_id}).to_list(length=None)
        except Exception as e:
            print(f"❌ Could not load push subscriptions for user {user_id}: {e}")
            return False

        if not subscriptions:
            print(f"User {user_id} has no push subscription.")
            return False

        payload = json.dumps({"title": title, "body": body, "data": data or {}})
        success_count = 0

        for sub in subscriptions:
            parsed_url = urlparse(sub["endpoint"])
            vapid_claims_with_aud = {
                **self.vapid_claims,
                "aud": f"{parsed_url.scheme}://{parsed_url.netloc}"
            }
            try:
                # webpush is blocking (requests); keep it off the event loop
                await asyncio.to_thread(
                    webpush,
                    subscription_info={"endpoint": sub["endpoint"], "keys": sub["keys"]},
                    data=payload,
                    vapid_private_key=self.vapid_private_key,
                    vapid_claims=vapid_claims_with_aud
                )
                success_count += 1
            except WebPushException as e:
                print(f"❌ WebPush failed for user {user_id}: {e}")
                if e.response is not None and e.response.status_code in EXPIRED_SUBSCRIPTION_CODES:
                    await self._drop_subscription(sub)
            except Exception as e:
                print(f"❌ Error sending push to user {user_id}: {e}")

        if success_count:
            print(f"📤 Notification sent to user {user_id}: {title}")
        return success_count > 0

    async def _drop_subscription(self, sub: dict):
        try:
            await self.subscriptions.delete_one({"_id": sub["_id"]})
            print(f"🗑️ Removed expired subscription for user {sub.get('userId')}")
        except Exception as e:
            print(f"⚠️ Could not remove expired subscription: {e}")
