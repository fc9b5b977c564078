from typing import List, Optional
from pydantic import BaseModel
from datetime import datetime
from bson import ObjectId
from pymongo import ReturnDocument


class Classroom(BaseModel):
    id: Optional[str] = None
    courseId: str
    members: List[str] = []
    waitingPlayer: Optional[str] = None  # the classroom's single duel-queue slot


class ClassroomModel:
    """
    Classrooms and their duel queue slot.

    Every slot operation is a single conditional write on the classroom
    document, so two concurrent joiners can never both claim the same
    waiting player or both become the waiter.
    """

    def __init__(self, database):
        self.collection = database.classrooms

    async def find_by_id(self, classroom_id: str) -> Optional[dict]:
        if not ObjectId.is_valid(classroom_id):
            return None
        classroom = await self.collection.find_one({"_id": ObjectId(classroom_id)})
        if classroom:
            classroom["id"] = str(classroom["_id"])
            del classroom["_id"]
        return classroom

    async def add_member(self, course_id: str, user_id: str) -> str:
        """Add the user to the course's classroom, creating it on first join"""
        now = datetime.now()
        classroom = await self.collection.find_one_and_update(
            {"courseId": course_id},
            {
                "$addToSet": {"members": user_id},
                "$set": {"updatedAt": now},
                "$setOnInsert": {"createdAt": now, "waitingPlayer": None}
            },
            upsert=True,
            return_document=ReturnDocument.AFTER
        )
        return str(classroom["_id"])

    async def get_waiting_player(self, classroom_id: str) -> Optional[str]:
        classroom = await self.collection.find_one(
            {"_id": ObjectId(classroom_id)}, {"waitingPlayer": 1}
        )
        return classroom.get("waitingPlayer") if classroom else None

    async def claim_waiting_player(self, classroom_id: str, claimant_id: str) -> Optional[str]:
        """Take the waiting player out of the slot, unless the slot is empty or holds the claimant."""
        before = await self.collection.find_one_and_update(
            {"_id": ObjectId(classroom_id), "waitingPlayer": {"$nin": [None, claimant_id]}},
            {"$set": {"waitingPlayer": None, "updatedAt": datetime.now()}},
            projection={"waitingPlayer": 1},
            return_document=ReturnDocument.BEFORE
        )
        return before.get("waitingPlayer") if before else None

    async def set_waiting_player(self, classroom_id: str, player_id: str) -> bool:
        """Put the player into the slot if, and only if, it is empty."""
        result = await self.collection.update_one(
            {"_id": ObjectId(classroom_id), "waitingPlayer": None},
            {"$set": {"waitingPlayer": player_id, "waitingSince": datetime.now()}}
        )
        return result.modified_count == 1

    async def release_waiting_player(self, classroom_id: str, player_id: str) -> bool:
        """Empty the slot if it still holds this player."""
        result = await self.collection.update_one(
            {"_id": ObjectId(classroom_id), "waitingPlayer": player_id},
            {"$set": {"waitingPlayer": None, "updatedAt": datetime.now()}}
        )
        return result.modified_count == 1
