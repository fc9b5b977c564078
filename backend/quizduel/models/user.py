from typing import List, Optional
from pydantic import BaseModel, EmailStr
from datetime import datetime
from bson import ObjectId
from pymongo.errors import DuplicateKeyError


class User(BaseModel):
    id: Optional[str] = None
    email: EmailStr
    displayName: Optional[str] = None
    courseId: Optional[str] = None
    createdAt: Optional[datetime] = None


class UserModel:
    def __init__(self, database):
        self.collection = database.users

    async def find_by_id(self, user_id: str) -> Optional[dict]:
        """Find user by ID"""
        if not ObjectId.is_valid(user_id):
            return None
        user = await self.collection.find_one({"_id": ObjectId(user_id)})
        if user:
            user["id"] = str(user["_id"])
            del user["_id"]
        return user

    async def find_many(self, user_ids: List[str]) -> List[dict]:
        """Users for the given IDs; unknown or malformed IDs are skipped"""
        object_ids = [ObjectId(uid) for uid in user_ids if ObjectId.is_valid(uid)]
        if not object_ids:
            return []
        users = []
        async for user in self.collection.find({"_id": {"$in": object_ids}}):
            user["id"] = str(user["_id"])
            del user["_id"]
            users.append(user)
        return users

    async def exists(self, user_id: str) -> bool:
        if not ObjectId.is_valid(user_id):
            return False
        return await self.collection.count_documents({"_id": ObjectId(user_id)}, limit=1) > 0

    async def create(self, user_data: dict) -> Optional[dict]:
        """Create a new user; returns None when the email is already taken"""
        user_data = {**user_data, "createdAt": datetime.now()}
        try:
            result = await self.collection.insert_one(user_data)
        except DuplicateKeyError:
            return None
        user_data["id"] = str(result.inserted_id)
        user_data.pop("_id", None)
        return user_data

    async def set_course(self, user_id: str, course_id: str) -> bool:
        if not ObjectId.is_valid(user_id):
            return False
        result = await self.collection.update_one(
            {"_id": ObjectId(user_id)},
            {"$set": {"courseId": course_id, "updatedAt": datetime.now()}}
        )
        return result.matched_count > 0
