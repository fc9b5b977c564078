from typing import List, Optional
from pydantic import BaseModel
from datetime import datetime
from bson import ObjectId


class University(BaseModel):
    id: Optional[str] = None
    name: str
    location: Optional[str] = None


class Course(BaseModel):
    id: Optional[str] = None
    universityId: str
    name: str


def _with_string_id(doc: dict) -> dict:
    doc["id"] = str(doc["_id"])
    del doc["_id"]
    return doc


class UniversityModel:
    def __init__(self, database):
        self.collection = database.universities

    async def find_all(self) -> List[dict]:
        return [_with_string_id(doc) async for doc in self.collection.find({}).sort("name", 1)]

    async def exists(self, university_id: str) -> bool:
        if not ObjectId.is_valid(university_id):
            return False
        return await self.collection.count_documents({"_id": ObjectId(university_id)}, limit=1) > 0

    async def create(self, university: University) -> str:
        data = university.model_dump(exclude={"id"})
        data["createdAt"] = datetime.now()
        result = await self.collection.insert_one(data)
        return str(result.inserted_id)


class CourseModel:
    def __init__(self, database):
        self.collection = database.courses

    async def find_by_university(self, university_id: str) -> List[dict]:
        cursor = self.collection.find({"universityId": university_id}).sort("name", 1)
        return [_with_string_id(doc) async for doc in cursor]

    async def exists(self, course_id: str) -> bool:
        if not ObjectId.is_valid(course_id):
            return False
        return await self.collection.count_documents({"_id": ObjectId(course_id)}, limit=1) > 0

    async def create(self, course: Course) -> str:
        data = course.model_dump(exclude={"id"})
        data["createdAt"] = datetime.now()
        result = await self.collection.insert_one(data)
        return str(result.inserted_id)
