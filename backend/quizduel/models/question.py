from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel


OPTIONS_PER_QUESTION = 4


class AnswerOption(BaseModel):
    id: str
    text: str


class Question(BaseModel):
    id: Optional[str] = None
    text: str
    options: List[AnswerOption]
    correctOptionId: str
    createdAt: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            "example": {
                "text": "Which data structure uses FIFO ordering?",
                "options": [
                    {"id": "a", "text": "Stack"},
                    {"id": "b", "text": "Queue"},
                    {"id": "c", "text": "Tree"},
                    {"id": "d", "text": "Graph"}
                ],
                "correctOptionId": "b"
            }
        }


def _from_document(doc: Dict[str, Any]) -> Question:
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return Question(**doc)


class QuestionModel:
    """Question bank backed by the `questions` collection."""

    def __init__(self, database):
        self.collection = database.questions

    async def list(self, limit: int, order_key: str = "createdAt") -> List[Question]:
        """First `limit` questions in a stable order (order_key, then _id)."""
        cursor = self.collection.find({}).sort([(order_key, 1), ("_id", 1)]).limit(limit)
        docs = await cursor.to_list(length=limit)
        return [_from_document(doc) for doc in docs]

    async def count(self) -> int:
        return await self.collection.count_documents({})

    async def create(self, question: Question) -> Question:
        data = question.model_dump(exclude={"id"})
        data["createdAt"] = datetime.now()
        result = await self.collection.insert_one(data)
        print(f"✅ Question inserted with ID: {result.inserted_id}")
        return question.model_copy(update={"id": str(result.inserted_id), "createdAt": data["createdAt"]})
