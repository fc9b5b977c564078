from typing import List, Optional
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
import os
from bson import ObjectId
from pydantic import BaseModel, ConfigDict
from .question import AnswerOption


ROUNDS_PER_DUEL = int(os.getenv("DUEL_ROUNDS", "5"))
QUESTIONS_PER_ROUND = int(os.getenv("DUEL_QUESTIONS_PER_ROUND", "3"))

PLAYER1 = "player1"
PLAYER2 = "player2"


class AnswerStatus(str, Enum):
    UNANSWERED = "unanswered"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class DuelStatus(str, Enum):
    ACTIVE = "active"
    FINISHED = "finished"


class PlayerAnswer(BaseModel):
    """One player's slot for one question, with the question content snapshotted"""
    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)

    questionId: str
    questionText: str
    options: List[AnswerOption]
    correctOptionId: str
    selectedOptionId: Optional[str] = None
    status: AnswerStatus = AnswerStatus.UNANSWERED


class Round(BaseModel):
    roundNumber: int  # 1-based label
    currentQuestionIndex: int = 0
    player1Answers: List[PlayerAnswer]
    player2Answers: List[PlayerAnswer]

    def answers_for(self, side: str) -> List[PlayerAnswer]:
        return self.player1Answers if side == PLAYER1 else self.player2Answers

    def correct_count(self, side: str) -> int:
        return sum(1 for a in self.answers_for(side) if a.status == AnswerStatus.CORRECT)


class Duel(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)

    id: Optional[str] = None
    classroomId: str
    player1: str
    player2: str
    status: DuelStatus = DuelStatus.ACTIVE
    currentRound: int = 0  # 0-based index into rounds
    currentTurn: Optional[str] = None  # player id; None once finished
    scorePlayer1: int = 0
    scorePlayer2: int = 0
    rounds: List[Round]
    version: int = 0
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    finishedAt: Optional[datetime] = None

    def side_of(self, player_id: str) -> Optional[str]:
        if player_id == self.player1:
            return PLAYER1
        if player_id == self.player2:
            return PLAYER2
        return None

    def player_on(self, side: str) -> str:
        return self.player1 if side == PLAYER1 else self.player2

    def score_of(self, side: str) -> int:
        return self.scorePlayer1 if side == PLAYER1 else self.scorePlayer2

    def add_point(self, side: str):
        if side == PLAYER1:
            self.scorePlayer1 += 1
        else:
            self.scorePlayer2 += 1

    def leader(self) -> Optional[str]:
        """Player id with the higher score, None on a tie"""
        if self.scorePlayer1 > self.scorePlayer2:
            return self.player1
        if self.scorePlayer2 > self.scorePlayer1:
            return self.player2
        return None


@dataclass
class AnswerOutcome:
    """What a single answer did to the duel; drives notifications and the response"""
    is_correct: bool
    correct_option_id: str
    acting_player: str
    question_id: str
    correct_option_text: str
    turn_passed_to: Optional[str] = None  # set when player1 has finished the round
    completed_round: Optional[int] = None  # roundNumber, set once both sides finished it
    round_winner: Optional[str] = None
    next_round: Optional[int] = None
    finished: bool = False
    winner: Optional[str] = None  # None together with finished means a draw


def _from_document(doc: dict) -> Duel:
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return Duel(**doc)


class DuelModel:
    def __init__(self, database):
        self.collection = database.duels

    async def create(self, duel: Duel) -> Duel:
        now = datetime.now()
        duel = duel.model_copy(update={"createdAt": now, "updatedAt": now, "version": 0})
        data = duel.model_dump(exclude={"id"})
        result = await self.collection.insert_one(data)
        duel.id = str(result.inserted_id)
        print(f"🎮 Duel {duel.id} created: {duel.player1} vs {duel.player2}")
        return duel

    async def find_by_id(self, duel_id: str) -> Optional[Duel]:
        if not ObjectId.is_valid(duel_id):
            return None
        doc = await self.collection.find_one({"_id": ObjectId(duel_id)})
        return _from_document(doc) if doc else None

    async def find_by_player(self, player_id: str, status: Optional[str] = None, limit: int = 50) -> List[Duel]:
        query = {"$or": [{"player1": player_id}, {"player2": player_id}]}
        if status:
            query["status"] = status
        cursor = self.collection.find(query).sort("createdAt", -1).limit(limit)
        return [_from_document(doc) for doc in await cursor.to_list(length=limit)]

    async def save(self, duel: Duel, expected_version: int) -> bool:
        """
        Write the full mutable state of the duel in one conditional update.

        The write only applies if the stored version still equals
        expected_version; on success the stored version becomes
        expected_version + 1. Returns False when another write got there first.
        """
        now = datetime.now()
        state = duel.model_dump(include={
            "rounds", "scorePlayer1", "scorePlayer2", "currentRound",
            "currentTurn", "status", "finishedAt"
        })
        state["version"] = expected_version + 1
        state["updatedAt"] = now
        result = await self.collection.update_one(
            {"_id": ObjectId(duel.id), "version": expected_version},
            {"$set": state}
        )
        if result.matched_count == 0:
            return False
        duel.version = expected_version + 1
        duel.updatedAt = now
        return True
