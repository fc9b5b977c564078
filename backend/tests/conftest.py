"""In-memory stand-ins for the Mongo-backed model classes, plus shared fixtures."""

import asyncio
from typing import Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

from quizduel.models.duel import Duel
from quizduel.models.question import AnswerOption, Question
from quizduel.services.duel_notifications import DuelNotifier
from quizduel.services.duel_service import DuelService
from quizduel.services.matchmaking_service import MatchmakingService
from quizduel.services.round_generator import RoundGenerator, build_rounds


def make_question(number: int, correct: str = "a") -> Question:
    return Question(
        id=f"q{number}",
        text=f"Question {number}?",
        options=[AnswerOption(id=oid, text=f"Option {oid.upper()}") for oid in "abcd"],
        correctOptionId=correct,
    )


def make_duel(rounds: int = 5, per_round: int = 3, duel_id: str = "duel-1") -> Duel:
    questions = [make_question(i) for i in range(rounds * per_round)]
    return Duel(
        id=duel_id,
        classroomId="class-1",
        player1="alice",
        player2="bob",
        currentTurn="alice",
        rounds=build_rounds(questions, per_round),
    )


class FakeQuestionBank:
    def __init__(self, questions: List[Question]):
        self.questions = questions
        self.list_calls = []

    async def list(self, limit: int, order_key: str = "createdAt") -> List[Question]:
        self.list_calls.append((limit, order_key))
        return self.questions[:limit]

    async def count(self) -> int:
        return len(self.questions)


class FakeUsers:
    def __init__(self, user_ids):
        self.user_ids = set(user_ids)

    async def exists(self, user_id: str) -> bool:
        return user_id in self.user_ids


class FakeClassrooms:
    """Each slot method is atomic, like a single-document update in Mongo."""

    def __init__(self, classroom_ids):
        self.docs: Dict[str, dict] = {
            cid: {"id": cid, "courseId": f"course-{cid}", "members": [], "waitingPlayer": None}
            for cid in classroom_ids
        }

    async def find_by_id(self, classroom_id: str) -> Optional[dict]:
        await asyncio.sleep(0)
        doc = self.docs.get(classroom_id)
        return dict(doc) if doc else None

    async def get_waiting_player(self, classroom_id: str) -> Optional[str]:
        await asyncio.sleep(0)
        return self.docs[classroom_id]["waitingPlayer"]

    async def claim_waiting_player(self, classroom_id: str, claimant_id: str) -> Optional[str]:
        await asyncio.sleep(0)
        doc = self.docs[classroom_id]
        waiting = doc["waitingPlayer"]
        if waiting is None or waiting == claimant_id:
            return None
        doc["waitingPlayer"] = None
        return waiting

    async def set_waiting_player(self, classroom_id: str, player_id: str) -> bool:
        await asyncio.sleep(0)
        doc = self.docs[classroom_id]
        if doc["waitingPlayer"] is not None:
            return False
        doc["waitingPlayer"] = player_id
        return True

    async def release_waiting_player(self, classroom_id: str, player_id: str) -> bool:
        await asyncio.sleep(0)
        doc = self.docs[classroom_id]
        if doc["waitingPlayer"] != player_id:
            return False
        doc["waitingPlayer"] = None
        return True


class FakeDuels:
    """Keeps deep copies so callers can't mutate stored state without save()."""

    def __init__(self):
        self.docs: Dict[str, Duel] = {}
        self.save_calls = 0

    async def create(self, duel: Duel) -> Duel:
        duel = duel.model_copy(deep=True)
        duel.id = f"duel-{len(self.docs) + 1}"
        duel.version = 0
        self.docs[duel.id] = duel.model_copy(deep=True)
        return duel

    def put(self, duel: Duel):
        self.docs[duel.id] = duel.model_copy(deep=True)

    async def find_by_id(self, duel_id: str) -> Optional[Duel]:
        duel = self.docs.get(duel_id)
        return duel.model_copy(deep=True) if duel else None

    async def find_by_player(self, player_id: str, status: Optional[str] = None, limit: int = 50) -> List[Duel]:
        return [
            d.model_copy(deep=True) for d in self.docs.values()
            if player_id in (d.player1, d.player2) and (status is None or d.status == status)
        ][:limit]

    async def save(self, duel: Duel, expected_version: int) -> bool:
        self.save_calls += 1
        stored = self.docs.get(duel.id)
        if stored is None or stored.version != expected_version:
            return False
        duel.version = expected_version + 1
        self.docs[duel.id] = duel.model_copy(deep=True)
        return True


@pytest.fixture
def push():
    sender = AsyncMock()
    sender.send.return_value = True
    return sender


@pytest.fixture
def notifier(push):
    return DuelNotifier(push)


@pytest.fixture
def duels():
    return FakeDuels()


@pytest.fixture
def duel_service(duels, notifier):
    return DuelService(duels, notifier)


@pytest.fixture
def question_bank():
    return FakeQuestionBank([make_question(i) for i in range(15)])


@pytest.fixture
def classrooms():
    return FakeClassrooms(["class-1", "class-2"])


@pytest.fixture
def users():
    return FakeUsers(["alice", "bob", "carol", "dave"] + [f"p{i}" for i in range(20)])


@pytest.fixture
def matchmaking(classrooms, users, duels, question_bank, notifier):
    return MatchmakingService(
        classrooms=classrooms,
        users=users,
        duels=duels,
        round_generator=RoundGenerator(question_bank),
        notifier=notifier,
        # Lock-step concurrent joiners in the tests need more than the default retries
        max_attempts=25,
    )


def sent_titles(push, user_id: str) -> List[str]:
    """Titles of all pushes sent to one user, in order."""
    return [c.args[1] for c in push.send.await_args_list if c.args[0] == user_id]
