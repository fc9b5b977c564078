from typing import Dict, List, Optional
import os
from ..models.classroom import ClassroomModel
from ..models.duel import Duel, DuelModel, Round
from ..models.user import UserModel
from ..utils.errors import Internal, InvalidState, NotFound
from .duel_notifications import DuelNotifier
from .round_generator import RoundGenerator


MATCHMAKING_MAX_ATTEMPTS = int(os.getenv("MATCHMAKING_MAX_ATTEMPTS", "5"))


class MatchmakingService:
    """
    Pairs players through the one-slot queue each classroom carries.

    The first joiner waits in the slot; the next joiner takes them out and
    a duel is created with the waiting player as player1.
    """

    def __init__(
        self,
        classrooms: ClassroomModel,
        users: UserModel,
        duels: DuelModel,
        round_generator: RoundGenerator,
        notifier: DuelNotifier,
        max_attempts: int = MATCHMAKING_MAX_ATTEMPTS
    ):
        self.classrooms = classrooms
        self.users = users
        self.duels = duels
        self.round_generator = round_generator
        self.notifier = notifier
        self.max_attempts = max_attempts

    async def _get_classroom(self, classroom_id: str, player_id: str) -> dict:
        classroom = await self.classrooms.find_by_id(classroom_id)
        if classroom is None:
            raise NotFound("Classroom not found")
        if not await self.users.exists(player_id):
            raise NotFound("Player not found")
        return classroom

    async def _take_slot(self, classroom_id: str, player_id: str) -> Dict:
        for attempt in range(1, self.max_attempts + 1):
            opponent_id = await self.classrooms.claim_waiting_player(classroom_id, player_id)
            if opponent_id:
                return {"matched": True, "opponentId": opponent_id}

            if await self.classrooms.set_waiting_player(classroom_id, player_id):
                return {"matched": False}

            # Neither write applied: the slot holds the caller, or another joiner raced us
            if await self.classrooms.get_waiting_player(classroom_id) == player_id:
                raise InvalidState("You are already waiting for an opponent in this classroom")
            print(f"⚠️ Duel queue race in classroom {classroom_id} (attempt {attempt}), retrying")

        raise Internal("Could not update the duel queue, please try again")

    async def join_queue(self, classroom_id: str, player_id: str) -> Dict:
        """Enter the classroom's queue; returns {matched, opponentId?}"""
        await self._get_classroom(classroom_id, player_id)
        return await self._take_slot(classroom_id, player_id)

    async def join_duel(self, classroom_id: str, player_id: str) -> Dict:
        """Enter the queue and, when paired, create and announce the duel."""
        classroom = await self._get_classroom(classroom_id, player_id)

        # Generate before claiming so a short question bank never drops the waiting player
        rounds: Optional[List[Round]] = None
        waiting = classroom.get("waitingPlayer")
        if waiting and waiting != player_id:
            rounds = await self.round_generator.generate_rounds()

        result = await self._take_slot(classroom_id, player_id)
        if not result["matched"]:
            print(f"⏳ Player {player_id} is waiting for an opponent in classroom {classroom_id}")
            return {"matched": False}

        opponent_id = result["opponentId"]
        try:
            if rounds is None:
                rounds = await self.round_generator.generate_rounds()
            duel = await self.duels.create(Duel(
                classroomId=classroom_id,
                player1=opponent_id,
                player2=player_id,
                currentTurn=opponent_id,
                rounds=rounds,
            ))
        except Exception:
            # Give the opponent their place back before surfacing the error
            if await self.classrooms.set_waiting_player(classroom_id, opponent_id):
                print(f"↩️ Player {opponent_id} put back into the queue of classroom {classroom_id}")
            else:
                print(f"⚠️ Player {opponent_id} dropped from the queue of classroom {classroom_id}: slot already taken")
            raise

        await self.notifier.duel_started(duel)
        return {"matched": True, "duelId": duel.id}

    async def leave_queue(self, classroom_id: str, player_id: str) -> bool:
        await self._get_classroom(classroom_id, player_id)
        return await self.classrooms.release_waiting_player(classroom_id, player_id)
