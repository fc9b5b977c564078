from typing import Dict, List, Optional
from datetime import datetime
from pymongo.errors import PyMongoError
from ..models.duel import (
    AnswerOutcome,
    AnswerStatus,
    Duel,
    DuelModel,
    DuelStatus,
    PLAYER1,
    PLAYER2,
)
from ..utils.errors import Conflict, Forbidden, Internal, InvalidInput, InvalidState, NotFound
from .duel_notifications import DuelNotifier


def apply_answer(duel: Duel, player_id: str, selected_option_id: str) -> AnswerOutcome:
    """
    Score one answer and advance the duel in memory.

    Players take a round in turn: player1 answers all of the round's
    questions, then player2 answers the same questions. Once player2 is
    done the next round starts with player1, or the duel finishes after the
    last round. Points are per correct answer only.

    Nothing is changed when a precondition fails.
    """
    if duel.status == DuelStatus.FINISHED:
        raise InvalidState("Duel already finished")

    side = duel.side_of(player_id)
    if side is None:
        raise Forbidden("You are not a player in this duel")
    if player_id != duel.currentTurn:
        raise Forbidden("It's not your turn")
    if not 0 <= duel.currentRound < len(duel.rounds):
        raise InvalidState("Invalid round data")

    current = duel.rounds[duel.currentRound]
    answers = current.answers_for(side)
    index = current.currentQuestionIndex
    if not 0 <= index < len(answers) or answers[index].status != AnswerStatus.UNANSWERED:
        raise InvalidState("No open question at the current position")

    entry = answers[index]
    if selected_option_id not in {option.id for option in entry.options}:
        raise InvalidInput("selectedOptionId is not one of the question's options")

    is_correct = selected_option_id == entry.correctOptionId
    entry.selectedOptionId = selected_option_id
    entry.status = AnswerStatus.CORRECT if is_correct else AnswerStatus.INCORRECT
    if is_correct:
        duel.add_point(side)

    outcome = AnswerOutcome(
        is_correct=is_correct,
        correct_option_id=entry.correctOptionId,
        acting_player=player_id,
        question_id=entry.questionId,
        correct_option_text=next((o.text for o in entry.options if o.id == entry.correctOptionId), ""),
    )

    finished_round = all(a.status != AnswerStatus.UNANSWERED for a in answers)
    if not finished_round:
        current.currentQuestionIndex = index + 1
    elif side == PLAYER1:
        duel.currentTurn = duel.player2
        current.currentQuestionIndex = 0
        outcome.turn_passed_to = duel.player2
    else:
        _complete_round(duel, outcome)
    return outcome


def _complete_round(duel: Duel, outcome: AnswerOutcome):
    current = duel.rounds[duel.currentRound]
    p1_correct, p2_correct = current.correct_count(PLAYER1), current.correct_count(PLAYER2)
    if p1_correct != p2_correct:
        outcome.round_winner = duel.player1 if p1_correct > p2_correct else duel.player2
    outcome.completed_round = current.roundNumber

    if duel.currentRound == len(duel.rounds) - 1:
        duel.status = DuelStatus.FINISHED
        duel.currentTurn = None
        duel.finishedAt = datetime.now()
        outcome.finished = True
        outcome.winner = duel.leader()
    else:
        duel.currentRound += 1
        duel.currentTurn = duel.player1
        duel.rounds[duel.currentRound].currentQuestionIndex = 0
        outcome.next_round = duel.rounds[duel.currentRound].roundNumber


def duel_status(duel: Duel) -> Dict:
    if not 0 <= duel.currentRound < len(duel.rounds):
        raise InvalidState("Invalid round data")
    return {
        "currentRound": duel.currentRound,
        "currentQuestionIndex": duel.rounds[duel.currentRound].currentQuestionIndex,
        "currentTurnId": duel.currentTurn,
        "status": duel.status,
        "scorePlayer1": duel.scorePlayer1,
        "scorePlayer2": duel.scorePlayer2,
    }


def duel_view(duel: Duel, viewer_id: Optional[str] = None) -> Dict:
    """
    Client projection of a duel.

    A question's correct option and the opponent's pick are only shown once
    both players answered it; the viewer always sees their own picks, and the
    correct option of questions they already answered.
    """
    view = duel.model_dump(exclude={"version"})
    viewer_side = duel.side_of(viewer_id) if viewer_id else None
    for round_data in view["rounds"]:
        for p1, p2 in zip(round_data["player1Answers"], round_data["player2Answers"]):
            both_answered = AnswerStatus.UNANSWERED not in (p1["status"], p2["status"])
            if both_answered:
                continue
            for side, answer in ((PLAYER1, p1), (PLAYER2, p2)):
                own = side == viewer_side
                if not (own and answer["status"] != AnswerStatus.UNANSWERED):
                    answer["correctOptionId"] = None
                if not own:
                    answer["selectedOptionId"] = None
    return view


class DuelService:
    def __init__(self, duels: DuelModel, notifier: DuelNotifier):
        self.duels = duels
        self.notifier = notifier

    async def _load(self, duel_id: str) -> Duel:
        try:
            duel = await self.duels.find_by_id(duel_id)
        except PyMongoError as e:
            print(f"❌ Error loading duel {duel_id}: {e}")
            raise Internal("Could not load the duel")
        if duel is None:
            raise NotFound("Duel not found")
        return duel

    async def submit_answer(self, duel_id: str, player_id: str, selected_option_id: str) -> Dict:
        duel = await self._load(duel_id)
        expected_version = duel.version
        outcome = apply_answer(duel, player_id, selected_option_id)

        try:
            saved = await self.duels.save(duel, expected_version)
        except PyMongoError as e:
            print(f"❌ Error saving duel {duel_id}: {e}")
            raise Internal("Could not save the answer")
        if not saved:
            print(f"⚠️ Duel {duel_id} changed since version {expected_version}, answer rejected")
            raise Conflict("The duel was updated by another request, reload and try again")

        await self.notifier.answer_processed(duel, outcome)

        return {
            "isCorrect": outcome.is_correct,
            "correctOptionId": outcome.correct_option_id,
        }

    async def get_status(self, duel_id: str) -> Dict:
        return duel_status(await self._load(duel_id))

    async def get_duel(self, duel_id: str, viewer_id: Optional[str] = None) -> Dict:
        return duel_view(await self._load(duel_id), viewer_id)

    async def list_duels(self, player_id: str, status: Optional[str] = None) -> List[Dict]:
        try:
            duels = await self.duels.find_by_player(player_id, status=status)
        except PyMongoError as e:
            print(f"❌ Error listing duels for {player_id}: {e}")
            raise Internal("Could not load duels")
        return [
            {
                "id": duel.id,
                "classroomId": duel.classroomId,
                "player1": duel.player1,
                "player2": duel.player2,
                "status": duel.status,
                "currentRound": duel.currentRound,
                "currentTurnId": duel.currentTurn,
                "scorePlayer1": duel.scorePlayer1,
                "scorePlayer2": duel.scorePlayer2,
                "createdAt": duel.createdAt,
            }
            for duel in duels
        ]
