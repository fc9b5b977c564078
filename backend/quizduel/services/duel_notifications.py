from typing import Any, Dict, Optional
from ..models.duel import AnswerOutcome, Duel
from .push_service import PushNotificationService


class DuelNotifier:
    """
    Player-facing messages for duel transitions.

    Delivery is best-effort: the duel document is already written when these
    run, so a failed push is logged and otherwise ignored.
    """

    def __init__(self, push: PushNotificationService):
        self.push = push

    async def _notify(self, user_id: str, title: str, body: str, data: Optional[Dict[str, Any]] = None):
        try:
            await self.push.send(user_id, title, body, data or {})
        except Exception as e:
            print(f"⚠️ Notification to {user_id} failed (ignored): {e}")

    async def duel_started(self, duel: Duel):
        data = {"duelId": duel.id}
        await self._notify(duel.player1, "Your turn!", "The duel has started. Answer your first question.", data)
        await self._notify(duel.player2, "Waiting for your opponent", "The duel has started. Your opponent goes first.", data)

    async def answer_feedback(self, duel: Duel, outcome: AnswerOutcome):
        data = {"duelId": duel.id, "questionId": outcome.question_id}
        if outcome.is_correct:
            await self._notify(outcome.acting_player, "Correct!", "Well done, that was the right answer.", data)
            return
        data["correctAnswer"] = outcome.correct_option_text
        await self._notify(
            outcome.acting_player, "Wrong!",
            f"The correct answer was: {outcome.correct_option_text}", data
        )

    async def answer_processed(self, duel: Duel, outcome: AnswerOutcome):
        await self.answer_feedback(duel, outcome)
        if outcome.finished:
            await self._duel_finished(duel, outcome)
        elif outcome.completed_round is not None:
            await self._round_completed(duel, outcome)
        elif outcome.turn_passed_to is not None:
            data = {"duelId": duel.id, "currentRound": duel.currentRound}
            await self._notify(outcome.turn_passed_to, "Your turn!", "Your opponent finished the round. Answer your questions.", data)
            await self._notify(outcome.acting_player, "Waiting for your opponent", "Your opponent is playing the round now.", data)

    async def _round_completed(self, duel: Duel, outcome: AnswerOutcome):
        if outcome.round_winner is None:
            summary = f"Round {outcome.completed_round} finished: it's a tie!"
        else:
            summary = f"Round {outcome.completed_round} finished: {outcome.round_winner} won the round!"
        data = {
            "duelId": duel.id,
            "currentRound": duel.currentRound,
            "scorePlayer1": duel.scorePlayer1,
            "scorePlayer2": duel.scorePlayer2,
        }
        await self._notify(duel.player1, summary, f"Round {outcome.next_round} starts now. It's your turn.", data)
        await self._notify(duel.player2, summary, f"Round {outcome.next_round} starts now. Your opponent goes first.", data)

    async def _duel_finished(self, duel: Duel, outcome: AnswerOutcome):
        data = {"duelId": duel.id, "scorePlayer1": duel.scorePlayer1, "scorePlayer2": duel.scorePlayer2}
        if outcome.winner is None:
            message = f"It's a draw! Final score: {duel.scorePlayer1}:{duel.scorePlayer2}"
            await self._notify(duel.player1, "Draw!", message, data)
            await self._notify(duel.player2, "Draw!", message, data)
            return

        winner_side = duel.side_of(outcome.winner)
        loser = duel.player2 if outcome.winner == duel.player1 else duel.player1
        loser_side = duel.side_of(loser)
        winner_score, loser_score = duel.score_of(winner_side), duel.score_of(loser_side)
        await self._notify(
            outcome.winner, "You won!",
            f"Congratulations, you won the duel! Final score: {winner_score}:{loser_score}", data
        )
        await self._notify(
            loser, "You lost.",
            f"Too bad, you lost the duel. Final score: {loser_score}:{winner_score}", data
        )
