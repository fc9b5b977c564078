from typing import List
from ..models.duel import PlayerAnswer, Round, ROUNDS_PER_DUEL, QUESTIONS_PER_ROUND
from ..models.question import AnswerOption, Question, QuestionModel
from ..utils.errors import InsufficientData, InvalidInput


def _snapshot(question: Question) -> PlayerAnswer:
    # Fresh copies per side, so later bank edits or the other player's answers never leak in
    return PlayerAnswer(
        questionId=question.id,
        questionText=question.text,
        options=[AnswerOption(id=o.id, text=o.text) for o in question.options],
        correctOptionId=question.correctOptionId,
    )


def build_rounds(questions: List[Question], questions_per_round: int) -> List[Round]:
    """Split questions into contiguous rounds that both players share."""
    if questions_per_round <= 0 or len(questions) % questions_per_round:
        raise InvalidInput("Question count must be a positive multiple of questions per round")

    rounds = []
    for start in range(0, len(questions), questions_per_round):
        chunk = questions[start:start + questions_per_round]
        rounds.append(Round(
            roundNumber=len(rounds) + 1,
            currentQuestionIndex=0,
            player1Answers=[_snapshot(q) for q in chunk],
            player2Answers=[_snapshot(q) for q in chunk],
        ))
    return rounds


class RoundGenerator:
    def __init__(self, question_bank: QuestionModel):
        self.question_bank = question_bank

    async def generate_rounds(
        self,
        rounds_count: int = ROUNDS_PER_DUEL,
        questions_per_round: int = QUESTIONS_PER_ROUND
    ) -> List[Round]:
        if rounds_count <= 0 or questions_per_round <= 0:
            raise InvalidInput("Rounds and questions per round must be positive")

        needed = rounds_count * questions_per_round
        questions = await self.question_bank.list(limit=needed, order_key="createdAt")
        if len(questions) < needed:
            print(f"⚠️ Question bank holds {len(questions)} questions, a duel needs {needed}")
            raise InsufficientData(
                f"Not enough questions to start a duel ({len(questions)} of {needed} available)"
            )
        return build_rounds(questions[:needed], questions_per_round)
