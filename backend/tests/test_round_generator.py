"""Tests for turning the question bank into shared duel rounds."""

import pytest

from quizduel.models.duel import AnswerStatus
from quizduel.services.round_generator import RoundGenerator, build_rounds
from quizduel.utils.errors import InsufficientData, InvalidInput

from conftest import FakeQuestionBank, make_question


class TestBuildRounds:
    def test_partitions_contiguously(self):
        questions = [make_question(i) for i in range(6)]
        rounds = build_rounds(questions, 3)

        assert [r.roundNumber for r in rounds] == [1, 2]
        assert [a.questionId for a in rounds[0].player1Answers] == ["q0", "q1", "q2"]
        assert [a.questionId for a in rounds[1].player1Answers] == ["q3", "q4", "q5"]

    def test_both_players_get_identical_question_order(self):
        rounds = build_rounds([make_question(i) for i in range(15)], 3)

        for r in rounds:
            assert [a.questionId for a in r.player1Answers] == [a.questionId for a in r.player2Answers]
            assert len(r.player1Answers) == 3

    def test_answers_start_unanswered_with_snapshotted_content(self):
        question = make_question(1, correct="c")
        rounds = build_rounds([question], 1)
        entry = rounds[0].player1Answers[0]

        assert entry.status == AnswerStatus.UNANSWERED
        assert entry.selectedOptionId is None
        assert entry.questionText == "Question 1?"
        assert entry.correctOptionId == "c"
        assert [o.id for o in entry.options] == ["a", "b", "c", "d"]
        assert rounds[0].currentQuestionIndex == 0

    def test_snapshot_is_independent_of_bank_and_other_side(self):
        question = make_question(1)
        rounds = build_rounds([question], 1)

        question.options[0].text = "edited in the bank"
        rounds[0].player1Answers[0].options[1].text = "changed"

        assert rounds[0].player1Answers[0].options[0].text == "Option A"
        assert rounds[0].player2Answers[0].options[1].text == "Option B"

    def test_rejects_uneven_partition(self):
        with pytest.raises(InvalidInput):
            build_rounds([make_question(i) for i in range(4)], 3)


class TestRoundGenerator:
    async def test_fetches_exactly_the_needed_questions_in_stable_order(self):
        bank = FakeQuestionBank([make_question(i) for i in range(20)])
        rounds = await RoundGenerator(bank).generate_rounds(5, 3)

        assert bank.list_calls == [(15, "createdAt")]
        assert len(rounds) == 5
        flat = [a.questionId for r in rounds for a in r.player1Answers]
        assert flat == [f"q{i}" for i in range(15)]

    async def test_same_bank_gives_same_rounds(self):
        bank = FakeQuestionBank([make_question(i) for i in range(15)])
        generator = RoundGenerator(bank)

        first = await generator.generate_rounds(5, 3)
        second = await generator.generate_rounds(5, 3)
        assert [r.model_dump() for r in first] == [r.model_dump() for r in second]

    async def test_short_bank_is_insufficient_data(self):
        bank = FakeQuestionBank([make_question(i) for i in range(14)])
        with pytest.raises(InsufficientData, match="14 of 15"):
            await RoundGenerator(bank).generate_rounds(5, 3)

    async def test_rejects_non_positive_sizes(self):
        generator = RoundGenerator(FakeQuestionBank([]))
        with pytest.raises(InvalidInput):
            await generator.generate_rounds(0, 3)
