"""HTTP-level tests: status codes and payload shapes, with services swapped for in-memory fakes."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from quizduel import dependencies
from quizduel.main import app
from quizduel.models.question import Question

from conftest import make_duel


@pytest.fixture
def client(duel_service, matchmaking):
    app.dependency_overrides[dependencies.get_duel_service] = lambda: duel_service
    app.dependency_overrides[dependencies.get_matchmaking_service] = lambda: matchmaking
    # No lifespan: the app never connects to Mongo in these tests
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestDuelEndpoints:
    def test_join_then_pair(self, client, duels):
        first = client.post("/api/duels/join", json={"playerId": "alice", "classroomId": "class-1"})
        assert first.status_code == 200
        assert first.json() == {"matched": False}

        second = client.post("/api/duels/join", json={"playerId": "bob", "classroomId": "class-1"})
        assert second.status_code == 200
        body = second.json()
        assert body["matched"] is True
        assert body["duelId"] in duels.docs

    def test_join_missing_field_is_400(self, client):
        response = client.post("/api/duels/join", json={"playerId": "alice"})
        assert response.status_code == 400
        assert "classroomId" in response.json()["detail"]

    def test_join_empty_field_is_400(self, client):
        response = client.post("/api/duels/join", json={"playerId": "", "classroomId": "class-1"})
        assert response.status_code == 400

    def test_join_unknown_classroom_is_404(self, client):
        response = client.post("/api/duels/join", json={"playerId": "alice", "classroomId": "nope"})
        assert response.status_code == 404
        assert response.json() == {"detail": "Classroom not found"}

    def test_join_twice_is_400(self, client):
        client.post("/api/duels/join", json={"playerId": "alice", "classroomId": "class-1"})
        response = client.post("/api/duels/join", json={"playerId": "alice", "classroomId": "class-1"})
        assert response.status_code == 400

    def test_answer_flow_and_errors(self, client, duels):
        duels.put(make_duel(rounds=1, per_round=1))

        wrong_turn = client.post("/api/duels/answer", json={"duelId": "duel-1", "playerId": "bob", "selectedOptionId": "a"})
        assert wrong_turn.status_code == 403

        outsider = client.post("/api/duels/answer", json={"duelId": "duel-1", "playerId": "carol", "selectedOptionId": "a"})
        assert outsider.status_code == 403

        ok = client.post("/api/duels/answer", json={"duelId": "duel-1", "playerId": "alice", "selectedOptionId": "b"})
        assert ok.status_code == 200
        assert ok.json() == {"isCorrect": False, "correctOptionId": "a"}

        client.post("/api/duels/answer", json={"duelId": "duel-1", "playerId": "bob", "selectedOptionId": "a"})
        finished = client.post("/api/duels/answer", json={"duelId": "duel-1", "playerId": "alice", "selectedOptionId": "a"})
        assert finished.status_code == 400
        assert finished.json() == {"detail": "Duel already finished"}

    def test_answer_unknown_duel_is_404(self, client):
        response = client.post("/api/duels/answer", json={"duelId": "x", "playerId": "alice", "selectedOptionId": "a"})
        assert response.status_code == 404

    def test_answer_missing_field_is_400(self, client):
        response = client.post("/api/duels/answer", json={"duelId": "duel-1", "playerId": "alice"})
        assert response.status_code == 400

    def test_status(self, client, duels):
        duels.put(make_duel())
        response = client.get("/api/duels/duel-1/status")

        assert response.status_code == 200
        assert response.json() == {
            "currentRound": 0,
            "currentQuestionIndex": 0,
            "currentTurnId": "alice",
            "status": "active",
            "scorePlayer1": 0,
            "scorePlayer2": 0,
        }

    def test_status_with_corrupted_round_is_400(self, client, duels):
        duels.put(make_duel(rounds=2).model_copy(update={"currentRound": 5}))
        response = client.get("/api/duels/duel-1/status")
        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid round data"}

    def test_status_unknown_is_404(self, client):
        assert client.get("/api/duels/missing/status").status_code == 404

    def test_get_duel_hides_unplayed_answers(self, client, duels):
        duels.put(make_duel())
        response = client.get("/api/duels/duel-1", params={"viewerId": "bob"})

        assert response.status_code == 200
        body = response.json()
        assert "version" not in body
        assert body["rounds"][0]["player1Answers"][0]["correctOptionId"] is None

    def test_list_duels(self, client, duels):
        duels.put(make_duel())
        response = client.get("/api/duels", params={"playerId": "bob"})
        assert response.status_code == 200
        assert response.history == []
        assert [d["id"] for d in response.json()] == ["duel-1"]


class TestQuestionEndpoint:
    @pytest.fixture
    def questions(self):
        model = AsyncMock()
        model.create.side_effect = lambda q: q.model_copy(update={"id": "new-question"})
        app.dependency_overrides[dependencies.get_question_model] = lambda: model
        yield model
        app.dependency_overrides.clear()

    def payload(self, **overrides):
        data = {
            "text": "Capital of France?",
            "options": [{"id": o, "text": o.upper()} for o in "abcd"],
            "correctOptionId": "c",
        }
        data.update(overrides)
        return data

    def test_create_question(self, questions):
        response = TestClient(app).post("/api/questions/", json=self.payload())

        assert response.status_code == 201
        assert response.json()["id"] == "new-question"
        created = questions.create.await_args.args[0]
        assert isinstance(created, Question)
        assert created.correctOptionId == "c"

    def test_requires_four_options(self, questions):
        payload = self.payload(options=[{"id": "a", "text": "A"}, {"id": "b", "text": "B"}], correctOptionId="a")
        response = TestClient(app).post("/api/questions/", json=payload)
        assert response.status_code == 400
        questions.create.assert_not_awaited()

    def test_correct_option_must_exist(self, questions):
        response = TestClient(app).post("/api/questions/", json=self.payload(correctOptionId="z"))
        assert response.status_code == 400

    def test_option_ids_unique(self, questions):
        options = [{"id": "a", "text": str(i)} for i in range(4)]
        response = TestClient(app).post("/api/questions/", json=self.payload(options=options, correctOptionId="a"))
        assert response.status_code == 400


class TestSupportingEndpoints:
    def test_course_listing_requires_university_id(self):
        app.dependency_overrides[dependencies.get_course_model] = lambda: AsyncMock()
        try:
            response = TestClient(app).get("/api/courses")
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 400

    def test_unknown_user_is_404(self):
        users = AsyncMock()
        users.find_by_id.return_value = None
        app.dependency_overrides[dependencies.get_user_model] = lambda: users
        try:
            response = TestClient(app).get("/api/users/abc")
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 404

    def test_duplicate_email_is_409(self):
        users = AsyncMock()
        users.create.return_value = None
        app.dependency_overrides[dependencies.get_user_model] = lambda: users
        try:
            response = TestClient(app).post("/api/users/", json={"email": "a@example.com"})
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 409

    def test_classroom_members_skip_deleted_users(self):
        classrooms = AsyncMock()
        classrooms.find_by_id.return_value = {"id": "c1", "courseId": "k1", "members": ["u1", "u2"], "waitingPlayer": None}
        users = AsyncMock()
        users.find_many.return_value = [{"id": "u2", "displayName": "Bob"}]
        app.dependency_overrides[dependencies.get_classroom_model] = lambda: classrooms
        app.dependency_overrides[dependencies.get_user_model] = lambda: users
        try:
            response = TestClient(app).get("/api/classrooms/c1")
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 200
        assert response.json()["members"] == [{"id": "u2", "displayName": "Bob"}]

    def test_health_without_database(self):
        response = TestClient(app).get("/health")
        assert response.status_code == 200
        assert response.json()["database"]["mongodb"] == "disconnected"
