"""
FastAPI dependencies wiring the models and services onto the shared database handle.

Routers never reach for a global client; tests swap any of these through
app.dependency_overrides.
"""
from fastapi import Depends, HTTPException, status
from .database.connection import get_database
from .models.classroom import ClassroomModel
from .models.course import CourseModel, UniversityModel
from .models.duel import DuelModel
from .models.question import QuestionModel
from .models.user import UserModel
from .services.duel_notifications import DuelNotifier
from .services.duel_service import DuelService
from .services.matchmaking_service import MatchmakingService
from .services.push_service import PushNotificationService
from .services.round_generator import RoundGenerator


def get_db():
    database = get_database()
    if database is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not connected"
        )
    return database


def get_push_service(database=Depends(get_db)) -> PushNotificationService:
    return PushNotificationService(database)


def get_notifier(push: PushNotificationService = Depends(get_push_service)) -> DuelNotifier:
    return DuelNotifier(push)


def get_duel_service(
    database=Depends(get_db),
    notifier: DuelNotifier = Depends(get_notifier)
) -> DuelService:
    return DuelService(DuelModel(database), notifier)


def get_matchmaking_service(
    database=Depends(get_db),
    notifier: DuelNotifier = Depends(get_notifier)
) -> MatchmakingService:
    return MatchmakingService(
        classrooms=ClassroomModel(database),
        users=UserModel(database),
        duels=DuelModel(database),
        round_generator=RoundGenerator(QuestionModel(database)),
        notifier=notifier,
    )


def get_question_model(database=Depends(get_db)) -> QuestionModel:
    return QuestionModel(database)


def get_user_model(database=Depends(get_db)) -> UserModel:
    return UserModel(database)


def get_university_model(database=Depends(get_db)) -> UniversityModel:
    return UniversityModel(database)


def get_course_model(database=Depends(get_db)) -> CourseModel:
    return CourseModel(database)


def get_classroom_model(database=Depends(get_db)) -> ClassroomModel:
    return ClassroomModel(database)
