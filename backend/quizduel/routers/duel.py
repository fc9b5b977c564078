from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from ..dependencies import get_duel_service, get_matchmaking_service
from ..models.duel import DuelStatus
from ..services.duel_service import DuelService
from ..services.matchmaking_service import MatchmakingService
from ..utils.errors import DuelAppError, to_http_exception


router = APIRouter(prefix="/api/duels", tags=["duels"])


class JoinQueueRequest(BaseModel):
    playerId: str = Field(..., min_length=1)
    classroomId: str = Field(..., min_length=1)


class SubmitAnswerRequest(BaseModel):
    duelId: str = Field(..., min_length=1)
    playerId: str = Field(..., min_length=1)
    selectedOptionId: str = Field(..., min_length=1)


class JoinQueueResponse(BaseModel):
    matched: bool
    duelId: Optional[str] = None


class SubmitAnswerResponse(BaseModel):
    isCorrect: bool
    correctOptionId: str


class DuelStatusResponse(BaseModel):
    currentRound: int
    currentQuestionIndex: int
    currentTurnId: Optional[str] = None
    status: DuelStatus
    scorePlayer1: int
    scorePlayer2: int


@router.post("/join", response_model=JoinQueueResponse, response_model_exclude_none=True)
async def join_duel_queue(
    request_data: JoinQueueRequest,
    matchmaking: MatchmakingService = Depends(get_matchmaking_service)
):
    """Wait for an opponent, or get paired with the one already waiting"""
    try:
        return await matchmaking.join_duel(request_data.classroomId, request_data.playerId)
    except DuelAppError as e:
        raise to_http_exception(e)
    except Exception as e:
        print(f"❌ Error joining duel queue: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to join the duel queue"
        )


@router.post("/leave")
async def leave_duel_queue(
    request_data: JoinQueueRequest,
    matchmaking: MatchmakingService = Depends(get_matchmaking_service)
):
    """Stop waiting for an opponent"""
    try:
        left = await matchmaking.leave_queue(request_data.classroomId, request_data.playerId)
        return {"left": left}
    except DuelAppError as e:
        raise to_http_exception(e)
    except Exception as e:
        print(f"❌ Error leaving duel queue: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to leave the duel queue"
        )


@router.post("/answer", response_model=SubmitAnswerResponse)
async def submit_answer(
    request_data: SubmitAnswerRequest,
    duels: DuelService = Depends(get_duel_service)
):
    """Answer the current question of a duel"""
    try:
        return await duels.submit_answer(
            request_data.duelId, request_data.playerId, request_data.selectedOptionId
        )
    except DuelAppError as e:
        raise to_http_exception(e)
    except Exception as e:
        print(f"❌ Error processing answer: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process the answer"
        )


@router.get("/{duel_id}/status", response_model=DuelStatusResponse)
async def get_duel_status(
    duel_id: str,
    duels: DuelService = Depends(get_duel_service)
):
    """Current round, question position and turn"""
    try:
        return await duels.get_status(duel_id)
    except DuelAppError as e:
        raise to_http_exception(e)
    except Exception as e:
        print(f"❌ Error retrieving duel status: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve duel status"
        )


@router.get("/{duel_id}")
async def get_duel(
    duel_id: str,
    viewer_id: Optional[str] = Query(None, alias="viewerId"),
    duels: DuelService = Depends(get_duel_service)
):
    """Full duel for resuming a session"""
    try:
        return await duels.get_duel(duel_id, viewer_id)
    except DuelAppError as e:
        raise to_http_exception(e)
    except Exception as e:
        print(f"❌ Error retrieving duel: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve duel"
        )


@router.get("", response_model=List[dict])
async def list_duels(
    player_id: str = Query(..., alias="playerId", min_length=1),
    duel_status: Optional[DuelStatus] = Query(None, alias="status"),
    duels: DuelService = Depends(get_duel_service)
):
    try:
        return await duels.list_duels(player_id, duel_status.value if duel_status else None)
    except DuelAppError as e:
        raise to_http_exception(e)
    except Exception as e:
        print(f"❌ Error listing duels: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list duels"
        )
