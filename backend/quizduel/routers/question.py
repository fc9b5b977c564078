from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from ..dependencies import get_question_model
from ..models.question import AnswerOption, OPTIONS_PER_QUESTION, Question, QuestionModel


router = APIRouter(prefix="/api/questions", tags=["questions"])


class CreateQuestionRequest(BaseModel):
    text: str = Field(..., min_length=1)
    options: List[AnswerOption]
    correctOptionId: str = Field(..., min_length=1)


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_question(
    question_data: CreateQuestionRequest,
    questions: QuestionModel = Depends(get_question_model)
):
    """Add a multiple choice question to the duel question bank"""
    option_ids = [option.id for option in question_data.options]
    if len(option_ids) != OPTIONS_PER_QUESTION:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"A question needs exactly {OPTIONS_PER_QUESTION} options"
        )
    if len(set(option_ids)) != len(option_ids):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Option ids must be unique"
        )
    if question_data.correctOptionId not in option_ids:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="correctOptionId must match one of the option ids"
        )

    try:
        created = await questions.create(Question(**question_data.model_dump()))
        return {"id": created.id, "message": "Question created successfully"}
    except Exception as e:
        print(f"❌ Error creating question: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create question"
        )
