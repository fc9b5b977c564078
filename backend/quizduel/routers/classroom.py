from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from ..dependencies import get_classroom_model, get_course_model, get_user_model
from ..models.classroom import ClassroomModel
from ..models.course import CourseModel
from ..models.user import UserModel


router = APIRouter(prefix="/api/classrooms", tags=["classrooms"])


class JoinCourseRequest(BaseModel):
    userId: str = Field(..., min_length=1)
    courseId: str = Field(..., min_length=1)


@router.post("/join")
async def join_course(
    request_data: JoinCourseRequest,
    users: UserModel = Depends(get_user_model),
    courses: CourseModel = Depends(get_course_model),
    classrooms: ClassroomModel = Depends(get_classroom_model)
):
    """Enroll a user in a course and place them in the course's classroom"""
    try:
        if not await courses.exists(request_data.courseId):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found")
        if not await users.set_course(request_data.userId, request_data.courseId):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

        classroom_id = await classrooms.add_member(request_data.courseId, request_data.userId)
        return {"classroomId": classroom_id, "message": "User joined the course"}
    except HTTPException:
        raise
    except Exception as e:
        print(f"❌ Error joining course: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to join course"
        )


@router.get("/{classroom_id}")
async def get_classroom(
    classroom_id: str,
    users: UserModel = Depends(get_user_model),
    classrooms: ClassroomModel = Depends(get_classroom_model)
):
    """Classroom with its members' display names"""
    try:
        classroom = await classrooms.find_by_id(classroom_id)
        if not classroom:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Classroom not found")

        # Members whose user record is gone are left out
        member_docs = await users.find_many(classroom.get("members", []))
        names = {user["id"]: user.get("displayName") or "Unknown" for user in member_docs}
        members = [
            {"id": member_id, "displayName": names[member_id]}
            for member_id in classroom.get("members", [])
            if member_id in names
        ]
        return {
            "id": classroom["id"],
            "courseId": classroom.get("courseId"),
            "members": members,
            "waitingPlayer": classroom.get("waitingPlayer"),
        }
    except HTTPException:
        raise
    except Exception as e:
        print(f"❌ Error fetching classroom: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch classroom"
        )
