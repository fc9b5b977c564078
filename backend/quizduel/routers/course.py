from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from ..dependencies import get_course_model, get_university_model
from ..models.course import Course, CourseModel, University, UniversityModel


router = APIRouter(prefix="/api", tags=["courses"])


class CreateUniversityRequest(BaseModel):
    name: str = Field(..., min_length=1)
    location: Optional[str] = None


class CreateCourseRequest(BaseModel):
    universityId: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


@router.get("/universities")
async def get_universities(universities: UniversityModel = Depends(get_university_model)):
    """List all universities"""
    try:
        result = await universities.find_all()
    except Exception as e:
        print(f"❌ Error retrieving universities: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve universities"
        )
    if not result:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No universities found")
    return result


@router.post("/universities", status_code=status.HTTP_201_CREATED)
async def create_university(
    request_data: CreateUniversityRequest,
    universities: UniversityModel = Depends(get_university_model)
):
    try:
        university_id = await universities.create(University(**request_data.model_dump()))
        return {"id": university_id, "message": "University created"}
    except Exception as e:
        print(f"❌ Error creating university: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create university"
        )


@router.post("/courses", status_code=status.HTTP_201_CREATED)
async def create_course(
    request_data: CreateCourseRequest,
    universities: UniversityModel = Depends(get_university_model),
    courses: CourseModel = Depends(get_course_model)
):
    """Create a course at a university"""
    try:
        if not await universities.exists(request_data.universityId):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="University not found")
        course_id = await courses.create(Course(**request_data.model_dump()))
        return {"id": course_id, "message": "Course created"}
    except HTTPException:
        raise
    except Exception as e:
        print(f"❌ Error creating course: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create course"
        )


@router.get("/courses")
async def get_courses(
    university_id: str = Query(..., alias="universityId", min_length=1),
    courses: CourseModel = Depends(get_course_model)
):
    """Courses offered by a university"""
    try:
        result = await courses.find_by_university(university_id)
    except Exception as e:
        print(f"❌ Error retrieving courses: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve courses"
        )
    if not result:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No courses found for the given universityId"
        )
    return result
