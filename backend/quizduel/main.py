import os
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from datetime import datetime
from contextlib import asynccontextmanager

from .database.connection import connect_to_mongo, close_mongo_connection, get_database
from .routers import classroom, course, duel, push_notification, question, user


# --------------------------------------------------------
# LIFESPAN
# --------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    await connect_to_mongo()
    yield
    await close_mongo_connection()


app = FastAPI(title="QuizDuel API", lifespan=lifespan)


# --------------------------------------------------------
# CORS (mobile web client)
# --------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --------------------------------------------------------
# SECURITY HEADERS
# --------------------------------------------------------
@app.middleware("http")
async def security_headers_middleware(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["X-Frame-Options"] = "SAMEORIGIN"
    return response


# --------------------------------------------------------
# MISSING / MALFORMED FIELDS -> 400
# --------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # loc looks like ("body", "playerId") or ("query", "universityId")
    fields = sorted({
        str(error["loc"][1]) for error in exc.errors() if len(error.get("loc", ())) > 1
    })
    detail = f"Missing or invalid fields: {', '.join(fields)}" if fields else "Invalid request body"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


# --------------------------------------------------------
# ROUTERS
# --------------------------------------------------------
app.include_router(duel.router)
app.include_router(question.router)
app.include_router(course.router)
app.include_router(user.router)
app.include_router(classroom.router)
app.include_router(push_notification.router)


# --------------------------------------------------------
# HEALTH CHECK
# --------------------------------------------------------
@app.get("/health")
async def health_check():
    mongodb_status = "disconnected"
    try:
        database = get_database()
        if database is not None:
            await database.command("ping")
            mongodb_status = "connected"
    except Exception as e:
        print(f"⚠️ Health check ping failed: {e}")
        mongodb_status = "error"

    return {
        "status": "ok",
        "time": datetime.now().isoformat(),
        "database": {"mongodb": mongodb_status}
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("quizduel.main:app", host="0.0.0.0", port=int(os.getenv("PORT", "3001")))
