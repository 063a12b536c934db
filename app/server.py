from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from app.config import settings
from app.db.database import init_db
from app.middleware.auth import AuthMiddleware
from app.services.session_locks import reset_session_locks

# CORS: use CORS_ORIGINS (comma-separated) or sensible defaults.
if settings.cors_origins:
    _allowed_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
else:
    _allowed_origins = [
        "http://localhost:8000",
        "http://127.0.0.1:8000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    # Session locks belong to the event loop serving this app
    reset_session_locks()
    yield


app = FastAPI(title="Adaptive Math Quiz", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)
app.add_middleware(AuthMiddleware)

# Import and register routes
from app.routes.auth import router as auth_router
from app.routes.quiz_sessions import router as quiz_sessions_router

app.include_router(auth_router)
app.include_router(quiz_sessions_router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}
