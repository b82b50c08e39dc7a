from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.database import Base, engine
from app.models import pending_registration, session, user  # noqa: F401  (register tables)
from app.routers import auth, my_sessions, sessions
from app.utils.logging_config import setup_logging
from app.utils.response import create_response, handle_exception

setup_logging()

app = FastAPI(title=settings.PROJECT_NAME)

# Auto create tables
Base.metadata.create_all(bind=engine)

# CORS for SPA / API access
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Errors raised outside handler bodies (auth gate, body parsing, unknown routes)
# still use the shared envelope
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    response = handle_exception(exc)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return create_response(
        message="Invalid request",
        data={"errors": exc.errors()},
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
    )


# Add routes
app.include_router(auth.router)
app.include_router(my_sessions.router)
app.include_router(sessions.router)


@app.get("/")
def home():
    try:
        return create_response(
            message="SkillConnect API running",
            data={"service": "skillconnect-backend"},
            status_code=status.HTTP_200_OK
        )
    except Exception as exc:
        return handle_exception(exc)


@app.get("/ping", response_class=PlainTextResponse)
def ping():
    return "pong"
