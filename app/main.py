import logging

from fastapi import FastAPI

from app.core.error_handlers import register_error_handlers
from app.core.logging_middleware import LoggingMiddleware
from app.db.init_db import init_db
from app.routers.student import router as student_router

logging.basicConfig(level=logging.INFO)

app = FastAPI(title="Micro LMS Student")

# Middleware
app.add_middleware(LoggingMiddleware)

register_error_handlers(app)


# Health check
@app.get("/health")
def health():
    return {"status": "ok"}


# Startup event
@app.on_event("startup")
def on_startup():
    init_db()


@app.on_event("shutdown")
def on_shutdown():
    session = getattr(app.state, "student_session", None)
    if session is not None:
        session.close()
        app.state.student_session = None


app.include_router(student_router, prefix="/student", tags=["student"])
