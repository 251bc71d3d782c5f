"""Main FastAPI application with modularized routes."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from funnel import __version__
from funnel.database import init_db
from funnel.logging_setup import setup_console_logging
from funnel.routes import analytics, articles, auth, quizzes, responses

setup_console_logging()

app = FastAPI(title="Quiz Funnel API", version=__version__)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Startup events
@app.on_event("startup")
def startup_events() -> None:
    """Create database tables on startup."""
    init_db()


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# Include routers
app.include_router(auth.router)
app.include_router(quizzes.router)
app.include_router(responses.router)
app.include_router(analytics.router)
app.include_router(articles.router)
