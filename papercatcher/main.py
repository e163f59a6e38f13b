import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from papercatcher.api.routes.favorites import router as favorites_router
from papercatcher.api.routes.keywords import router as keywords_router
from papercatcher.api.routes.papers import router as papers_router
from papercatcher.config import setup_logging
from papercatcher.database.db.session import init_models
from papercatcher.scheduler.scheduler_service import SchedulerService


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Create any missing tables on startup
    await init_models()

    scheduler = SchedulerService()
    scheduler.start()
    yield
    scheduler.shutdown()


app = FastAPI(title="Paper Catcher API", lifespan=lifespan)

# dev: allow every origin; otherwise only the local frontend
is_dev = os.getenv("ENV", "development") == "development"
cors_origins = (
    ["*"]
    if is_dev
    else [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=not is_dev,  # "*" cannot be combined with credentials
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(keywords_router)
app.include_router(papers_router)
app.include_router(favorites_router)


@app.get("/api/health")
async def health_check():
    return {"status": "ok"}
