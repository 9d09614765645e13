from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from feedback_import.config import settings
from feedback_import.database import close_database, init_database
from feedback_import.exception_handlers import register_exception_handlers
from feedback_import.imports.router import router as imports_router
from feedback_import.logging_config import setup_logging
from feedback_import.posts.router import router as posts_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await init_database()
    yield
    await close_database()


app = FastAPI(
    title="Feedback Import",
    description="CSV import pipeline for customer feedback boards",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(imports_router, prefix="/api/v1/imports", tags=["imports"])
app.include_router(posts_router, prefix="/api/v1/posts", tags=["posts"])


@app.get("/api/v1/health")
async def health():
    from feedback_import.database import check_health

    await check_health()
    return {"status": "healthy"}
