"""
Blog Backend API Server
Core functionality: Posts, Comments on posts, ownership-based authorization
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import ALLOWED_ORIGINS
from database.connection import init_database, close_database
from api.routes import health, posts, comments
from utils.error_handling import setup_error_handling

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    app.state.db_pool = await init_database()
    yield
    await close_database(app.state.db_pool)


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Build the FastAPI application; tests disable the database lifespan"""
    app = FastAPI(
        title="Blog Backend",
        description="Backend API for posts and comments with owner-only mutation",
        version="1.0.0",
        lifespan=lifespan if use_lifespan else None
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    setup_error_handling(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(posts.router, prefix="/v1/posts", tags=["Posts"])
    app.include_router(comments.router, prefix="/v1/comments", tags=["Comments"])

    return app


# FastAPI app instance is exported for use by uvicorn
app = create_app()
