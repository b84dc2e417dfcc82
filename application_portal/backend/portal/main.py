# File: backend/portal/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from portal.core.config import settings
from portal.api.api import api_router
from portal.db.database import engine
from portal.db import models
from portal.services.storage import ensure_directories

# Set up logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize database more safely
def init_db(bind=None):
    bind = bind or engine
    try:
        logger.info("Creating database tables if they don't exist...")
        for table in models.Base.metadata.sorted_tables:
            try:
                table.create(bind, checkfirst=True)
                logger.info(f"Table ready: {table.name}")
            except Exception as e:
                logger.error(f"Error creating table {table.name}: {e}")

        logger.info("Database initialization completed.")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    ensure_directories()
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    lifespan=lifespan,
)

# Configure CORS with settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router)

@app.get("/")
def read_root():
    return {"status": "Application Portal API is running"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
