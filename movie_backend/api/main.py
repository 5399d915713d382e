# Load environment variables from .env file first, before any other imports
from dotenv import load_dotenv
load_dotenv()

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from movie_backend.api.routes import movies, vectors
from movie_backend.config import get_settings
from movie_backend.database.vector_client import initialize_vector_db

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Collection/index must exist (and Chroma's collection id be known) before the first upsert
    try:
        initialize_vector_db()
    except Exception as e:
        logger.error(f"Vector database initialization failed, retry with POST /vectors/initialize: {str(e)}")
    yield


app = FastAPI(title="Movie Vector Search Service", version="1.0.0", lifespan=lifespan)

app.include_router(movies.router, prefix="/movies", tags=["movies"])
app.include_router(vectors.router, prefix="/vectors", tags=["vectors"])


@app.get("/health")
def health_check():
    return {"status": "healthy"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
