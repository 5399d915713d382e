import logging
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection

from movie_backend.config import get_settings
from movie_backend.models.movie_models import Movie

logger = logging.getLogger(__name__)


class MongoDBClient:
    """
    MongoDB client for movie documents stored in the <database>.movies collection
    Documents are converted to Movie models at this boundary, with the ObjectId
    exposed as the canonical string id
    """

    def __init__(self, connection_string: str = None, database_name: str = None,
                 collection: Optional[Collection] = None):
        self.client = None
        self.db = None
        self.collection = collection

        if collection is not None:
            return

        # Fall back to configuration when nothing was provided
        settings = get_settings()
        if not connection_string:
            connection_string = settings.mongodb_connection_string
        if not database_name:
            database_name = settings.mongodb_database

        if connection_string:
            self.client = MongoClient(connection_string)
            self.db = self.client[database_name]
            self.collection = self.db.movies
            logger.info(f"MongoDB connection established (database: {database_name})")
        else:
            logger.warning("No MongoDB connection string provided in environment variables or constructor")

    @staticmethod
    def is_valid_id(movie_id: Any) -> bool:
        return isinstance(movie_id, str) and ObjectId.is_valid(movie_id)

    @staticmethod
    def to_movie(document: Dict[str, Any]) -> Movie:
        data = dict(document)
        data["id"] = str(data.pop("_id"))
        return Movie(**data)

    def _movies(self) -> Collection:
        if self.collection is None:
            raise RuntimeError("MongoDB collection not available")
        return self.collection

    def insert_movie(self, document: Dict[str, Any]) -> Movie:
        now = datetime.now(timezone.utc)
        document = {**document, "created_at": now, "updated_at": now}
        result = self._movies().insert_one(document)
        document["_id"] = result.inserted_id
        logger.info(f"Inserted movie {result.inserted_id}")
        return self.to_movie(document)

    def find_movie(self, movie_id: str) -> Optional[Movie]:
        document = self._movies().find_one({"_id": ObjectId(movie_id)})
        return self.to_movie(document) if document else None

    def find_movies_by_ids(self, movie_ids: List[str]) -> List[Movie]:
        object_ids = [ObjectId(movie_id) for movie_id in movie_ids]
        cursor = self._movies().find({"_id": {"$in": object_ids}})
        movies = [self.to_movie(doc) for doc in cursor]
        logger.info(f"Fetched {len(movies)}/{len(set(movie_ids))} movies by id")
        return movies

    def find_movies(self, sort_by: str = "created_at", sort_order: str = "desc",
                    skip: int = 0, limit: int = 20) -> List[Movie]:
        direction = ASCENDING if sort_order == "asc" else DESCENDING
        cursor = self._movies().find().sort(sort_by, direction).skip(skip).limit(limit)
        return [self.to_movie(doc) for doc in cursor]

    def count_movies(self) -> int:
        return self._movies().count_documents({})

    def update_movie(self, movie_id: str, fields: Dict[str, Any]) -> Optional[Movie]:
        document = self._movies().find_one_and_update(
            {"_id": ObjectId(movie_id)},
            {"$set": {**fields, "updated_at": datetime.now(timezone.utc)}},
            return_document=ReturnDocument.AFTER,
        )
        return self.to_movie(document) if document else None

    def delete_movie(self, movie_id: str) -> bool:
        result = self._movies().delete_one({"_id": ObjectId(movie_id)})
        return result.deleted_count > 0

    def close(self):
        """Close MongoDB connection"""
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed")

# Global MongoDB client instance (automatically initialized with environment variables)
mongodb_client = MongoDBClient()
