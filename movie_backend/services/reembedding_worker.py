import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)


class ReembeddingWorker:
    """
    Background executor for embedding regeneration after movie updates

    submit() never blocks on the regeneration itself and hands back a Future.
    Failures are logged when the job finishes; they only reach a caller that
    chooses to wait on the Future. There is no retry and no ordering guarantee
    against later reads.
    """

    def __init__(self, regenerate: Optional[Callable[[str, Dict[str, Any]], Any]] = None,
                 max_workers: int = 2):
        self._regenerate = regenerate
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="reembed")

    def _resolve_regenerate(self) -> Callable[[str, Dict[str, Any]], Any]:
        if self._regenerate is None:
            # Import here to avoid circular dependency
            from movie_backend.services.ingestion_service import ingestion_service
            self._regenerate = ingestion_service.regenerate_movie_embeddings
        return self._regenerate

    def submit(self, movie_id: str, payload: Dict[str, Any]) -> Future:
        regenerate = self._resolve_regenerate()
        future = self._executor.submit(regenerate, movie_id, payload)
        future.add_done_callback(lambda done: self._log_outcome(movie_id, done))
        logger.info(f"Scheduled background embedding regeneration for movie {movie_id}")
        return future

    @staticmethod
    def _log_outcome(movie_id: str, future: Future):
        if future.cancelled():
            logger.warning(f"Background embedding regeneration cancelled for movie {movie_id}")
            return

        error = future.exception()
        if error is not None:
            logger.error(f"Background embedding regeneration failed for movie {movie_id}: {str(error)}")
        else:
            logger.info(f"Background embedding regeneration completed for movie {movie_id}")

    def shutdown(self, wait: bool = True):
        self._executor.shutdown(wait=wait)
