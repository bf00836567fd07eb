# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-12-20
# Updated: 2026-02-14
# Description: AppContainer.py
# -----------------------------------------------------------------------------
from functools import lru_cache

from config.Config import Config
from embedding.OpenAIEmbedder import OpenAIEmbedder
from services.EmbeddingService import EmbeddingService
from utility.logging_utils import get_class_logger
from vectorstore.ChromaEmbeddingVectorStore import ChromaEmbeddingVectorStore
from vectorstore.EmbeddingVectorStore import EmbeddingVectorStore
from vectorstore.InMemoryEmbeddingVectorStore import InMemoryEmbeddingVectorStore


class AppContainer:
    """
    Owns heavy object instantiation and application wiring.
    Singleton instances are provided via FastAPI dependencies.
    """

    def __init__(self, cfg: Config | None = None) -> None:
        self.logger = get_class_logger(self.__class__)

        # Configuration
        self.cfg = cfg or Config.from_env()
        self.logger.info("Configuration: %s", self.cfg.summary())

        # Core infrastructure
        self.embedder = OpenAIEmbedder(cfg=self.cfg)
        self.store = self.build_store(self.cfg)

        # Return a singleton EmbeddingService instance
        self.embedding_service = EmbeddingService(
            embedder=self.embedder,
            store=self.store,
            id_length=self.cfg.id_length,
        )

    @staticmethod
    def build_store(cfg: Config) -> EmbeddingVectorStore:
        if cfg.vector_backend == "memory":
            return InMemoryEmbeddingVectorStore()
        return ChromaEmbeddingVectorStore(cfg=cfg)


# Built on first use so that importing the app never opens a store connection
@lru_cache
def get_app_container() -> AppContainer:
    return AppContainer()
