# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-08
# Description: Config
# -----------------------------------------------------------------------------

from dataclasses import dataclass

from dotenv import load_dotenv, find_dotenv

import settings
from settings import _env, _env_int

# Load .env once globally
load_dotenv(find_dotenv(usecwd=True), override=False)


@dataclass(frozen=True)
class Config:
    # OpenAI embeddings (the API key arrives per request as a bearer token)
    openai_base_url: str = settings.OPENAI_BASE_URL_DEFAULT
    openai_embed_model: str = settings.EMBED_MODEL_DEFAULT

    # Vector backend selection
    vector_backend: str = settings.VECTOR_BACKEND_DEFAULT
    vector_collection: str = settings.VECTOR_COLLECTION_DEFAULT

    # Chroma Vector Database
    chroma_mode: str = settings.CHROMA_MODE_DEFAULT
    chroma_endpoint: str = ""
    chroma_api_key: str = ""
    chroma_tenant: str = ""
    chroma_database: str = ""
    chroma_persist_dir: str = settings.CHROMA_PERSIST_DIR_DEFAULT

    # Ids and search
    id_length: int = settings.ID_LENGTH_DEFAULT
    default_top_k: int = settings.DEFAULT_TOP_K
    max_top_k: int = settings.MAX_TOP_K_DEFAULT

    # ---- Single source of truth: field_name -> ENV VAR NAME ----
    ENV_VARS = {
        # OpenAI
        "openai_base_url": "OPENAI_BASE_URL",      # e.g. https://api.openai.com/v1
        "openai_embed_model": "OPENAI_EMBED_MODEL",

        # Backend
        "vector_backend": "EMBED_VECTOR_BACKEND",  # memory | chroma
        "vector_collection": "EMBED_VECTOR_COLLECTION",

        # Chroma
        "chroma_mode": "CHROMA_MODE",              # cloud | persistent | http
        "chroma_endpoint": "CHROMA_ENDPOINT",
        "chroma_api_key": "CHROMA_API_KEY",
        "chroma_tenant": "CHROMA_TENANT",
        "chroma_database": "CHROMA_DATABASE",
        "chroma_persist_dir": "CHROMA_PERSIST_DIR",

        # Ids and search
        "id_length": "EMBED_ID_LENGTH",
        "default_top_k": "EMBED_DEFAULT_TOP_K",
        "max_top_k": "EMBED_MAX_TOP_K",
    }

    INT_FIELDS = ("id_length", "default_top_k", "max_top_k")

    # Convenient *groups* for use in tests / health checks
    CHROMA_CLOUD_ENV_VARS = (
        "CHROMA_API_KEY",
        "CHROMA_TENANT",
        "CHROMA_DATABASE",
    )

    @staticmethod
    def from_env() -> "Config":
        """Build Config object from environment variables, keeping defaults for unset ones."""
        defaults = Config()
        kwargs = {}
        for field_name, env_name in Config.ENV_VARS.items():
            default = getattr(defaults, field_name)
            if field_name in Config.INT_FIELDS:
                kwargs[field_name] = _env_int(env_name, default)
            else:
                kwargs[field_name] = _env(env_name, default)
        return Config(**kwargs)

    def __post_init__(self):
        """
        Fail fast on configuration that can never serve a request.
        """
        if self.vector_backend not in settings.VECTOR_BACKENDS:
            raise ValueError(
                f"{self.ENV_VARS['vector_backend']} must be one of {settings.VECTOR_BACKENDS}, "
                f"got {self.vector_backend!r}"
            )

        if self.vector_backend == "chroma":
            if self.chroma_mode not in settings.CHROMA_MODES:
                raise ValueError(
                    f"{self.ENV_VARS['chroma_mode']} must be one of {settings.CHROMA_MODES}, "
                    f"got {self.chroma_mode!r}"
                )
            if self.chroma_mode == "cloud":
                missing = [
                    self.ENV_VARS[f]
                    for f in ("chroma_api_key", "chroma_tenant", "chroma_database")
                    if not getattr(self, f)
                ]
                if missing:
                    raise ValueError(f"Missing required environment variables: {missing}")
            if self.chroma_mode == "http" and not self.chroma_endpoint:
                raise ValueError(f"Missing required environment variables: ['{self.ENV_VARS['chroma_endpoint']}']")

        if not self.openai_base_url or not self.openai_embed_model:
            raise ValueError("OpenAI base url and embedding model must not be empty")

        for f in self.INT_FIELDS:
            if getattr(self, f) < 1:
                raise ValueError(f"{self.ENV_VARS[f]} must be a positive int, got {getattr(self, f)}")

        if self.default_top_k > self.max_top_k:
            raise ValueError(
                f"{self.ENV_VARS['default_top_k']} ({self.default_top_k}) exceeds "
                f"{self.ENV_VARS['max_top_k']} ({self.max_top_k})"
            )

    def summary(self) -> dict:
        """Return a safe, non-sensitive summary for logging."""
        return {
            "openai_base_url": self.openai_base_url,
            "openai_embed_model": self.openai_embed_model,
            "vector_backend": self.vector_backend,
            "vector_collection": self.vector_collection,
            "chroma_mode": self.chroma_mode,
            "chroma_endpoint": self.chroma_endpoint,
            "chroma_tenant": self.chroma_tenant,
            "chroma_database": self.chroma_database,
            "id_length": self.id_length,
            "default_top_k": self.default_top_k,
            "max_top_k": self.max_top_k,
        }
