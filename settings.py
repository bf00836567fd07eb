# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-01-09
# Updated: 2026-02-14
# Description: settings.py
# -----------------------------------------------------------------------------
import os


def _env(name: str, default: str = "") -> str:
    """Read env var safely and strip whitespace."""
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return int(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be an int, got {v!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    v = _env(name, "")
    if v == "":
        return default
    v = v.lower()
    if v in ("1", "true", "t", "yes", "y", "on"):
        return True
    if v in ("0", "false", "f", "no", "n", "off"):
        return False
    raise RuntimeError(f"Env var {name} must be a boolean, got {v!r}")


# -----------------------------------------------------------------------------
# Embedding provider
# -----------------------------------------------------------------------------
OPENAI_BASE_URL_DEFAULT = "https://api.openai.com/v1"
EMBED_MODEL_DEFAULT = "text-embedding-3-small"


# -----------------------------------------------------------------------------
# Vector storage
# -----------------------------------------------------------------------------
VECTOR_BACKENDS = ("memory", "chroma")
VECTOR_BACKEND_DEFAULT = "chroma"

CHROMA_MODES = ("cloud", "persistent", "http")
CHROMA_MODE_DEFAULT = "persistent"
CHROMA_PERSIST_DIR_DEFAULT = "./chroma_store"
VECTOR_COLLECTION_DEFAULT = "embeddings"


# -----------------------------------------------------------------------------
# Ids and search defaults
# -----------------------------------------------------------------------------
ID_LENGTH_DEFAULT = 16
DEFAULT_TOP_K = 5

# Upper bound mirrors the managed store's own cap when metadata is returned
MAX_TOP_K_DEFAULT = 100
