# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-14
# Updated: 2026-02-14
# Description: OpenAIEmbedder
# -----------------------------------------------------------------------------
import time
from typing import List, Optional

import httpx
from openai import APIConnectionError, APIStatusError, DefaultHttpxClient, OpenAI

from config.Config import Config
from services.EmbeddingErrors import EmbeddingProviderError, InvalidEmbeddingError
from utility.logging_utils import get_class_logger


class OpenAIEmbedder:
    """
    Turns one text into one vector via the OpenAI embeddings endpoint.

    The API key is not part of the configuration: every call carries the
    caller's own bearer token, so a client is built per call on top of a
    shared connection pool. The SDK's retries are disabled; one failed
    upstream call fails the request.
    """

    def __init__(
            self,
            cfg: Config,
            *,
            http_client: Optional[httpx.Client] = None,
            logger=None,
    ):
        self.cfg = cfg
        self.model = cfg.openai_embed_model
        self.base_url = cfg.openai_base_url.rstrip("/")
        self.http_client = http_client or DefaultHttpxClient()
        self.logger = logger or get_class_logger(self.__class__)
        self.logger.info("OpenAI Embedder initialised model='%s' base_url=%s", self.model, self.base_url)

    def _client(self, api_key: str) -> OpenAI:
        return OpenAI(
            api_key=api_key,
            base_url=self.base_url,
            max_retries=0,
            http_client=self.http_client,
        )

    def embed_text(self, text: str, api_key: str) -> List[float]:
        """
        Embed a single text.

        Raises:
            EmbeddingProviderError: provider answered non-2xx (status + raw body) or was unreachable (502).
            InvalidEmbeddingError: provider answered 2xx without a usable vector.
        """
        start = time.time()
        try:
            # "float" keeps the values exactly as the provider serialises them
            resp = self._client(api_key).embeddings.create(
                model=self.model,
                input=text,
                encoding_format="float",
            )
        except APIStatusError as e:
            self.logger.warning("Embedding call failed: status=%d", e.status_code)
            raise EmbeddingProviderError(e.status_code, e.response.text) from e
        except APIConnectionError as e:
            self.logger.error("Embedding provider unreachable at %s: %s", self.base_url, e)
            raise EmbeddingProviderError(502, str(e)) from e

        data = getattr(resp, "data", None) or []
        vector = getattr(data[0], "embedding", None) if data else None
        if not vector or not isinstance(vector, list):
            dims = len(vector) if isinstance(vector, list) else 0
            self.logger.error("Embedding response carried no usable vector (dimensions=%d)", dims)
            raise InvalidEmbeddingError(dims)

        elapsed_ms = (time.time() - start) * 1000.0
        self.logger.debug("Embedding call succeeded in %.1f ms. Returned dimension: %d", elapsed_ms, len(vector))
        return vector
