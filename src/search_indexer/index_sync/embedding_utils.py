"""Embedding of search document content for the ChromaDB backend."""

import logging
from typing import Any, Dict, List, Optional

import tiktoken
from chromadb.utils.embedding_functions import EmbeddingFunction
from sentence_transformers import SentenceTransformer

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "sentence-transformers/all-MiniLM-L6-v2"
DEFAULT_ENCODING = "cl100k_base"
ELLIPSIS = "..."


def load_embedding_model(model_name: str = DEFAULT_MODEL_NAME, device: str = "cpu") -> SentenceTransformer:
    """Load a SentenceTransformer model on the given device ("cpu", "cuda" or "mps")."""
    logger.info(f"Loading embedding model {model_name} on {device}")
    try:
        return SentenceTransformer(model_name, device=device)
    except Exception as e:
        logger.error(f"Failed to load embedding model {model_name}: {e}")
        raise


class TokenTrimmer:
    """
    Cuts text down to a token budget before it reaches the embedding model.

    The tiktoken encoding is loaded once; if it cannot be loaded, a
    four-characters-per-token estimate is used instead.
    """

    def __init__(self, max_tokens: int, encoding_name: str = DEFAULT_ENCODING, encoding=None):
        self.max_tokens = max_tokens
        self.encoding_name = encoding_name
        self._encoding = encoding
        self._encoding_failed = False

    @property
    def encoding(self):
        if self._encoding is None and not self._encoding_failed:
            try:
                self._encoding = tiktoken.get_encoding(self.encoding_name)
            except Exception as e:
                logger.warning(f"tiktoken encoding {self.encoding_name} unavailable ({e}), estimating by characters")
                self._encoding_failed = True
        return self._encoding

    def trim(self, text: str) -> str:
        if self.max_tokens <= 0:
            return ""

        encoding = self.encoding
        if encoding is None:
            budget = self.max_tokens * 4
            return text if len(text) <= budget else text[: budget - len(ELLIPSIS)] + ELLIPSIS

        tokens = encoding.encode(text)
        if len(tokens) <= self.max_tokens:
            return text

        # One token is left for the ellipsis
        return encoding.decode(tokens[: self.max_tokens - 1]) + ELLIPSIS


class SentenceTransformerEmbeddingFunction(EmbeddingFunction):
    """ChromaDB embedding function backed by a SentenceTransformer model."""

    def __init__(
        self,
        model: SentenceTransformer,
        max_tokens: Optional[int] = None,
        model_name: str = None,
        trimmer: TokenTrimmer = None,
    ):
        """
        Args:
            model: Loaded SentenceTransformer model
            max_tokens: Token budget per document, None for no trimming
            model_name: Name the model was loaded with, stored in the collection config
            trimmer: Trimmer to use instead of one built from max_tokens
        """
        self.model = model
        self.max_tokens = max_tokens
        self.model_name = model_name or DEFAULT_MODEL_NAME
        self.trimmer = trimmer or (TokenTrimmer(max_tokens) if max_tokens else None)

    @staticmethod
    def name() -> str:
        return "search_indexer_sentence_transformer"

    def get_config(self) -> Dict[str, Any]:
        return {"model_name": self.model_name, "max_tokens": self.max_tokens}

    @classmethod
    def build_from_config(cls, config: Dict[str, Any]) -> "SentenceTransformerEmbeddingFunction":
        model_name = config.get("model_name", DEFAULT_MODEL_NAME)
        return cls(load_embedding_model(model_name), max_tokens=config.get("max_tokens"), model_name=model_name)

    def __call__(self, input: List[str]) -> List[List[float]]:
        if not input:
            return []

        texts = [self.trimmer.trim(text) for text in input] if self.trimmer else list(input)
        # Unit vectors for the cosine-space collection
        embeddings = self.model.encode(texts, normalize_embeddings=True)
        return embeddings.tolist()
