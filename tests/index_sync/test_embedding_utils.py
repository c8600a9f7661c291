"""Tests for content embedding helpers."""

import pytest

pytest.importorskip("chromadb")
pytest.importorskip("sentence_transformers")

from search_indexer.index_sync.embedding_utils import (  # noqa: E402
    SentenceTransformerEmbeddingFunction, TokenTrimmer)


class WordEncoding:
    """Tokenizer double: one token per whitespace-separated word."""

    def encode(self, text):
        return text.split()

    def decode(self, tokens):
        return " ".join(tokens)


class Vectors(list):
    """Stands in for the numpy array returned by SentenceTransformer.encode."""

    def tolist(self):
        return list(self)


class RecordingModel:
    """SentenceTransformer double returning fixed vectors."""

    def __init__(self):
        self.calls = []

    def encode(self, texts, normalize_embeddings=False):
        self.calls.append((list(texts), normalize_embeddings))
        return Vectors([1.0, 0.0] for _ in texts)


class TestTokenTrimmer:
    """Test trimming text to a token budget."""

    def test_short_text_unchanged(self):
        trimmer = TokenTrimmer(5, encoding=WordEncoding())
        assert trimmer.trim("one two three") == "one two three"

    def test_long_text_trimmed_with_ellipsis(self):
        trimmer = TokenTrimmer(3, encoding=WordEncoding())
        assert trimmer.trim("a b c d e") == "a b..."

    def test_zero_budget(self):
        assert TokenTrimmer(0, encoding=WordEncoding()).trim("anything") == ""

    def test_character_estimate_when_encoding_unavailable(self, monkeypatch):
        """Test the fallback when tiktoken cannot load its encoding."""

        def fail(name):
            raise OSError("offline")

        monkeypatch.setattr("search_indexer.index_sync.embedding_utils.tiktoken.get_encoding", fail)
        trimmer = TokenTrimmer(2)

        assert trimmer.trim("short") == "short"
        assert trimmer.trim("x" * 20) == "xxxxx..."


class TestSentenceTransformerEmbeddingFunction:
    """Test the ChromaDB embedding function wrapper."""

    def test_trims_and_normalizes(self):
        model = RecordingModel()
        embed = SentenceTransformerEmbeddingFunction(
            model, max_tokens=2, trimmer=TokenTrimmer(2, encoding=WordEncoding())
        )

        vectors = embed(["a b c", "d"])

        assert vectors == [[1.0, 0.0], [1.0, 0.0]]
        assert model.calls == [(["a...", "d"], True)]

    def test_empty_input(self):
        model = RecordingModel()
        assert SentenceTransformerEmbeddingFunction(model)([]) == []
        assert model.calls == []

    def test_config(self):
        embed = SentenceTransformerEmbeddingFunction(RecordingModel(), max_tokens=128, model_name="m")
        assert embed.get_config() == {"model_name": "m", "max_tokens": 128}
