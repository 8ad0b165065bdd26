"""
Sentiment scoring adapter.

The scoring model is an external capability. ``SentimentScorer`` wraps any
``text -> float`` callable (sync or async) and guarantees a value in
[-1.0, 1.0] that never raises. The default backend is a pretrained Hugging
Face sequence-classification model, loaded lazily on first use.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
import math
from functools import lru_cache
from typing import Awaitable, Callable, Tuple, Union

from goodfeed.config import get_settings
from goodfeed.utils import clamp_to_sentiment_range

logger = logging.getLogger(__name__)

SentimentBackend = Callable[[str], Union[float, Awaitable[float]]]


@lru_cache(maxsize=2)
def _load_sentiment_model(model_name: str) -> Tuple:
    """
    Load a sentiment classification model.

    Returns:
        Tuple of (tokenizer, model)

    Raises:
        RuntimeError: If required dependencies are not installed
    """
    try:
        from transformers import AutoModelForSequenceClassification, AutoTokenizer
    except ImportError as e:
        raise RuntimeError(
            "Sentiment model dependencies are missing. Install transformers and torch.\n"
            "Try: pip install 'goodfeed[model]'"
        ) from e

    tokenizer = AutoTokenizer.from_pretrained(model_name)
    model = AutoModelForSequenceClassification.from_pretrained(model_name)
    model.eval()

    return tokenizer, model


def transformer_sentiment(text: str) -> float:
    """
    Score text with the configured transformer model.

    Returns:
        p(positive) - p(negative), using the model's own label names
    """
    import torch

    tokenizer, model = _load_sentiment_model(get_settings().SENTIMENT_MODEL)

    with torch.no_grad():
        encoded = tokenizer(text, truncation=True, max_length=256, return_tensors="pt")
        probabilities = torch.softmax(model(**encoded).logits, dim=-1)[0].tolist()

    labels = {int(i): str(label).lower() for i, label in model.config.id2label.items()}
    p_positive = sum(p for i, p in enumerate(probabilities) if "pos" in labels.get(i, ""))
    p_negative = sum(p for i, p in enumerate(probabilities) if "neg" in labels.get(i, ""))
    return p_positive - p_negative


def warm_up() -> None:
    """Load the default model ahead of the first request."""
    _load_sentiment_model(get_settings().SENTIMENT_MODEL)


class SentimentScorer:
    """Never-failing facade over a sentiment backend."""

    def __init__(self, backend: SentimentBackend = transformer_sentiment) -> None:
        self._backend = backend

    async def score(self, text: str) -> float:
        """
        Score text in [-1.0, 1.0].

        Blank text scores 0.0 without touching the backend. Synchronous
        backends run in a worker thread so other sources keep progressing.
        Any backend failure degrades to neutral (0.0).
        """
        if not text or not text.strip():
            return 0.0

        try:
            if inspect.iscoroutinefunction(self._backend):
                raw = await self._backend(text)
            else:
                raw = await asyncio.to_thread(self._backend, text)
                if inspect.isawaitable(raw):
                    raw = await raw
            value = float(raw)
        except Exception as e:
            logger.warning("Sentiment backend failed, scoring neutral: %s", e)
            return 0.0

        if math.isnan(value):
            return 0.0
        return clamp_to_sentiment_range(value)
