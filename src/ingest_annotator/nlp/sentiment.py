"""Coarse sentiment classification."""

from spacy.language import Language

from ..config import SENTIMENT_MODEL_KEY
from ..errors import SentimentDisabled
from ..models.registry import ModelRegistry
from .memory import check_length, transient

SIMPLE_SENTIMENTS = {
    "angry": "Very negative",
    "sad": "Negative",
    "neutral": "Neutral",
    "like": "Positive",
    "love": "Very positive",
}


def to_simple_sentiment(raw_label: str) -> str:
    """Map a raw classifier label to a coarse sentiment; unknown labels map to ""."""
    return SIMPLE_SENTIMENTS.get(raw_label.lower(), "")


class SentimentClassifier:
    """Single-use classifier around a sentiment model's text categories."""

    def __init__(self, model: Language):
        self._model = model

    def predict(self, text: str) -> str:
        """Return the highest-scoring raw label, or "" when the model scores nothing.

        Raises:
            TextTooLong: If the text exceeds the model's max_length
        """
        check_length(self._model, text, SENTIMENT_MODEL_KEY)
        with transient(self._model):
            cats = dict(self._model(text).cats)
        if not cats:
            return ""
        return max(cats, key=cats.get)


class SentimentPipeline:
    def __init__(self, registry: ModelRegistry):
        self.registry = registry

    def classify(self, text: str) -> str:
        """Classify the whole text into one of five coarse sentiment labels.

        Raises:
            SentimentDisabled: If no sentiment model is loaded
            TextTooLong: If the text exceeds the model's max_length
        """
        model = self.registry.snapshot().sentiment
        if model is None:
            raise SentimentDisabled()

        return to_simple_sentiment(SentimentClassifier(model).predict(text))
