"""Tests for sentiment classification."""

from contextlib import nullcontext
from types import SimpleNamespace

import pytest
import spacy

from ingest_annotator.config import EngineSettings
from ingest_annotator.engine import AnnotationEngine
from ingest_annotator.errors import SentimentDisabled, TextTooLong
from ingest_annotator.nlp.sentiment import SentimentClassifier, to_simple_sentiment


class FakeSentimentModel:
    """Scores every text with fixed categories."""

    max_length = 100

    def __init__(self, cats):
        self.cats = cats

    def __call__(self, text):
        return SimpleNamespace(cats=self.cats)

    def memory_zone(self):
        return nullcontext()


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("angry", "Very negative"),
        ("sad", "Negative"),
        ("neutral", "Neutral"),
        ("like", "Positive"),
        ("love", "Very positive"),
        ("LOVE", "Very positive"),
        ("Sad", "Negative"),
        ("meh", ""),
        ("", ""),
    ],
)
def test_to_simple_sentiment(raw, expected):
    assert to_simple_sentiment(raw) == expected


class TestSentimentClassifier:
    """Test suite for the single-use classifier."""

    def test_picks_highest_scoring_label(self):
        """Should return the label with the highest score."""
        model = FakeSentimentModel({"sad": 0.2, "love": 0.7, "like": 0.1})

        assert SentimentClassifier(model).predict("anything") == "love"

    def test_no_categories(self):
        """Should return an empty raw label when the model scores nothing."""
        model = FakeSentimentModel({})

        assert SentimentClassifier(model).predict("anything") == ""


class TestClassify:
    """Test suite for SentimentPipeline.classify via the engine."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("I was furious about the referee.", "Very negative"),
            ("A gloomy day in the city.", "Negative"),
            ("The game started at noon.", "Neutral"),
            ("I enjoy watching basketball.", "Positive"),
            ("I adore this team.", "Very positive"),
        ],
    )
    def test_maps_model_labels(self, sentiment_engine, text, expected):
        """Should map the model's raw label to a coarse sentiment."""
        assert sentiment_engine.classify(text) == expected

    def test_unknown_raw_label_is_empty(self, sentiment_engine):
        """Should degrade to an empty label instead of failing."""
        assert sentiment_engine.classify("whatever") == ""

    def test_disabled(self, engine):
        """Should raise SentimentDisabled when no sentiment model is loaded."""
        assert not engine.sentiment_enabled()
        with pytest.raises(SentimentDisabled):
            engine.classify("I adore this team.")

    def test_text_longer_than_model_limit(self, models_dir):
        """Should raise TextTooLong instead of passing oversized text to the model."""

        def short_loader(path):
            model = spacy.load(path)
            model.max_length = 40
            return model

        engine = AnnotationEngine.start(
            EngineSettings(
                models_dir=models_dir,
                sentence_file="sentences",
                sentiment_file="sentiment",
            ),
            loader=short_loader,
        )

        assert engine.classify("I adore this team.") == "Very positive"
        with pytest.raises(TextTooLong, match="\\[sentiment\\]"):
            engine.classify("I adore this team. " * 5)

    def test_does_not_grow_string_store(self, sentiment_engine):
        """Should leave the shared model's strings unchanged across calls."""
        model = sentiment_engine.registry.snapshot().sentiment
        sentiment_engine.classify("warm up call")
        size = len(model.vocab.strings)

        for i in range(50):
            sentiment_engine.classify(f"unseenword{i} makes me gloomy")

        assert len(model.vocab.strings) == size
