"""Shared fixtures: small spaCy pipelines saved to disk, no model downloads needed."""

from pathlib import Path

import pytest
import spacy
from spacy.language import Language

from ingest_annotator.config import EngineSettings
from ingest_annotator.engine import AnnotationEngine

SAMPLE_TEXT = (
    "Kobe Bryant was one of the best basketball players of all times. "
    "Not even Michael Jordan has ever scored 81 points in one game. "
    "Munich is really an awesome city, but New York is as well. "
    "Yesterday has been the hottest day of the year."
)

ENTITY_PATTERNS = {
    "names": ("PERSON", ["Kobe Bryant", "Michael Jordan", "Magic Johnson"]),
    "dates": ("DATE", ["Yesterday", "Today"]),
    "locations": ("GPE", ["Munich", "New York", "Paris"]),
}

# keyword -> raw label scored by the test sentiment component
SENTIMENT_KEYWORDS = {
    "furious": "angry",
    "gloomy": "sad",
    "adore": "love",
    "enjoy": "like",
    "whatever": "meh",
}


@Language.component("keyword_sentiment")
def keyword_sentiment(doc):
    """Score doc.cats from keywords; 'neutral' wins when nothing matches."""
    text = doc.text.lower()
    scores = {"neutral": 0.5}
    for keyword, label in SENTIMENT_KEYWORDS.items():
        if keyword in text:
            scores[label] = scores.get(label, 0.0) + 1.0
    doc.cats = scores
    return doc


def _save_ruler_model(path: Path, patterns: list[dict]) -> None:
    nlp = spacy.blank("en")
    ruler = nlp.add_pipe("entity_ruler")
    ruler.add_patterns(patterns)
    nlp.to_disk(path)


@pytest.fixture(scope="session")
def models_dir(tmp_path_factory) -> Path:
    """Directory holding every test model, one spaCy pipeline per subdirectory."""
    root = tmp_path_factory.mktemp("models")

    for category, (label, phrases) in ENTITY_PATTERNS.items():
        _save_ruler_model(
            root / category, [{"label": label, "pattern": phrase} for phrase in phrases]
        )

    # Person and place patterns in one model, used with label filters
    _save_ruler_model(
        root / "mixed",
        [{"label": "PERSON", "pattern": "Kobe Bryant"}, {"label": "GPE", "pattern": "Munich"}],
    )

    # Token pattern with punctuation between the tokens
    _save_ruler_model(
        root / "hyphenated",
        [
            {
                "label": "GPE",
                "pattern": [
                    {"ORTH": "Rio"},
                    {"ORTH": "-"},
                    {"ORTH": "de"},
                    {"ORTH": "-"},
                    {"ORTH": "Janeiro"},
                ],
            }
        ],
    )

    sentences = spacy.blank("en")
    sentences.add_pipe("sentencizer")
    sentences.to_disk(root / "sentences")

    # Sets no sentence boundaries at all
    spacy.blank("en").to_disk(root / "no-boundaries")

    sentiment = spacy.blank("en")
    sentiment.add_pipe("keyword_sentiment")
    sentiment.to_disk(root / "sentiment")

    return root


@pytest.fixture(scope="session")
def settings(models_dir) -> EngineSettings:
    return EngineSettings(
        models_dir=models_dir,
        model_files={"names": "names", "dates": "dates", "locations": "locations"},
        sentence_file="sentences",
    )


@pytest.fixture(scope="session")
def engine(settings) -> AnnotationEngine:
    """Engine with names, dates and locations; sentiment disabled."""
    return AnnotationEngine.start(settings)


@pytest.fixture(scope="session")
def sentiment_engine(models_dir) -> AnnotationEngine:
    """Engine with names and sentiment enabled."""
    return AnnotationEngine.start(
        EngineSettings(
            models_dir=models_dir,
            model_files={"names": "names"},
            sentence_file="sentences",
            sentiment_file="sentiment",
        )
    )


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_TEXT
