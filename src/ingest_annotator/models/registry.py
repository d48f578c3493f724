"""Registry of loaded statistical models.

Models are loaded once at startup and shared read-only afterwards. Each
model is loaded independently: a failure is logged and recorded in the
LoadReport, and the remaining models still load.
"""

import logging
import time
from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

import spacy
from spacy.language import Language

from ..config import SENTENCE_MODEL_KEY, SENTIMENT_MODEL_KEY
from ..errors import ModelLoadFailure, UnknownCategory

logger = logging.getLogger(__name__)

ModelLoader = Callable[[Path], Language]


@dataclass(frozen=True)
class ModelSet:
    """Immutable snapshot of every model the registry holds."""

    recognition: Mapping[str, Language] = field(default_factory=lambda: MappingProxyType({}))
    labels: Mapping[str, frozenset[str]] = field(default_factory=lambda: MappingProxyType({}))
    sentences: Language | None = None
    sentiment: Language | None = None

    def recognition_model(self, category: str) -> Language:
        try:
            return self.recognition[category]
        except KeyError:
            raise UnknownCategory(category, self.recognition.keys()) from None


@dataclass
class LoadReport:
    """Outcome of loading a batch of models."""

    loaded: list[str] = field(default_factory=list)
    failures: list[ModelLoadFailure] = field(default_factory=list)
    timings: dict[str, float] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def total_time(self) -> float:
        return sum(self.timings.values())

    def failure_for(self, name: str) -> ModelLoadFailure | None:
        for failure in self.failures:
            if failure.name == name:
                return failure
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "loaded": list(self.loaded),
            "failures": [
                {"name": f.name, "path": str(f.path), "error": str(f.cause)}
                for f in self.failures
            ],
            "timings": dict(self.timings),
        }


class ModelRegistry:
    """Owns recognition models by category, the sentence model and the sentiment model.

    Readers should take one ``snapshot()`` per call; ``load`` replaces the
    snapshot in a single assignment so concurrent readers never observe a
    half-loaded model set.
    """

    def __init__(self, loader: ModelLoader | None = None):
        """Initialize an empty registry.

        Args:
            loader: Callable building a model from a path (defaults to spacy.load)
        """
        self._loader = loader or spacy.load
        self._models = ModelSet()

    def load(
        self,
        category_paths: Mapping[str, Path],
        sentence_path: Path | None,
        sentiment_path: Path | None = None,
        labels: Mapping[str, Collection[str]] | None = None,
    ) -> LoadReport:
        """Load every configured model, tolerating individual failures.

        Args:
            category_paths: Recognition category name to model path
            sentence_path: Sentence-boundary model path
            sentiment_path: Sentiment model path, None when sentiment is not configured
            labels: Optional entity-label filter per category

        Returns:
            LoadReport listing loaded models, failures and per-model load time
        """
        report = LoadReport()
        recognition = {}

        for name, path in category_paths.items():
            model = self._load_one(name, path, report)
            if model is not None:
                recognition[name] = model

        if not category_paths:
            logger.error("Did not load any recognition models, none configured")
        else:
            logger.info(
                "Read models in [%.3fs] for %s", report.total_time, sorted(category_paths)
            )

        sentences = None
        if sentence_path is None:
            logger.error("No sentence model configured, entity recognition is unavailable")
        else:
            sentences = self._load_one(SENTENCE_MODEL_KEY, sentence_path, report)

        sentiment = None
        if sentiment_path is not None:
            sentiment = self._load_one(SENTIMENT_MODEL_KEY, sentiment_path, report)

        label_filters = {
            name: frozenset(values)
            for name, values in (labels or {}).items()
            if name in recognition and values
        }

        self._models = ModelSet(
            recognition=MappingProxyType(recognition),
            labels=MappingProxyType(label_filters),
            sentences=sentences,
            sentiment=sentiment,
        )
        return report

    def _load_one(self, name: str, path: Path, report: LoadReport) -> Language | None:
        start = time.perf_counter()
        try:
            model = self._loader(path)
        except Exception as e:
            failure = ModelLoadFailure(name, path, e)
            logger.error("Could not load model [%s] with path [%s]", name, path, exc_info=e)
            report.failures.append(failure)
            return None
        finally:
            report.timings[name] = time.perf_counter() - start

        logger.debug("Loaded model [%s] from [%s]", name, path)
        report.loaded.append(name)
        return model

    def snapshot(self) -> ModelSet:
        """Current model set; stays consistent for the caller's whole call."""
        return self._models

    def categories(self) -> frozenset[str]:
        """Names of the recognition models that loaded successfully."""
        return frozenset(self._models.recognition)

    def recognition_model(self, category: str) -> Language:
        """Get the recognition model for a category.

        Raises:
            UnknownCategory: If no model is loaded for the category
        """
        return self._models.recognition_model(category)

    def has_sentence_model(self) -> bool:
        return self._models.sentences is not None

    def sentiment_enabled(self) -> bool:
        """True iff a sentiment model was successfully loaded."""
        return self._models.sentiment is not None
