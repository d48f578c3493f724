"""Annotation engine: model registry plus recognition and sentiment pipelines."""

import logging

from .config import EngineSettings
from .models.registry import LoadReport, ModelLoader, ModelRegistry
from .nlp.recognition import RecognitionPipeline
from .nlp.sentiment import SentimentPipeline

logger = logging.getLogger(__name__)


class AnnotationEngine:
    """Shared, read-only entry point used by every annotation processor.

    Safe to call from many threads: models are never mutated after startup
    and every call builds its own recognizer or classifier.
    """

    def __init__(self, registry: ModelRegistry, load_report: LoadReport | None = None):
        self.registry = registry
        self.load_report = load_report or LoadReport()
        self.recognition = RecognitionPipeline(registry)
        self.sentiment = SentimentPipeline(registry)

    @classmethod
    def start(
        cls,
        settings: EngineSettings,
        loader: ModelLoader | None = None,
    ) -> "AnnotationEngine":
        """Load all configured models and return a ready engine.

        Individual model failures are logged and recorded in
        ``load_report``; the engine still starts with whatever loaded.

        Args:
            settings: Model files and models directory
            loader: Optional model loader (defaults to spacy.load)

        Returns:
            AnnotationEngine instance
        """
        registry = ModelRegistry(loader=loader)
        report = registry.load(
            {name: settings.resolve(file) for name, file in settings.model_files.items()},
            settings.resolve(settings.sentence_file) if settings.sentence_file else None,
            settings.resolve(settings.sentiment_file) if settings.sentiment_configured else None,
            labels=settings.model_labels,
        )

        if report.failures:
            logger.warning(
                "Started with %d of %d models, failed: %s",
                len(report.loaded),
                len(report.loaded) + len(report.failures),
                [f.name for f in report.failures],
            )
        return cls(registry, report)

    def categories(self) -> frozenset[str]:
        return self.registry.categories()

    def sentiment_enabled(self) -> bool:
        return self.registry.sentiment_enabled()

    def find(self, text: str, category: str) -> set[str]:
        """Extract distinct entities of one category from text."""
        return self.recognition.extract(text, category)

    def classify(self, text: str) -> str:
        """Classify text into a coarse sentiment label."""
        return self.sentiment.classify(text)
