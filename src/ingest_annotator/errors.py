"""Error types raised by the annotation engine."""

from collections.abc import Iterable
from pathlib import Path


class AnnotatorError(Exception):
    """Base class for all annotation engine errors."""


class ConfigurationError(AnnotatorError):
    """Invalid engine or processor configuration."""


class ModelLoadFailure(AnnotatorError):
    """A single model could not be loaded.

    Recorded in a LoadReport rather than raised; the model is simply
    absent from the registry afterwards.
    """

    def __init__(self, name: str, path: Path, cause: BaseException):
        self.name = name
        self.path = path
        self.cause = cause
        super().__init__(f"Could not load model [{name}] with path [{path}]: {cause}")


class UnknownCategory(AnnotatorError):
    """Extraction was requested for a category with no loaded model."""

    def __init__(self, category: str, available: Iterable[str]):
        self.category = category
        self.available = sorted(available)
        super().__init__(
            f"Could not find field [{category}], possible values {self.available}"
        )


class SentimentDisabled(AnnotatorError):
    """Sentiment was requested but no sentiment model is loaded."""

    def __init__(self, message: str = "Sentiment model not enabled."):
        super().__init__(message)


class SentenceModelUnavailable(AnnotatorError):
    """The sentence-boundary model is missing or sets no sentence boundaries."""


class MalformedNestedField(AnnotatorError):
    """A nested source field does not resolve to a list of records."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Nested field [{field}] {reason}")


class DocumentFieldError(AnnotatorError):
    """A document path is absent, of the wrong type, or cannot be written."""


class TextTooLong(AnnotatorError):
    """Text exceeds the maximum length a model accepts."""

    def __init__(self, model: str, length: int, max_length: int):
        self.model = model
        self.length = length
        self.max_length = max_length
        super().__init__(
            f"Text of length [{length}] exceeds the maximum [{max_length}] of model [{model}]"
        )
