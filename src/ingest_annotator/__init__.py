"""Entity and sentiment annotation for document ingest pipelines."""

from .document import Document
from .engine import AnnotationEngine
from .errors import (
    AnnotatorError,
    SentimentDisabled,
    UnknownCategory,
)
from .processor import AnnotationProcessor

__version__ = "0.1.0"

__all__ = [
    "AnnotationEngine",
    "AnnotationProcessor",
    "AnnotatorError",
    "Document",
    "SentimentDisabled",
    "UnknownCategory",
    "__version__",
]
