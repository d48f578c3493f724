"""Named entity recognition over sentence-split, tokenized text."""

import logging
from collections.abc import Collection

from spacy.language import Language
from spacy.tokens import Doc

from ..config import SENTENCE_MODEL_KEY
from ..errors import SentenceModelUnavailable
from ..models.registry import ModelRegistry
from .memory import check_length, transient
from .tokenizer import simple_tokenize

logger = logging.getLogger(__name__)


def split_sentences(model: Language, text: str) -> list[str]:
    """Split text into sentences using a sentence-boundary model.

    Args:
        model: Pipeline that sets sentence boundaries
        text: Raw text

    Returns:
        Non-empty, stripped sentences in order

    Raises:
        SentenceModelUnavailable: If the model does not set sentence boundaries
        TextTooLong: If the text exceeds the model's max_length
    """
    if not text or not text.strip():
        return []

    check_length(model, text, SENTENCE_MODEL_KEY)
    with transient(model):
        doc = model(text)
        try:
            sentences = [sent.text.strip() for sent in doc.sents]
        except ValueError as e:
            raise SentenceModelUnavailable(
                f"Sentence model does not set sentence boundaries: {e}"
            ) from e

    return [sentence for sentence in sentences if sentence]


class Recognizer:
    """Single-use entity recognizer bound to one recognition model.

    Holds per-call state, so it must not be shared between concurrent
    callers. Build one per extraction and discard it afterwards.
    """

    def __init__(self, model: Language, labels: Collection[str] | None = None):
        self._model = model
        self._labels = frozenset(labels) if labels else None
        self._found: set[str] = set()

    def find(self, tokens: list[str]) -> list[tuple[int, int]]:
        """Find entity spans in a token sequence.

        Returns:
            Non-overlapping (start, end) token index pairs, end exclusive
        """
        if not tokens:
            return []

        with transient(self._model):
            doc = self._model(Doc(self._model.vocab, words=tokens))
            return [
                (ent.start, ent.end)
                for ent in doc.ents
                if self._labels is None or ent.label_ in self._labels
            ]

    def add_sentence(self, tokens: list[str]) -> None:
        for start, end in self.find(tokens):
            # Surface form is the covered tokens joined by single spaces
            self._found.add(" ".join(tokens[start:end]))

    @property
    def found(self) -> set[str]:
        return set(self._found)


class RecognitionPipeline:
    """Sentence split -> tokenize -> recognize, per category."""

    def __init__(self, registry: ModelRegistry):
        self.registry = registry

    def extract(self, text: str, category: str) -> set[str]:
        """Extract distinct entity strings of one category from text.

        Args:
            text: Raw text
            category: Recognition category name

        Returns:
            Set of distinct entity strings (empty for empty text)

        Raises:
            UnknownCategory: If no model is loaded for the category
            SentenceModelUnavailable: If the sentence model did not load
            TextTooLong: If the text exceeds a model's max_length
        """
        models = self.registry.snapshot()
        model = models.recognition_model(category)

        if models.sentences is None:
            raise SentenceModelUnavailable(
                "Sentence model is not loaded, cannot run entity recognition"
            )
        check_length(model, text, category)

        recognizer = Recognizer(model, models.labels.get(category))
        for sentence in split_sentences(models.sentences, text):
            recognizer.add_sentence(simple_tokenize(sentence))

        found = recognizer.found
        logger.debug("Found %d [%s] entities", len(found), category)
        return found
