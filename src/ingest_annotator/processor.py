"""Annotation processor: extracts entities from document fields and merges them in."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .document import PATH_SEPARATOR, Document
from .engine import AnnotationEngine
from .errors import ConfigurationError, MalformedNestedField
from .merge import AnnotationResult, coerce_annotations, merge_entities

logger = logging.getLogger(__name__)

TYPE = "opennlp"
DEFAULT_TARGET_FIELD = "entities"
SENTIMENT_FIELD = "opennlp.sentiment"

_CONFIG_KEYS = {"field", "target_field", "fields"}


class AnnotationProcessor:
    """Annotates one document at a time from its configured source fields.

    Source fields are read in order. A field containing a ``.`` is nested:
    the first segment names a list of records, the second the key read from
    each record. Everything else is a flat text field.
    """

    def __init__(
        self,
        engine: AnnotationEngine,
        source_fields: Iterable[str],
        target_field: str = DEFAULT_TARGET_FIELD,
        categories: Iterable[str] | None = None,
        tag: str | None = None,
    ):
        """Initialize processor.

        Args:
            engine: Started annotation engine
            source_fields: Document fields to read text from, in order
            target_field: Field the merged annotations are written to
            categories: Categories to extract (default: every loaded category)
            tag: Optional processor tag used in log and error messages
        """
        self.engine = engine
        self.source_fields = list(source_fields)
        self.target_field = target_field
        categories = list(categories or [])
        self.categories = sorted(set(categories) if categories else engine.categories())
        self.tag = tag

    @classmethod
    def from_config(
        cls,
        engine: AnnotationEngine,
        config: Mapping[str, Any],
        tag: str | None = None,
    ) -> "AnnotationProcessor":
        """Build a processor from a pipeline processor definition.

        Args:
            engine: Started annotation engine
            config: Mapping with ``field`` (required), ``target_field`` and ``fields``
            tag: Optional processor tag

        Returns:
            AnnotationProcessor instance

        Raises:
            ConfigurationError: If the definition is missing ``field``, has
                values of the wrong type or has unsupported keys
        """
        logger.debug("processorTag: %s, config: %s", tag, dict(config))

        unknown = set(config) - _CONFIG_KEYS
        if unknown:
            raise _config_error(
                tag, None, f"unsupported configuration parameters {sorted(unknown)}"
            )

        if "field" not in config:
            raise _config_error(tag, "field", "required property is missing")
        source_fields = _read_list(config, "field", tag)
        if not source_fields:
            raise _config_error(tag, "field", "must name at least one field")

        target_field = config.get("target_field", DEFAULT_TARGET_FIELD)
        if not isinstance(target_field, str) or not target_field:
            raise _config_error(tag, "target_field", "property isn't a non-empty string")

        categories = _read_list(config, "fields", tag) if config.get("fields") else None
        return cls(engine, source_fields, target_field, categories, tag)

    def execute(self, document: Document) -> Document:
        """Annotate a document in place.

        The target field and the sentiment mapping are only written after
        every extraction succeeded, so a failing call leaves the document
        unmodified.

        Raises:
            UnknownCategory: If a configured category has no loaded model
            SentimentDisabled: If the sentiment model disappeared mid-call
            DocumentFieldError: If the existing target value is not an object
        """
        entities: AnnotationResult = {}
        if document.has_field(self.target_field):
            entities = coerce_annotations(document.get_field(self.target_field))

        sentiment_enabled = self.engine.sentiment_enabled()
        sentiments: dict[str, str] = {}

        for source_field in self.source_fields:
            texts = self._texts_for(document, source_field)
            for text in texts:
                for category in self.categories:
                    found = self.engine.find(text, category)
                    entities = merge_entities(entities, {category: found})

            if sentiment_enabled and texts:
                sentiments[source_field] = self.engine.classify("\n".join(texts))

        document.set_field(self.target_field, entities)
        if sentiment_enabled:
            document.set_field(SENTIMENT_FIELD, sentiments)
        return document

    def _texts_for(self, document: Document, source_field: str) -> list[str]:
        if PATH_SEPARATOR in source_field:
            try:
                return nested_texts(document, source_field)
            except MalformedNestedField as e:
                logger.warning("[%s] Skipping source field: %s", self.tag or TYPE, e)
                return []

        if not document.has_field(source_field):
            return []
        content = document.get_field(source_field)
        if isinstance(content, str) and content:
            return [content]
        return []


def nested_texts(document: Document, source_field: str) -> list[str]:
    """Collect sub-field text from every record of a list field.

    ``"comments.text"`` reads ``text`` from each mapping in ``comments``.

    Raises:
        MalformedNestedField: If the path has more than one separator, the
            base field is absent or the base field is not a list
    """
    segments = source_field.split(PATH_SEPARATOR)
    if len(segments) != 2 or not all(segments):
        raise MalformedNestedField(source_field, "must have the form <list field>.<sub field>")

    base_field, value_field = segments
    if not document.has_field(base_field):
        raise MalformedNestedField(source_field, f"base field [{base_field}] not present")

    records = document.get_field(base_field)
    if not isinstance(records, list):
        raise MalformedNestedField(
            source_field, f"base field [{base_field}] is a {type(records).__name__}, not a list"
        )

    texts = []
    for record in records:
        if not isinstance(record, Mapping):
            continue
        content = record.get(value_field)
        if isinstance(content, str) and content:
            texts.append(content)
    return texts


def _read_list(config: Mapping[str, Any], key: str, tag: str | None) -> list[str]:
    value = config[key]
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise _config_error(tag, key, "property isn't a list of strings")
    if not all(value):
        raise _config_error(tag, key, "property contains an empty name")
    return list(value)


def _config_error(tag: str | None, key: str | None, message: str) -> ConfigurationError:
    where = f"[{TYPE}]" if tag is None else f"[{TYPE}] with tag [{tag}]"
    if key is not None:
        return ConfigurationError(f"processor {where}: [{key}] {message}")
    return ConfigurationError(f"processor {where}: {message}")
