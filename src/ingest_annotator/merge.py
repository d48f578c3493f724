"""Duplicate-free merging of annotation results."""

from collections.abc import Iterable, Mapping, Set
from typing import Any

from .errors import DocumentFieldError

AnnotationResult = dict[str, set[str]]


def merge_entities(
    existing: Mapping[str, Iterable[str]],
    fresh: Mapping[str, Iterable[str]],
) -> AnnotationResult:
    """Union a fresh annotation result into an existing one.

    Neither input is modified. Empty fresh sets contribute nothing, so an
    existing category is never replaced by emptiness.

    Args:
        existing: Annotations already attached to the document
        fresh: Newly extracted annotations

    Returns:
        New mapping of category to the union of both entity sets
    """
    combined = {category: set(values) for category, values in existing.items()}
    for category, values in fresh.items():
        values = set(values)
        if not values:
            continue
        combined[category] = combined.get(category, set()) | values
    return combined


def coerce_annotations(value: Any) -> AnnotationResult:
    """Read a stored target field value back as an annotation result.

    Accepts category -> list/tuple/set of strings (as stored after a JSON
    round trip) or category -> single string.

    Raises:
        DocumentFieldError: If the value is not a mapping of category to
            string lists
    """
    if not isinstance(value, Mapping):
        raise DocumentFieldError(
            f"existing annotations of type [{type(value).__name__}] are not an object"
        )

    result = {}
    for category, values in value.items():
        if isinstance(values, str):
            result[category] = {values}
        elif isinstance(values, (list, tuple, Set)):
            invalid = [item for item in values if not isinstance(item, str)]
            if invalid:
                raise DocumentFieldError(
                    f"existing annotations for [{category}] contain a value of type "
                    f"[{type(invalid[0]).__name__}], expected strings"
                )
            result[category] = set(values)
        elif values is None:
            result[category] = set()
        else:
            raise DocumentFieldError(
                f"existing annotations for [{category}] of type "
                f"[{type(values).__name__}] are not a list"
            )
    return result
