"""Dict-backed document with dotted-path field access."""

from collections.abc import MutableMapping
from typing import Any

from .errors import DocumentFieldError

PATH_SEPARATOR = "."

_MISSING = object()


class Document:
    """A JSON-like document whose fields are addressed by dotted paths.

    ``"a.b"`` reads key ``b`` of the mapping under ``a``; integer segments
    index into lists (``"comments.0.text"``).
    """

    def __init__(self, source: dict[str, Any] | None = None):
        self.source = source if source is not None else {}

    def __repr__(self) -> str:
        return f"Document({self.source!r})"

    def _resolve(self, path: str) -> Any:
        current: Any = self.source
        for segment in _segments(path):
            if isinstance(current, MutableMapping):
                current = current.get(segment, _MISSING)
            elif isinstance(current, list):
                try:
                    current = current[int(segment)]
                except (ValueError, IndexError):
                    return _MISSING
            else:
                return _MISSING
            if current is _MISSING:
                return _MISSING
        return current

    def has_field(self, path: str) -> bool:
        return self._resolve(path) is not _MISSING

    def get_field(self, path: str, expected_type: type | tuple[type, ...] | None = None) -> Any:
        """Read a field value.

        Args:
            path: Dotted field path
            expected_type: Optional type the value must have

        Returns:
            The stored value

        Raises:
            DocumentFieldError: If the field is absent or has the wrong type
        """
        value = self._resolve(path)
        if value is _MISSING:
            raise DocumentFieldError(f"field [{path}] not present")
        if expected_type is not None and not isinstance(value, expected_type):
            raise DocumentFieldError(
                f"field [{path}] of type [{type(value).__name__}] cannot be read "
                f"as [{_type_name(expected_type)}]"
            )
        return value

    def set_field(self, path: str, value: Any) -> None:
        """Write a field value, creating intermediate objects as needed.

        Raises:
            DocumentFieldError: If a path segment traverses a non-container
        """
        *parents, leaf = _segments(path)
        current: Any = self.source
        for segment in parents:
            if isinstance(current, MutableMapping):
                current = current.setdefault(segment, {})
            elif isinstance(current, list):
                current = _list_item(current, segment, path)
            else:
                raise DocumentFieldError(
                    f"cannot set [{path}], [{segment}] is not inside an object or list"
                )

        if isinstance(current, MutableMapping):
            current[leaf] = value
        elif isinstance(current, list):
            index = _list_index(current, leaf, path)
            current[index] = value
        else:
            raise DocumentFieldError(
                f"cannot set [{leaf}] with parent object of type "
                f"[{type(current).__name__}] as part of path [{path}]"
            )

    def to_dict(self) -> dict[str, Any]:
        return self.source


def _segments(path: str) -> list[str]:
    if not path or any(not segment for segment in path.split(PATH_SEPARATOR)):
        raise DocumentFieldError(f"path [{path}] is not valid")
    return path.split(PATH_SEPARATOR)


def _list_index(items: list, segment: str, path: str) -> int:
    try:
        index = int(segment)
    except ValueError:
        raise DocumentFieldError(
            f"[{segment}] is not an integer, cannot be used as an index as part of path [{path}]"
        ) from None
    if not -len(items) <= index < len(items):
        raise DocumentFieldError(
            f"[{index}] is out of bounds for array with length [{len(items)}] "
            f"as part of path [{path}]"
        )
    return index


def _list_item(items: list, segment: str, path: str) -> Any:
    return items[_list_index(items, segment, path)]


def _type_name(expected_type: type | tuple[type, ...]) -> str:
    if isinstance(expected_type, tuple):
        return " | ".join(t.__name__ for t in expected_type)
    return expected_type.__name__
