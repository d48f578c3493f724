"""Per-call scoping of pipeline state shared between callers."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from weakref import WeakKeyDictionary

from spacy.language import Language

from ..errors import TextTooLong

_zone_locks: "WeakKeyDictionary[Language, threading.Lock]" = WeakKeyDictionary()
_zone_locks_guard = threading.Lock()


def _zone_lock(model: Language) -> threading.Lock:
    with _zone_locks_guard:
        lock = _zone_locks.get(model)
        if lock is None:
            lock = _zone_locks[model] = threading.Lock()
        return lock


@contextmanager
def transient(model: Language) -> Iterator[None]:
    """Run pipeline calls without growing the model's string store.

    Strings and lexemes added inside the block are released when it exits,
    so Docs and Spans created inside must not be used afterwards. spaCy
    memory zones on one vocab cannot overlap, so blocks on the same model
    run one at a time.
    """
    with _zone_lock(model), model.memory_zone():
        yield


def check_length(model: Language, text: str, name: str) -> None:
    """Raise TextTooLong if the model would reject text of this length."""
    if len(text) > model.max_length:
        raise TextTooLong(name, len(text), model.max_length)
