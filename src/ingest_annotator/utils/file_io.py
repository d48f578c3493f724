"""Document file reading and atomic writing."""

import json
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any


def atomic_write(path: Path | str, write_func: Callable[[Path], None]) -> None:
    """Write a file through a temporary sibling that replaces the target.

    Args:
        path: Destination file path
        write_func: Function writing the full content to the path it is given
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")

    try:
        write_func(tmp_path)
        tmp_path.replace(path)
    except Exception:
        if tmp_path.exists():
            tmp_path.unlink()
        raise


def to_jsonable(value: Any) -> Any:
    """JSON encoder hook: sets become sorted lists."""
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def is_jsonl(path: Path) -> bool:
    return path.suffix.lower() in (".jsonl", ".ndjson")


def read_documents(path: Path | str) -> list[dict[str, Any]]:
    """Read documents from a JSON file (one object or a list) or a JSONL file.

    Raises:
        ValueError: If the content is not an object, a list of objects or JSONL objects
    """
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        if is_jsonl(path):
            documents = [json.loads(line) for line in f if line.strip()]
        else:
            data = json.load(f)
            documents = data if isinstance(data, list) else [data]

    for i, document in enumerate(documents):
        if not isinstance(document, dict):
            raise ValueError(f"{path}: document {i} is a {type(document).__name__}, not an object")
    return documents


def write_documents(path: Path | str, documents: Iterable[dict[str, Any]]) -> None:
    """Atomically write documents in the format implied by the file suffix."""
    path = Path(path)
    documents = list(documents)

    def write(tmp_path: Path) -> None:
        with open(tmp_path, "w", encoding="utf-8") as f:
            if is_jsonl(path):
                for document in documents:
                    f.write(json.dumps(document, default=to_jsonable, ensure_ascii=False))
                    f.write("\n")
            else:
                json.dump(documents, f, indent=2, default=to_jsonable, ensure_ascii=False)

    atomic_write(path, write)
