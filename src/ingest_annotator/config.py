"""Configuration management for ingest-annotator."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigurationError

# Load environment variables from .env file if it exists
dotenv_path = Path.cwd() / ".env"
if dotenv_path.exists():
    load_dotenv(dotenv_path)
else:
    load_dotenv()

DEFAULT_PREFIX = "INGEST_ANNOTATOR"
DEFAULT_MODELS_DIR = Path("config") / "ingest-annotator"

SENTENCE_MODEL_KEY = "sentences"
SENTIMENT_MODEL_KEY = "sentiment"


@dataclass
class EngineSettings:
    """Model files and directory the annotation engine loads at startup.

    Mirrors the grouped settings of an ingest node:
    ``<PREFIX>_MODEL_FILE_<CATEGORY>`` per recognition category,
    ``<PREFIX>_TOKENIZER_FILE_SENTENCES`` for sentence detection and
    ``<PREFIX>_MISC_FILE_SENTIMENT`` for the optional sentiment model.
    """

    models_dir: Path = DEFAULT_MODELS_DIR
    model_files: dict[str, str] = field(default_factory=dict)
    model_labels: dict[str, frozenset[str]] = field(default_factory=dict)
    sentence_file: str | None = None
    sentiment_file: str | None = None  # None disables sentiment

    @property
    def sentiment_configured(self) -> bool:
        return self.sentiment_file is not None

    def resolve(self, file_name: str) -> Path:
        """Resolve a model file name against the models directory."""
        return self.models_dir / file_name

    @classmethod
    def from_env(
        cls,
        prefix: str = DEFAULT_PREFIX,
        environ: Mapping[str, str] | None = None,
    ) -> "EngineSettings":
        """Load settings from environment variables.

        Args:
            prefix: Environment variable prefix
            environ: Mapping to read instead of ``os.environ`` (for tests)

        Returns:
            EngineSettings instance

        Raises:
            ConfigurationError: If a configured value is empty or a label
                filter names a category without a model file
        """
        env = os.environ if environ is None else environ

        model_files = _group(env, f"{prefix}_MODEL_FILE_")
        raw_labels = _group(env, f"{prefix}_MODEL_LABELS_")
        tokenizer_files = _group(env, f"{prefix}_TOKENIZER_FILE_")
        misc_files = _group(env, f"{prefix}_MISC_FILE_")

        model_labels = {}
        for category, value in raw_labels.items():
            if category not in model_files:
                raise ConfigurationError(
                    f"Label filter configured for unknown model [{category}], "
                    f"configured models {sorted(model_files)}"
                )
            model_labels[category] = frozenset(
                label.strip() for label in value.split(",") if label.strip()
            )

        models_dir = env.get(f"{prefix}_MODELS_DIR")
        return cls(
            models_dir=Path(models_dir) if models_dir else DEFAULT_MODELS_DIR,
            model_files=model_files,
            model_labels=model_labels,
            sentence_file=tokenizer_files.get(SENTENCE_MODEL_KEY),
            sentiment_file=misc_files.get(SENTIMENT_MODEL_KEY),
        )


def _group(env: Mapping[str, str], group_prefix: str) -> dict[str, str]:
    """Collect all variables under a prefix, keyed by lower-cased suffix."""
    group = {}
    for key, value in env.items():
        if not key.startswith(group_prefix) or key == group_prefix:
            continue
        name = key[len(group_prefix) :].lower()
        if not value.strip():
            raise ConfigurationError(f"Setting [{key}] must not be empty")
        group[name] = value.strip()
    return group
