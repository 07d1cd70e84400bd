"""Runtime wiring helper for CLI and API."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.sqlite_collection import SQLiteCollection
from .adapters.yaml_codec import NotetypeFileCodec
from .config import DeckConfig, load_config
from .logging_setup import configure_logging


@dataclass
class Runtime:
    """Container for all wired components."""
    col: SQLiteCollection
    codec: NotetypeFileCodec
    config: DeckConfig


def build_runtime(
    collection_path: Path | None = None,
    db_path: Path | None = None,
    media_path: Path | None = None,
    config_path: Path | None = None,
    log_level: str | None = None,
) -> Runtime:
    """Build and wire all components for a collection."""
    # Load configuration
    config = load_config(config_path=config_path, collection_path=collection_path)
    configure_logging(log_level or config.logging.level)

    # Use config values if CLI args not provided
    if db_path is None:
        db_path = config.collection.db
    if media_path is None:
        media_path = config.media.dir

    col = SQLiteCollection(db_path=db_path, media_dir=media_path)

    return Runtime(
        col=col,
        codec=NotetypeFileCodec(),
        config=config,
    )
