"""Tests for configuration loading."""

import tempfile
from pathlib import Path

import pytest

from deckhand.config import load_config
from deckhand.core.model import OrdinalMode


def test_load_config_defaults():
    """Test loading config with defaults when no file exists."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config = load_config(config_path=Path(tmpdir) / "absent.toml")

    assert config.collection.root == Path("./collection")
    assert config.collection.db == Path("./collection") / "collection.sqlite"
    assert config.media.dir == Path("./collection") / "media"
    assert config.templates.ordinals is OrdinalMode.LIVE
    assert config.logging.level == "WARNING"


def test_load_config_from_file():
    """Test loading config from a file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "deck.toml"
        config_path.write_text("""
[collection]
root = "my-collection"
db = "custom.sqlite"

[media]
dir = "files"

[templates]
ordinals = "snapshot"

[logging]
level = "debug"
""")

        config = load_config(config_path=config_path)

        assert config.collection.root == Path("my-collection")
        assert config.collection.db == Path("custom.sqlite")
        assert config.media.dir == Path("files")
        assert config.templates.ordinals is OrdinalMode.SNAPSHOT
        assert config.logging.level == "DEBUG"


def test_load_config_invalid_ordinals():
    """An unknown ordinal mode is a configuration error."""
    with tempfile.TemporaryDirectory() as tmpdir:
        config_path = Path(tmpdir) / "deck.toml"
        config_path.write_text('[templates]\nordinals = "sometimes"\n')

        with pytest.raises(ValueError):
            load_config(config_path=config_path)


def test_load_config_search_cwd():
    """Test config search in current working directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        import os
        orig_cwd = os.getcwd()
        try:
            os.chdir(tmpdir)
            config_path = Path(tmpdir) / "deck.toml"
            config_path.write_text("""
[media]
dir = "cwd-media"
""")

            config = load_config()
            assert config.media.dir == Path("cwd-media")
        finally:
            os.chdir(orig_cwd)


def test_load_config_search_collection():
    """Test config search in collection directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        col_path = Path(tmpdir) / "collection"
        col_path.mkdir()
        config_path = col_path / "deck.toml"
        config_path.write_text("""
[templates]
ordinals = "snapshot"
""")

        config = load_config(collection_path=col_path)
        assert config.templates.ordinals is OrdinalMode.SNAPSHOT
        assert config.collection.db == col_path / "collection.sqlite"
