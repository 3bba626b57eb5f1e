from pathlib import Path

import pytest

from catmd.events import EventDispatcher, EventType


@pytest.fixture
def write_docs(tmp_path):
    """Write a mapping of relative path -> content below tmp_path."""

    def _write(docs):
        for rel, content in docs.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    # Never touch the real ~/.catmd.json
    config_file = tmp_path / "config" / "catmd.json"
    monkeypatch.setenv("CATMD_CONFIG", str(config_file))
    return config_file


@pytest.fixture
def warnings():
    """Event dispatcher that records warning messages."""
    events = EventDispatcher()
    events.messages = []
    events.add_listener(EventType.WARNING_RAISED, lambda e: events.messages.append(e.data))
    return events


def content_lines(text):
    """Non-blank lines of rendered output, for layout-independent comparisons."""
    return [line for line in text.splitlines() if line.strip()]


def names(paths):
    return [Path(p).name for p in paths]
