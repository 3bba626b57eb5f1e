import json

from catmd.config import ConfigManager


def test_config_file_follows_environment(isolated_config):
    assert ConfigManager.get_config_file() == isolated_config


def test_defaults_without_file():
    assert ConfigManager.load() == {"output": "", "scope": "", "separator": "\n"}


def test_save_and_load(isolated_config):
    path = ConfigManager.save(output="book.md", scope="/docs")
    assert path == isolated_config
    assert json.loads(path.read_text(encoding="utf-8"))["output"] == "book.md"

    config = ConfigManager.load()
    assert config["output"] == "book.md"
    assert config["scope"] == "/docs"
    assert config["separator"] == "\n"


def test_empty_values_keep_saved_ones():
    ConfigManager.save(output="book.md", separator="\n---\n")
    ConfigManager.save(scope="/docs")

    config = ConfigManager.load()
    assert config == {"output": "book.md", "scope": "/docs", "separator": "\n---\n"}


def test_corrupt_file_falls_back_to_defaults(isolated_config):
    isolated_config.parent.mkdir(parents=True)
    isolated_config.write_text("{not json", encoding="utf-8")
    assert ConfigManager.load() == ConfigManager.DEFAULT_CONFIG


def test_unknown_keys_ignored(isolated_config):
    isolated_config.parent.mkdir(parents=True)
    isolated_config.write_text(json.dumps({"output": "x.md", "theme": "dark"}), encoding="utf-8")

    config = ConfigManager.load()
    assert "theme" not in config
    assert config["output"] == "x.md"


def test_get_prefilled():
    ConfigManager.save(output="book.md")
    assert ConfigManager.get_prefilled("output") == "book.md"
    assert ConfigManager.get_prefilled("missing") == ""
