"""Ratio file storage and runtime settings."""

import json
import logging
import math

from area_converter import Converter, RatioConfig
from ratio_store import JsonFileRatioStore
from settings import DEFAULT_STORE_PATH, load_settings


def test_missing_file_loads_empty(file_store):
    assert file_store.load() == {}


def test_save_writes_string_values(file_store, ratio_file):
    file_store.save(RatioConfig(4.0, 16.5))
    assert json.loads(ratio_file.read_text()) == {
        "hectareToBigha": "4",
        "bighaToBiswa": "16.5",
    }


def test_save_creates_parent_directory(tmp_path):
    store = JsonFileRatioStore(str(tmp_path / "nested" / "dir" / "ratios.json"))
    store.save(RatioConfig())
    assert (tmp_path / "nested" / "dir" / "ratios.json").exists()


def test_ratios_survive_restart(file_store, ratio_file):
    first = Converter(file_store)
    first.initialize()
    first.set_hectare_to_bigha("4.2")
    first.close()

    second = Converter(JsonFileRatioStore(str(ratio_file)))
    second.initialize()
    assert second.hectare_to_bigha == 4.2
    assert second.bigha_to_biswa == 20.0


def test_corrupt_file_is_treated_as_absent(file_store, ratio_file, caplog):
    ratio_file.write_text("{not json")
    with caplog.at_level(logging.WARNING, logger="ratio_store"):
        assert file_store.load() == {}
    assert "Could not read ratios" in caplog.text

    converter = Converter(file_store)
    converter.initialize()
    assert converter.ratios == RatioConfig()


def test_non_object_file_is_ignored(file_store, ratio_file):
    ratio_file.write_text("[1, 2, 3]")
    assert file_store.load() == {}


def test_non_string_values_are_skipped(file_store, ratio_file):
    ratio_file.write_text(json.dumps({"hectareToBigha": 4, "bighaToBiswa": "18"}))
    assert file_store.load() == {"bighaToBiswa": "18"}


def test_present_but_corrupt_value_is_not_replaced(file_store, ratio_file):
    ratio_file.write_text(json.dumps({"hectareToBigha": "abc"}))
    converter = Converter(file_store)
    converter.initialize()
    assert math.isnan(converter.hectare_to_bigha)
    assert json.loads(ratio_file.read_text())["hectareToBigha"] == "NaN"


def test_write_failure_is_swallowed(tmp_path, caplog):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    store = JsonFileRatioStore(str(blocker / "ratios.json"))

    converter = Converter(store)
    with caplog.at_level(logging.WARNING, logger="ratio_store"):
        converter.initialize()
        converter.set_bigha_to_biswa("18")

    assert converter.bigha_to_biswa == 18.0
    assert "Could not write ratios" in caplog.text


def test_settings_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("AREA_CONVERTER_STORE_PATH", str(tmp_path / "r.json"))
    monkeypatch.setenv("AREA_CONVERTER_LOG_LEVEL", "debug")
    settings = load_settings()
    assert settings.store_path == str(tmp_path / "r.json")
    assert settings.log_level == "DEBUG"


def test_settings_defaults(monkeypatch):
    monkeypatch.delenv("AREA_CONVERTER_STORE_PATH", raising=False)
    monkeypatch.delenv("AREA_CONVERTER_LOG_LEVEL", raising=False)
    settings = load_settings()
    assert settings.store_path == DEFAULT_STORE_PATH
    assert settings.log_level == "INFO"
