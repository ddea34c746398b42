"""Test configuration and fixtures."""

import pytest

from ratio_store import JsonFileRatioStore


@pytest.fixture
def ratio_file(tmp_path):
    return tmp_path / "ratios.json"


@pytest.fixture
def file_store(ratio_file):
    """Ratio store backed by a temporary JSON file."""
    return JsonFileRatioStore(str(ratio_file))


@pytest.fixture
def app_env(monkeypatch, ratio_file):
    """Point the Streamlit app at a temporary ratio file."""
    monkeypatch.setenv("AREA_CONVERTER_STORE_PATH", str(ratio_file))
    monkeypatch.setenv("AREA_CONVERTER_LOG_LEVEL", "WARNING")
    return ratio_file
