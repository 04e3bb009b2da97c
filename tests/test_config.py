import pytest

from qdrant_vector_db.config import Settings


def test_settings_defaults(monkeypatch) -> None:
    for name in (
        "QDRANT_URL",
        "QDRANT_API_KEY",
        "QDRANT_TIMEOUT_S",
        "QDRANT_VECTOR_SIZE",
        "QDRANT_DISTANCE",
        "QDRANT_PAGE_SIZE",
        "QDRANT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    loaded = Settings.load()
    assert loaded.qdrant_url == "http://localhost:6333"
    assert loaded.qdrant_api_key is None
    assert loaded.request_timeout_s == 30.0
    assert loaded.vector_size == 1536
    assert loaded.distance == "Cosine"
    assert loaded.page_size == 100


def test_settings_from_env(monkeypatch) -> None:
    monkeypatch.setenv("QDRANT_URL", "https://qdrant.example:6333")
    monkeypatch.setenv("QDRANT_API_KEY", "secret")
    monkeypatch.setenv("QDRANT_VECTOR_SIZE", "384")
    monkeypatch.setenv("QDRANT_PAGE_SIZE", "")

    loaded = Settings.load()
    assert loaded.qdrant_url == "https://qdrant.example:6333"
    assert loaded.qdrant_api_key == "secret"
    assert loaded.vector_size == 384
    assert loaded.page_size == 100


@pytest.mark.parametrize("name,value", [("QDRANT_VECTOR_SIZE", "big"), ("QDRANT_TIMEOUT_S", "soon"), ("QDRANT_PAGE_SIZE", "0")])
def test_settings_invalid_values(monkeypatch, name, value) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        Settings.load()


def test_settings_log_level(monkeypatch) -> None:
    monkeypatch.setenv("QDRANT_LOG_LEVEL", "debug")
    assert Settings.load().log_level == "DEBUG"
