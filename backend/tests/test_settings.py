import structlog

from stockinfo.config.logging_config import configure_logging
from stockinfo.config.settings import AlphaVantageSettings, LoggingSettings, Settings
from stockinfo.main import create_app


def test_alpha_vantage_key_reads_historical_variable(monkeypatch) -> None:
    monkeypatch.delenv("STOCKINFO_ALPHA_VANTAGE_API_KEY", raising=False)
    monkeypatch.setenv("ALPHA_VANTAGE_KEY", "from-env")
    monkeypatch.setenv("STOCKINFO_ALPHA_VANTAGE_MAX_ATTEMPTS", "5")

    config = AlphaVantageSettings()

    assert config.api_key == "from-env"
    assert config.max_attempts == 5


def test_database_url_accepts_plain_variable(monkeypatch) -> None:
    monkeypatch.delenv("STOCKINFO_DATABASE_URL", raising=False)
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://user:pw@db/overviews")

    assert Settings().database_url == "postgresql+asyncpg://user:pw@db/overviews"


def test_configure_logging_accepts_json_and_console() -> None:
    try:
        for json_format in (True, False):
            app_settings = Settings(logging=LoggingSettings(level="debug", json_format=json_format))
            configure_logging(app_settings)
            structlog.get_logger("test").info("configured", json_format=json_format)
    finally:
        structlog.reset_defaults()


def test_create_app_mounts_overview_routes() -> None:
    app = create_app(Settings(create_tables=False))
    paths = set(app.openapi()["paths"])

    assert "/health" in paths
    assert "/api/overview/{symbol}" in paths
    assert "/api/overview/id/{overview_id}" in paths
    assert "/api/overview/assetType/{asset_type}" in paths


def test_log_json_switch_reads_documented_variable(monkeypatch) -> None:
    monkeypatch.delenv("STOCKINFO_LOG_JSON_FORMAT", raising=False)
    monkeypatch.setenv("STOCKINFO_LOG_JSON", "true")

    assert LoggingSettings().json_format is True
