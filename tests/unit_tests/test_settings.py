import pydantic
import pytest

from text_files_api.config.settings import IndexPage, Settings, TagUpdatePolicy, get_settings
from text_files_api.errors import StartupError
from text_files_api.main import load_settings

SETTINGS_ENV_VARS = [
    "S3_ENDPOINT",
    "S3_ACCESS_KEY_ID",
    "S3_SECRET_ACCESS_KEY",
    "S3_BUCKET_NAME",
    "DATABASE_URL",
    "TAGS_ENABLED",
    "PORT",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("S3_ENDPOINT", "http://minio:9000")
    monkeypatch.setenv("S3_ACCESS_KEY_ID", "key")
    monkeypatch.setenv("S3_SECRET_ACCESS_KEY", "secret")
    monkeypatch.setenv("S3_BUCKET_NAME", "files")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///tags.db")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.s3_endpoint == "http://minio:9000"
    assert settings.s3_access_key_id == "key"
    assert settings.s3_bucket_name == "files"
    assert settings.database_url == "sqlite:///tags.db"
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"


def test_settings_defaults():
    settings = Settings(_env_file=None, s3_bucket_name="files", database_url="tags.db")

    assert settings.tags_enabled is True
    assert settings.omitted_tags_on_update == TagUpdatePolicy.KEEP
    assert settings.index_page == IndexPage.STATIC
    assert settings.file_suffix == ".txt"
    assert settings.port == 3000
    assert settings.cors_allow_origins == []


def test_bucket_name_is_required():
    with pytest.raises(pydantic.ValidationError):
        Settings(_env_file=None, database_url="tags.db")


def test_database_url_is_required_when_tags_enabled():
    with pytest.raises(pydantic.ValidationError, match="database_url"):
        Settings(_env_file=None, s3_bucket_name="files")

    settings = Settings(_env_file=None, s3_bucket_name="files", tags_enabled=False)
    assert settings.database_url is None


def test_invalid_log_level():
    with pytest.raises(pydantic.ValidationError):
        Settings(_env_file=None, s3_bucket_name="files", database_url="tags.db", log_level="loud")


def test_describe_masks_secrets():
    settings = Settings(
        _env_file=None,
        s3_bucket_name="files",
        database_url="tags.db",
        s3_access_key_id="key",
        s3_secret_access_key="secret",
    )

    described = settings.describe()

    assert described["s3_secret_access_key"] == "****"
    assert described["s3_access_key_id"] == "****"
    assert described["s3_bucket_name"] == "files"
    assert "app_name" not in described


def test_load_settings_turns_missing_config_into_startup_error():
    with pytest.raises(StartupError, match="Invalid configuration"):
        load_settings()
