import sqlite3

import pytest
from fastapi.testclient import TestClient

from text_files_api.config.settings import Settings
from text_files_api.errors import StartupError
from text_files_api.main import create_app
from tests.consts import TEST_BUCKET_NAME


def test_unusable_database_url_is_fatal(mocked_aws):
    settings = Settings(_env_file=None, s3_bucket_name=TEST_BUCKET_NAME, database_url="postgresql://db/tags")

    with pytest.raises(StartupError, match="metadata store"):
        create_app(settings=settings)


def test_table_setup_failure_is_fatal(mocked_aws, tmp_path):
    # a directory cannot be opened as a database file
    settings = Settings(_env_file=None, s3_bucket_name=TEST_BUCKET_NAME, database_url=str(tmp_path))

    with pytest.raises(StartupError):
        create_app(settings=settings)


def test_tags_table_created_at_startup(mocked_aws, tmp_path):
    db_path = tmp_path / "tags.db"
    settings = Settings(_env_file=None, s3_bucket_name=TEST_BUCKET_NAME, database_url=str(db_path))

    create_app(settings=settings)

    conn = sqlite3.connect(db_path)
    assert conn.execute("SELECT name FROM sqlite_master WHERE name='file_tags'").fetchone()
    conn.close()


def test_cors_middleware_when_origins_configured(mocked_aws, database_url):
    settings = Settings(
        _env_file=None,
        s3_bucket_name=TEST_BUCKET_NAME,
        database_url=database_url,
        cors_allow_origins=["http://localhost:3000"],
    )

    with TestClient(create_app(settings=settings)) as client:
        response = client.get("/files", headers={"Origin": "http://localhost:3000"})

    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


def test_shutdown_closes_metadata_pool(mocked_aws, database_url):
    settings = Settings(_env_file=None, s3_bucket_name=TEST_BUCKET_NAME, database_url=database_url)
    app = create_app(settings=settings)

    with TestClient(app):
        pass

    assert app.state.tag_store.pool.opened == 0
