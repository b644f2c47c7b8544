import pytest
from click.testing import CliRunner

from text_files_api.cli import cli
from text_files_api.config.settings import get_settings
from tests.consts import TEST_BUCKET_NAME


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    for name in ["S3_BUCKET_NAME", "DATABASE_URL", "TAGS_ENABLED"]:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def cli_env(database_url):
    return {"S3_BUCKET_NAME": TEST_BUCKET_NAME, "DATABASE_URL": database_url}


def test_show_config(cli_env):
    result = CliRunner().invoke(cli, ["show-config"], env={**cli_env, "S3_SECRET_ACCESS_KEY": "secret"})

    assert result.exit_code == 0
    assert f"s3_bucket_name: {TEST_BUCKET_NAME}" in result.output
    assert "s3_secret_access_key: ****" in result.output


def test_serve_without_bucket_exits_non_zero(mocked_aws):
    result = CliRunner().invoke(cli, ["serve"])

    assert result.exit_code == 1


def test_serve_runs_uvicorn(mocked_aws, cli_env, monkeypatch):
    calls = []
    monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: calls.append(kwargs))

    result = CliRunner().invoke(cli, ["serve", "--host", "127.0.0.1", "--port", "8123"], env=cli_env)

    assert result.exit_code == 0, result.output
    assert calls == [{"host": "127.0.0.1", "port": 8123}]


def test_serve_with_reload_leaves_app_to_the_worker(mocked_aws, cli_env, monkeypatch):
    calls = []
    monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setattr("text_files_api.main.create_app", lambda *args, **kwargs: pytest.fail("app built in the parent"))

    result = CliRunner().invoke(cli, ["serve", "--reload", "--port", "8123"], env=cli_env)

    assert result.exit_code == 0, result.output
    assert calls == [
        (
            "text_files_api.main:create_app",
            {"factory": True, "host": "0.0.0.0", "port": 8123, "reload": True},
        )
    ]


def test_serve_with_reload_and_missing_config_exits_non_zero(mocked_aws, monkeypatch):
    monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: pytest.fail("server started"))

    result = CliRunner().invoke(cli, ["serve", "--reload"])

    assert result.exit_code == 1


def test_serve_with_reload_and_unusable_database_exits_non_zero(mocked_aws, cli_env, tmp_path, monkeypatch):
    monkeypatch.setattr("uvicorn.run", lambda app, **kwargs: pytest.fail("server started"))
    # a directory cannot be opened as a database file
    env = {**cli_env, "DATABASE_URL": str(tmp_path)}

    result = CliRunner().invoke(cli, ["serve", "--reload"], env=env)

    assert result.exit_code == 1


def test_init_stores(mocked_aws, cli_env, s3_client):
    env = {**cli_env, "S3_BUCKET_NAME": "provisioned-bucket"}

    result = CliRunner().invoke(cli, ["init-stores"], env=env)

    assert result.exit_code == 0, result.output
    assert "Stores are ready" in result.output
    s3_client.head_bucket(Bucket="provisioned-bucket")
