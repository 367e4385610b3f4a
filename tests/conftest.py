import pytest

from domain_fixtures import config


@pytest.fixture(autouse=True)
def ensure_env_clean(monkeypatch, tmp_path):
    # isolate every test from the developer's settings and home directory
    for var in config.ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)
    monkeypatch.delenv("REST_API_ID", raising=False)
    monkeypatch.delenv("RESOURCE_ID", raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    yield


@pytest.fixture
def project_root(tmp_path, monkeypatch):
    """A fake plugin checkout with one fixture folder named 'basic'."""
    root = tmp_path / "serverless-domain-manager"
    basic = root / "test" / "integration-tests" / "basic"
    (basic / "src").mkdir(parents=True)
    (basic / "serverless.yml").write_text("service: basic-${opt:RANDOM_STRING}\n", encoding="utf-8")
    (basic / "src" / "handler.js").write_text("module.exports.hello = async () => ({});\n", encoding="utf-8")
    monkeypatch.setenv("DOMAIN_FIXTURES_PROJECT_ROOT", str(root))
    return root
