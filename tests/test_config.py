import pytest
from pydantic import ValidationError

from gateway.config import Settings


def test_defaults(monkeypatch):
    for name in ("RPC_URL", "CONTRACT_ADDRESS", "PRIVATE_KEY", "REGISTRY_BACKEND", "PORT", "KEY_ENCODING"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.REGISTRY_BACKEND == "contract"
    assert settings.KEY_ENCODING == "spki"
    assert settings.PORT == 3000
    assert settings.CORS_ORIGINS == ["*"]
    assert settings.rpc_url is None


def test_environment(monkeypatch):
    monkeypatch.setenv("RPC_URL", "https://eth-sepolia.example/v2/key")
    monkeypatch.setenv("CONTRACT_ADDRESS", "0x5FbDB2315678afecb367f032d93F642f64180aa3")
    monkeypatch.setenv("PRIVATE_KEY", "0xdeadbeef")
    monkeypatch.setenv("CHAIN_ID", "11155111")
    monkeypatch.setenv("POA_CHAIN", "true")
    monkeypatch.setenv("CORS_ORIGINS", '["http://localhost:5173"]')
    settings = Settings(_env_file=None)
    assert settings.rpc_url == "https://eth-sepolia.example/v2/key"
    assert settings.private_key.get_secret_value() == "0xdeadbeef"
    assert "deadbeef" not in repr(settings)
    assert settings.CHAIN_ID == 11155111
    assert settings.POA_CHAIN is True
    assert settings.CORS_ORIGINS == ["http://localhost:5173"]


def test_env_file(tmp_path, monkeypatch):
    monkeypatch.delenv("REGISTRY_BACKEND", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("REGISTRY_BACKEND=memory\nPORT=8080\n", encoding="utf-8")
    settings = Settings(_env_file=env_file)
    assert settings.REGISTRY_BACKEND == "memory"
    assert settings.PORT == 8080


def test_rejects_unknown_backend():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, REGISTRY_BACKEND="sqlite")
    with pytest.raises(ValidationError):
        Settings(_env_file=None, KEY_ENCODING="pem")
