# gateway/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, SecretStr
from typing import List, Literal, Optional


class Settings(BaseSettings):
    # Core
    app_name: str = Field(default="Key Registry Gateway", validation_alias="APP_NAME")
    debug: bool = Field(default=False, validation_alias="DEBUG")

    # Chain (use validation_alias for env var names in Pydantic v2)
    rpc_url: Optional[str] = Field(default=None, validation_alias="RPC_URL")
    contract_address: Optional[str] = Field(default=None, validation_alias="CONTRACT_ADDRESS")
    private_key: Optional[SecretStr] = Field(default=None, validation_alias="PRIVATE_KEY")
    CHAIN_ID: Optional[int] = None
    GAS_LIMIT: Optional[int] = None
    POA_CHAIN: bool = False

    # Registry
    REGISTRY_BACKEND: Literal["contract", "memory"] = "contract"
    KEY_ENCODING: Literal["spki", "pkcs1"] = "spki"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )


settings = Settings()
