# tid/config.py

from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tid.types import MAX_SECRETS, Mode


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: Literal["json", "console"] = "console"


class TidConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TID_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    secrets: dict[int, SecretStr] = Field(
        ..., description="密钥索引 (0-15) 到密钥的映射，JSON 格式"
    )
    default_mode: Mode = Mode.TIME_SORTED
    default_tag_length: int = Field(default=2, ge=1, le=2, description="校验标签长度 (1 或 2)")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("secrets")
    @classmethod
    def validate_keyring(cls, v: dict[int, SecretStr]) -> dict[int, SecretStr]:
        if not 1 <= len(v) <= MAX_SECRETS:
            raise ValueError(f"密钥数量必须在 1 到 {MAX_SECRETS} 之间，当前为 {len(v)}")
        bad = sorted(k for k in v if not 0 <= k < MAX_SECRETS)
        if bad:
            raise ValueError(f"密钥索引必须在 0-{MAX_SECRETS - 1} 之间: {bad}")
        return v

    def secret_bytes(self) -> dict[int, bytes]:
        return {k: v.get_secret_value().encode("utf-8") for k, v in self.secrets.items()}
