import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

STORAGE_BACKENDS = ("file", "redis")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _to_bool(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_int(value: Optional[str], default: int) -> int:
    if value is None or not value.strip():
        return default
    return int(value)


def _load_env_file(env_path: Optional[Path] = None) -> None:
    if env_path is not None:
        if env_path.exists():
            load_dotenv(dotenv_path=env_path, override=False)
        return
    load_dotenv(override=False)


@dataclass(frozen=True)
class RedisConfig:
    host: str = "localhost"
    port: int = 6379
    db: int = 0
    password: Optional[str] = None
    key_prefix: str = "nacoclip"

    @classmethod
    def from_env(cls) -> "RedisConfig":
        prefix = os.getenv("REDIS_KEY_PREFIX", cls.key_prefix)

        uri = os.getenv("REDIS_URI")
        if uri:
            return replace(cls.from_uri(uri), key_prefix=prefix)

        host = os.getenv("REDIS_HOST", cls.host)
        port = _to_int(os.getenv("REDIS_PORT"), cls.port)
        db = _to_int(os.getenv("REDIS_DB"), cls.db)
        password = os.getenv("REDIS_PASSWORD") or None

        return cls(host=host, port=port, db=db, password=password, key_prefix=prefix)

    @classmethod
    def from_uri(cls, uri: str) -> "RedisConfig":
        parsed = urlparse(uri)
        if parsed.scheme not in {"redis", "rediss"}:
            raise ValueError(
                f"Unsupported Redis URI scheme: {parsed.scheme!r}")

        host = parsed.hostname or cls.host
        port = parsed.port or cls.port
        password = parsed.password or None
        db_fragment = parsed.path.lstrip("/")
        db = int(db_fragment) if db_fragment else cls.db

        return cls(host=host, port=port, db=db, password=password)


@dataclass(frozen=True)
class AppConfig:
    data_dir: Path = field(default_factory=lambda: Path.home() / ".nacoclip")
    storage: str = "file"
    max_entries: int = 500
    max_payload_bytes: int = 10 * 1024 * 1024
    copy_file_payload: bool = False
    log_level: str = "WARNING"
    redis: RedisConfig = field(default_factory=RedisConfig)

    def __post_init__(self) -> None:
        if self.storage not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unsupported storage backend: {self.storage!r} (expected one of {STORAGE_BACKENDS})")
        if self.max_entries < 1 or self.max_payload_bytes < 1:
            raise ValueError("capacity limits must be positive")
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"Unsupported log level: {self.log_level!r}")

    @property
    def files_dir(self) -> Path:
        return self.data_dir / "files"

    @classmethod
    def from_env(cls, *, env_path: Optional[Path] = None) -> "AppConfig":
        _load_env_file(env_path)

        data_dir_raw = os.getenv("NACOCLIP_DATA_DIR")
        data_dir = Path(data_dir_raw).expanduser() if data_dir_raw else Path.home() / ".nacoclip"

        return cls(
            data_dir=data_dir,
            storage=os.getenv("NACOCLIP_STORAGE", cls.storage).strip().lower(),
            max_entries=_to_int(os.getenv("NACOCLIP_MAX_ENTRIES"), cls.max_entries),
            max_payload_bytes=_to_int(
                os.getenv("NACOCLIP_MAX_PAYLOAD_BYTES"), cls.max_payload_bytes),
            copy_file_payload=_to_bool(
                os.getenv("NACOCLIP_COPY_FILE_PAYLOAD"), default=False),
            log_level=os.getenv("NACOCLIP_LOG_LEVEL", cls.log_level).upper(),
            redis=RedisConfig.from_env(),
        )
