from dataclasses import dataclass
import os
from pathlib import Path
import tomllib


@dataclass(frozen=True)
class AppConfig:
    region: str
    database_path: str
    cache_dir: str
    user_agent: str
    random_seed: int | None = None


@dataclass(frozen=True)
class HttpConfig:
    timeout_seconds: float = 10.0
    request_timeout_seconds: float = 30.0


@dataclass(frozen=True)
class CatalogConfig:
    base_url: str
    api_key_env: str
    language: str = "en-US"


@dataclass(frozen=True)
class VideoConfig:
    search_url: str
    trailer_suffix: str = "trailer"


@dataclass(frozen=True)
class LandingConfig:
    trending_count: int = 8
    top_rated_count: int = 2


@dataclass(frozen=True)
class PopularConfig:
    pool_size: int = 1000
    sample_size: int = 10
    reuse_cached_rows: bool = False


@dataclass(frozen=True)
class LlmConfig:
    base_url: str
    model: str
    api_key_env: str
    max_titles: int = 10


@dataclass(frozen=True)
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 5050


@dataclass(frozen=True)
class IngestConfig:
    rate_limit_seconds: float
    max_retries: int
    cache_ttl_days: int
    max_pages: int = 50


@dataclass(frozen=True)
class Config:
    app: AppConfig
    http: HttpConfig
    catalog: CatalogConfig
    video: VideoConfig
    landing: LandingConfig
    popular: PopularConfig
    llm: LlmConfig
    server: ServerConfig
    ingest: IngestConfig

    @property
    def database_path(self) -> str:
        return self.app.database_path

    def catalog_api_key(self) -> str:
        return _env_secret(self.catalog.api_key_env)

    def llm_api_key(self) -> str:
        return _env_secret(self.llm.api_key_env)


DEFAULT_CONFIG_PATH = Path("config.toml")


def _env_secret(name: str) -> str:
    value = os.environ.get(name, "").strip()
    if not value:
        raise RuntimeError(f"Environment variable {name} is not set.")
    return value


def load_config(path: Path | None = None) -> Config:
    config_path = path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(
            "Missing config.toml. Copy config.example.toml to config.toml and edit it."
        )

    raw = tomllib.loads(config_path.read_text(encoding="utf-8"))

    return Config(
        app=AppConfig(**raw["app"]),
        http=HttpConfig(**raw.get("http", {})),
        catalog=CatalogConfig(**raw["catalog"]),
        video=VideoConfig(**raw["video"]),
        landing=LandingConfig(**raw.get("landing", {})),
        popular=PopularConfig(**raw.get("popular", {})),
        llm=LlmConfig(**raw["llm"]),
        server=ServerConfig(**raw.get("server", {})),
        ingest=IngestConfig(**raw["ingest"]),
    )
