"""
Configuration module

Related classes:
  - upstream_client.WorkflowClient: uses UpstreamConfig
  - chat_history.create_session_store: uses DatabaseConfig
  - server.run: uses ServerConfig
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv
from psycopg.conninfo import make_conninfo


@dataclass
class UpstreamConfig:
    """n8n workflow engine settings"""

    base_url: str = "http://localhost:5678"
    webhook_path: str = "/webhook/upload-code"
    health_path: str = "/health"
    timeout_seconds: float = 120.0
    health_timeout_seconds: float = 5.0

    @property
    def webhook_url(self) -> str:
        return self.base_url.rstrip("/") + self.webhook_path

    @property
    def health_url(self) -> str:
        return self.base_url.rstrip("/") + self.health_path


@dataclass
class DatabaseConfig:
    """Transcript persistence settings"""

    host: Optional[str] = None
    port: int = 5432
    name: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    sqlite_path: Optional[str] = None
    pool_min_size: int = 1
    pool_max_size: int = 10
    create_schema: bool = True

    @property
    def backend(self) -> str:
        """Which store to build: "postgres", "sqlite" or "none"."""
        if self.host and self.user:
            return "postgres"
        if self.sqlite_path:
            return "sqlite"
        return "none"

    def conninfo(self) -> str:
        """libpq keyword/value connection string."""
        parts = {
            "host": self.host,
            "port": self.port,
            "dbname": self.name,
            "user": self.user,
            "password": self.password,
        }
        return make_conninfo(**{key: value for key, value in parts.items() if value})


@dataclass
class ServerConfig:
    """HTTP listener settings"""

    host: str = "0.0.0.0"
    port: int = 3000
    static_dir: str = "public"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass
class Config:
    """Application configuration"""

    upstream: UpstreamConfig = None  # type: ignore
    database: DatabaseConfig = None  # type: ignore
    server: ServerConfig = None  # type: ignore

    log_level: str = "INFO"
    log_file: str = "logs/workflow_relay.log"

    def __post_init__(self):
        if self.upstream is None:
            self.upstream = UpstreamConfig()
        if self.database is None:
            self.database = DatabaseConfig()
        if self.server is None:
            self.server = ServerConfig()

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "Config":
        """Read settings from a YAML file.

        Args:
            config_path: settings file (defaults to config/app_config.yaml)

        Returns:
            Config: loaded settings; a missing file yields the defaults
        """
        if config_path is None:
            project_root = Path(__file__).parent.parent.parent
            config_path = project_root / "config" / "app_config.yaml"

        yaml_data: Dict[str, Any] = {}
        if Path(config_path).exists():
            with open(config_path, "r", encoding="utf-8") as f:
                yaml_data = yaml.safe_load(f) or {}

        upstream_data = yaml_data.get("upstream", {})
        database_data = yaml_data.get("database", {})
        server_data = yaml_data.get("server", {})
        log_data = yaml_data.get("log", {})

        return cls(
            upstream=UpstreamConfig(
                base_url=upstream_data.get("base_url", "http://localhost:5678"),
                webhook_path=upstream_data.get("webhook_path", "/webhook/upload-code"),
                health_path=upstream_data.get("health_path", "/health"),
                timeout_seconds=float(upstream_data.get("timeout_seconds", 120)),
                health_timeout_seconds=float(
                    upstream_data.get("health_timeout_seconds", 5)
                ),
            ),
            database=DatabaseConfig(
                host=database_data.get("host"),
                port=int(database_data.get("port", 5432)),
                name=database_data.get("name"),
                user=database_data.get("user"),
                password=database_data.get("password"),
                sqlite_path=database_data.get("sqlite_path"),
                pool_min_size=int(database_data.get("pool_min_size", 1)),
                pool_max_size=int(database_data.get("pool_max_size", 10)),
                create_schema=bool(database_data.get("create_schema", True)),
            ),
            server=ServerConfig(
                host=server_data.get("host", "0.0.0.0"),
                port=int(server_data.get("port", 3000)),
                static_dir=server_data.get("static_dir", "public"),
                cors_origins=list(server_data.get("cors_origins", ["*"])),
            ),
            log_level=log_data.get("level", "INFO"),
            log_file=log_data.get("file", "logs/workflow_relay.log"),
        )

    @classmethod
    def from_env(cls, base: Optional["Config"] = None) -> "Config":
        """Overlay environment variables on top of ``base`` (or the defaults).

        PG* variables follow libpq naming so an existing PostgreSQL
        environment is picked up as is.
        """
        config = base or cls()
        upstream = config.upstream
        database = config.database
        server = config.server

        upstream.base_url = os.getenv("N8N_BASE_URL", upstream.base_url)
        upstream.webhook_path = os.getenv("N8N_WEBHOOK_PATH", upstream.webhook_path)
        upstream.health_path = os.getenv("N8N_HEALTH_PATH", upstream.health_path)
        upstream.timeout_seconds = float(
            os.getenv("N8N_TIMEOUT", str(upstream.timeout_seconds))
        )

        database.host = os.getenv("PGHOST", database.host)
        database.port = int(os.getenv("PGPORT", str(database.port)))
        database.name = os.getenv("PGDATABASE", database.name)
        database.user = os.getenv("PGUSER", database.user)
        database.password = os.getenv("PGPASSWORD", database.password)
        database.sqlite_path = os.getenv("RELAY_SQLITE_PATH", database.sqlite_path)

        server.host = os.getenv("HOST", server.host)
        server.port = int(os.getenv("PORT", str(server.port)))
        server.static_dir = os.getenv("RELAY_STATIC_DIR", server.static_dir)

        config.log_level = os.getenv("LOG_LEVEL", config.log_level)
        config.log_file = os.getenv("LOG_FILE", config.log_file)
        return config

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """YAML file first, then .env and process environment on top."""
        load_dotenv()
        return cls.from_env(cls.from_yaml(config_path))
