from typing import Literal

from pydantic import Field

from .base import ABCBaseSettings


class ApiSettings(ABCBaseSettings):
    """RagTime REST API settings"""
    api_url: str | None = Field(default=None, description="Base URL of the RagTime API (auto-discovered when unset)")
    tenant_id: str = Field(default="default-tenant", description="Tenant identifier sent with every request")
    timeout: float = Field(default=60.0, description="HTTP timeout in seconds")
    api_name_hint: str = Field(default="ragtime", description="Substring used to discover the API Gateway REST API")
    stage: str = Field(default="prod", description="API Gateway stage")

    model_config = ABCBaseSettings.model_config.copy()
    model_config["env_prefix"] = "RAGTIME_"


class AwsSettings(ABCBaseSettings):
    """AWS client settings"""
    region: str = Field(default="us-east-1", description="AWS region")
    endpoint_url: str | None = Field(default=None, description="Custom endpoint (e.g. LocalStack)")
    access_key_id: str | None = Field(default=None, description="AWS access key ID")
    secret_access_key: str | None = Field(default=None, description="AWS secret access key")

    model_config = ABCBaseSettings.model_config.copy()
    model_config["env_prefix"] = "AWS_"


class DatabaseSettings(ABCBaseSettings):
    """PostgreSQL (pgvector) settings"""
    host: str | None = Field(default=None, description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    name: str = Field(default="ragtime", description="PostgreSQL database name")
    username: str = Field(default="postgres", description="PostgreSQL username")
    password: str = Field(default="", description="PostgreSQL password")
    secret_name: str | None = Field(
        default="ragtime-database-credentials-dev",
        description="Secrets Manager secret holding the database credentials",
    )
    sslmode: str | None = Field(default=None, description="libpq sslmode; 'require' for remote hosts when unset")
    pool_max: int = Field(default=5, description="Maximum pooled connections")
    connect_timeout: int = Field(default=5, description="Connection timeout in seconds")

    model_config = ABCBaseSettings.model_config.copy()
    model_config["env_prefix"] = "DB_"

    @property
    def effective_sslmode(self) -> str:
        if self.sslmode:
            return self.sslmode
        return "disable" if self.host in (None, "localhost", "127.0.0.1") else "require"

    @property
    def connection_kwargs(self) -> dict:
        """Keyword arguments for psycopg2.connect / pools"""
        return {
            "host": self.host,
            "port": self.port,
            "dbname": self.name,
            "user": self.username,
            "password": self.password,
            "sslmode": self.effective_sslmode,
            "connect_timeout": self.connect_timeout,
        }


class AnalysisSettings(ABCBaseSettings):
    """Document analysis workflow settings"""
    source: Literal["direct", "remote"] = Field(
        default="remote",
        description="Where relational/embedding data comes from: direct PostgreSQL access or the analysis endpoint",
    )
    section_timeout: float = Field(default=15.0, description="Timeout in seconds for each secondary lookup")
    preview_threshold: int = Field(default=10, description="Include per-chunk previews when at most this many chunks exist")
    preview_length: int = Field(default=200, description="Bytes of S3 content to preview")
    degrade_on_server_error: bool = Field(
        default=True,
        description="Treat non-404 analysis endpoint errors like a missing endpoint (degraded report)",
    )

    model_config = ABCBaseSettings.model_config.copy()
    model_config["env_prefix"] = "ANALYSIS_"


class LambdaSettings(ABCBaseSettings):
    """Environment of the Lambda handlers"""
    documents_table_name: str | None = Field(default=None, description="DynamoDB table with primary document records")
    database_secret_name: str | None = Field(default=None, description="Secrets Manager secret with database credentials")
    database_cluster_endpoint: str | None = Field(default=None, description="Aurora cluster endpoint")
    database_name: str = Field(default="ragtime", description="Database name")
