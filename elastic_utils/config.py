"""
elastic-utils configuration

We read configuration from 2 sources, in order of precedence (higher is more priority)
- Environment variables
- A .env file, either in the current working directory or in a location specified
  by the ELASTIC_UTILS_ENV_FILE environment variable

Settings are handed to connect() explicitly, so several independent connections
(e.g. in tests) can each use their own Settings object. get_settings() is only a
cached default for applications that configure through the environment.
"""

import functools
from pathlib import Path
from typing import Annotated

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "elastic_utils_"


class RetryPolicy(BaseModel):
    """
    Transport level retry behaviour for a connection.
    Nothing above the transport retries, so this is the only place retries happen.
    """

    max_retries: Annotated[int, Field(ge=0, description="Number of retries per request")] = 3
    retry_on_status: Annotated[
        tuple[int, ...],
        Field(description="HTTP status codes that should be retried"),
    ] = (429, 502, 503, 504)
    retry_on_timeout: Annotated[bool, Field(description="Retry when a request times out")] = False


class Settings(BaseSettings):
    env_file: Annotated[
        Path,
        Field(
            description="Location of a .env file (if used) relative to working directory",
        ),
    ] = Path(".env")

    elastic_host: Annotated[str, Field(description="Elasticsearch host name")] = "localhost"

    elastic_port: Annotated[int, Field(description="Elasticsearch HTTP port")] = 9200

    max_threads: Annotated[
        int,
        Field(
            gt=0,
            description=(
                "Maximum number of concurrent request handlers in the application. "
                "The connection pool never holds more connections than this, so handlers cannot starve"
            ),
        ),
    ] = 200

    connections_per_route: Annotated[
        int,
        Field(gt=0, description="Maximum number of simultaneous connections to a single elastic node"),
    ] = 10

    connection_timeout: Annotated[
        float,
        Field(
            gt=0,
            description=(
                "Connect and socket timeout in seconds. Long enough for slow cluster operations such as large "
                "mapping updates"
            ),
        ),
    ] = 5 * 60

    health_timeout: Annotated[
        float,
        Field(gt=0, description="Client side deadline in seconds for a cluster health check"),
    ] = 12

    health_wait_timeout: Annotated[
        float,
        Field(gt=0, description="How long to wait in seconds for a newly created index to become healthy"),
    ] = 120

    health_poll_interval: Annotated[
        float,
        Field(gt=0, description="Seconds between health checks while waiting for a healthy cluster"),
    ] = 1

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX)

    @property
    def elastic_url(self) -> str:
        return f"http://{self.elastic_host}:{self.elastic_port}"

    @property
    def pool_size(self) -> int:
        """Connections kept per node: one route per node, bounded by the application concurrency"""
        return min(self.max_threads, self.connections_per_route)


@functools.lru_cache()
def get_settings() -> Settings:
    temp = Settings()
    load_dotenv(temp.env_file, override=False)
    return Settings()


if __name__ == "__main__":
    # Echo the settings
    for k, v in get_settings().model_dump().items():
        print(f"{ENV_PREFIX.upper()}{k.upper()}={v}")
