"""Server settings, read once from the environment.

Every field has a local-development default.  Deployments override them
with the variables below:

    SERVER_HOST, SERVER_PORT     bind address for ``scoring-server``
    SERVER_CORS_ORIGINS          comma-separated list, ``*`` allows any
    SERVER_TESTS_FILE            test definitions (default v1/tests.yaml)
    SERVER_LOG_LEVEL             root log level name
    TRUSTED_PROXY_SECRET         require a matching X-Proxy-Secret header
"""

import os
from dataclasses import dataclass, field


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class ServerSettings:
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    # None -> TestStore default
    tests_file: str | None = None
    log_level: str = "INFO"
    trusted_proxy_secret: str | None = None


def load_settings() -> ServerSettings:
    """Build :class:`ServerSettings` from the environment variables above."""
    env = os.environ
    return ServerSettings(
        host=env.get("SERVER_HOST", ServerSettings.host),
        port=int(env.get("SERVER_PORT", ServerSettings.port)),
        cors_origins=_split_csv(env.get("SERVER_CORS_ORIGINS", "*")),
        tests_file=env.get("SERVER_TESTS_FILE") or None,
        log_level=env.get("SERVER_LOG_LEVEL", ServerSettings.log_level).upper(),
        trusted_proxy_secret=env.get("TRUSTED_PROXY_SECRET") or None,
    )
