from typing import Annotated
import logging

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


logger = logging.getLogger(__name__)

IPTV_CHANNELS_URL = "https://iptv-org.github.io/api/channels.json"
IPTV_STREAMS_URL = "https://iptv-org.github.io/api/streams.json"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Web0S; Linux/SmartTV) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/79.0.3945.79 Safari/537.36 DMOST/2.0.0 (; LGE; webOSTV; "
    "WEBOS6.3.2 03.34.95; W6_lm21a;)"
)

CommaList = Annotated[list[str], NoDecode]

# socks:// is treated as socks5://; other SOCKS versions are not supported by httpx
PROXY_SCHEMES = ("http://", "https://", "socks5://", "socks5h://", "socks://")


class CustomSettings(BaseSettings):
    """Application settings loaded from environment variables.

    Read once at startup; nothing in the service mutates them afterwards.
    """

    include_countries: CommaList = ["GR"]
    exclude_countries: CommaList = []
    include_languages: CommaList = []
    exclude_languages: CommaList = []
    exclude_categories: CommaList = []

    channels_url: str = IPTV_CHANNELS_URL
    streams_url: str = IPTV_STREAMS_URL
    m3u_playlist_url: str = ""  # Empty disables playlist ingestion

    fetch_timeout: int = 10000  # Milliseconds
    fetch_interval: int = 86400000  # Milliseconds, 1 day
    refresh_enabled: bool = False
    proxy_url: str = ""

    collection_cache_ttl_sec: int = 0  # 0 keeps entries until process exit
    verdict_cache_ttl_sec: int = 0
    default_user_agent: str = DEFAULT_USER_AGENT

    port: int = 3000
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "include_countries",
        "exclude_countries",
        "include_languages",
        "exclude_languages",
        "exclude_categories",
        mode="before",
    )
    @classmethod
    def parse_comma_list(cls, value):
        """Parse comma-separated values or list."""
        if value is None:
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, (list, tuple)):
            return [str(item).strip() for item in value if str(item).strip()]
        return []

    @field_validator("m3u_playlist_url", "proxy_url", mode="before")
    @classmethod
    def strip_optional_url(cls, value):
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("channels_url", "streams_url")
    @classmethod
    def validate_feed_url(cls, value: str) -> str:
        """Validate structured feed URLs are HTTP/HTTPS."""
        if not value.lower().startswith(("http://", "https://")):
            raise ValueError(f"Feed URL must be HTTP/HTTPS: {value}")
        return value

    @field_validator("proxy_url")
    @classmethod
    def validate_proxy_url(cls, value: str) -> str:
        """Validate proxy URL scheme (HTTP proxy or SOCKS5)."""
        if value and not value.lower().startswith(PROXY_SCHEMES):
            raise ValueError(
                f"Proxy URL must use one of {', '.join(PROXY_SCHEMES)}: {value}"
            )
        return value

    @field_validator("fetch_timeout", "fetch_interval", "port")
    @classmethod
    def validate_positive_ints(cls, value: int, info) -> int:
        """Ensure timing and port settings are positive."""
        if value <= 0:
            raise ValueError(f"{info.field_name} must be > 0")
        return value

    @field_validator("collection_cache_ttl_sec", "verdict_cache_ttl_sec")
    @classmethod
    def validate_ttls(cls, value: int, info) -> int:
        """Cache TTLs are seconds; 0 means entries never expire."""
        if value < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        normalized = value.upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if normalized not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return normalized

    @model_validator(mode="after")
    def validate_filter_configuration(self):
        """Warn about filter combinations that can never match."""
        overlap = set(self.include_countries) & set(self.exclude_countries)
        if overlap:
            logger.warning(
                "Countries both included and excluded, they will be dropped: %s",
                ", ".join(sorted(overlap)),
            )
        if not self.include_countries:
            logger.warning("No include countries configured - manifest will expose no catalogs")
        return self

    @property
    def fetch_timeout_sec(self) -> float:
        return self.fetch_timeout / 1000

    @property
    def fetch_interval_sec(self) -> float:
        return self.fetch_interval / 1000

    def __init__(self, **data):
        """Initialize settings and log configuration."""
        super().__init__(**data)

        logger.info("Configuration loaded:")
        logger.info("  Include Countries: %s", ", ".join(self.include_countries) or "-")
        logger.info("  Exclude Countries: %s", ", ".join(self.exclude_countries) or "-")
        logger.info("  Include Languages: %s", ", ".join(self.include_languages) or "-")
        logger.info("  Exclude Languages: %s", ", ".join(self.exclude_languages) or "-")
        logger.info("  Exclude Categories: %s", ", ".join(self.exclude_categories) or "-")
        logger.info("  Playlist Source: %s", self.m3u_playlist_url or "disabled")
        logger.info("  Fetch Timeout: %sms", self.fetch_timeout)
        logger.info(
            "  Refresh Interval: %sms (%s)",
            self.fetch_interval,
            "scheduled" if self.refresh_enabled else "advisory",
        )
        logger.info("  Proxy: %s", "configured" if self.proxy_url else "none")
        logger.info(
            "  Cache TTL: collections=%s verdicts=%s",
            self.collection_cache_ttl_sec or "never",
            self.verdict_cache_ttl_sec or "never",
        )


settings = CustomSettings()


def setup_logging(level: str | None = None) -> None:
    """Configure application logging."""
    logging.basicConfig(
        level=getattr(logging, (level or settings.log_level).upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
