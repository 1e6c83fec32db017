import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from graph.network_builder import DEFAULT_TOP_K

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

# =========================================================
# CONFIGURATION
# =========================================================
DEFAULT_CORPUS_PATH = "data/sample_corpus.json"
DEFAULT_CACHE_SIZE = 256
DEFAULT_WORKERS = 4
DEFAULT_QUERY_TIMEOUT = 30.0


def _env_number(name, default, cast):
    value = os.getenv(name)
    if value in (None, ""):
        return default
    try:
        return cast(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None


def _env_int(name, default):
    return _env_number(name, default, int)


def _env_float(name, default):
    return _env_number(name, default, float)


@dataclass(frozen=True)
class AnalyticsConfig:
    corpus_path: Optional[str] = DEFAULT_CORPUS_PATH
    corpus_url: Optional[str] = None
    chapters_path: Optional[str] = None
    cache_size: int = DEFAULT_CACHE_SIZE
    top_k: int = DEFAULT_TOP_K
    workers: int = DEFAULT_WORKERS
    query_timeout: Optional[float] = DEFAULT_QUERY_TIMEOUT
    log_level: str = "INFO"

    @property
    def timeout_seconds(self) -> Optional[float]:
        """Join ceiling for one query; zero or negative means no limit"""
        if self.query_timeout is None or self.query_timeout <= 0:
            return None
        return self.query_timeout

    @classmethod
    def from_env(cls) -> "AnalyticsConfig":
        timeout = _env_float("ANALYTICS_QUERY_TIMEOUT", DEFAULT_QUERY_TIMEOUT)
        return cls(
            corpus_path=os.getenv("QURAN_CORPUS_PATH", DEFAULT_CORPUS_PATH),
            corpus_url=os.getenv("QURAN_CORPUS_URL") or None,
            chapters_path=os.getenv("QURAN_CHAPTERS_PATH") or None,
            cache_size=_env_int("ANALYTICS_CACHE_SIZE", DEFAULT_CACHE_SIZE),
            top_k=_env_int("ANALYTICS_TOP_K", DEFAULT_TOP_K),
            workers=_env_int("ANALYTICS_WORKERS", DEFAULT_WORKERS),
            query_timeout=timeout if timeout > 0 else None,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


# =========================================================
# VALIDATION
# =========================================================
def validate_config(config: AnalyticsConfig):
    """Validate configuration and environment"""
    if config.cache_size < 1:
        raise ValueError("ANALYTICS_CACHE_SIZE must be at least 1")
    if config.top_k < 0:
        raise ValueError("ANALYTICS_TOP_K must not be negative")
    if config.workers < 1:
        raise ValueError("ANALYTICS_WORKERS must be at least 1")
    if not isinstance(logging.getLevelName(config.log_level), int):
        raise ValueError(f"LOG_LEVEL {config.log_level!r} is not a logging level")
    if not config.corpus_url:
        if not config.corpus_path or not os.path.exists(config.corpus_path):
            raise FileNotFoundError(f"Corpus file not found: {config.corpus_path}")

    logger.info("Configuration validated successfully")
    logger.info(f"Corpus source: {config.corpus_url or config.corpus_path}")
