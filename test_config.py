"""
Test environment configuration
"""
import pytest

from config import DEFAULT_CORPUS_PATH, AnalyticsConfig, validate_config
from conftest import SAMPLE_CORPUS

ENV_VARS = (
    "QURAN_CORPUS_PATH",
    "QURAN_CORPUS_URL",
    "QURAN_CHAPTERS_PATH",
    "ANALYTICS_CACHE_SIZE",
    "ANALYTICS_TOP_K",
    "ANALYTICS_WORKERS",
    "ANALYTICS_QUERY_TIMEOUT",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    config = AnalyticsConfig.from_env()
    assert config == AnalyticsConfig()
    assert config.corpus_path == DEFAULT_CORPUS_PATH
    assert config.cache_size == 256
    assert config.top_k == 12
    assert config.query_timeout == 30.0


def test_from_env(clean_env):
    clean_env.setenv("QURAN_CORPUS_URL", "https://example.org/corpus.json")
    clean_env.setenv("ANALYTICS_CACHE_SIZE", "8")
    clean_env.setenv("ANALYTICS_TOP_K", "5")
    clean_env.setenv("ANALYTICS_WORKERS", "2")
    clean_env.setenv("ANALYTICS_QUERY_TIMEOUT", "0")
    clean_env.setenv("LOG_LEVEL", "debug")

    config = AnalyticsConfig.from_env()
    assert config.corpus_url == "https://example.org/corpus.json"
    assert config.cache_size == 8
    assert config.top_k == 5
    assert config.workers == 2
    assert config.query_timeout is None
    assert config.log_level == "DEBUG"


def test_empty_values_fall_back(clean_env):
    clean_env.setenv("ANALYTICS_CACHE_SIZE", "")
    clean_env.setenv("QURAN_CORPUS_URL", "")
    config = AnalyticsConfig.from_env()
    assert config.cache_size == 256
    assert config.corpus_url is None


def test_validate_accepts_sample_corpus():
    validate_config(AnalyticsConfig(corpus_path=str(SAMPLE_CORPUS)))


@pytest.mark.parametrize("overrides", [{"cache_size": 0}, {"top_k": -1}, {"workers": 0}])
def test_validate_rejects_bad_numbers(overrides):
    with pytest.raises(ValueError):
        validate_config(AnalyticsConfig(corpus_path=str(SAMPLE_CORPUS), **overrides))


def test_validate_missing_corpus(tmp_path):
    with pytest.raises(FileNotFoundError):
        validate_config(AnalyticsConfig(corpus_path=str(tmp_path / "missing.json")))
    validate_config(AnalyticsConfig(corpus_path=None, corpus_url="https://example.org/corpus.json"))


def test_validate_rejects_unknown_log_level():
    with pytest.raises(ValueError):
        validate_config(AnalyticsConfig(corpus_path=str(SAMPLE_CORPUS), log_level="LOUD"))
    validate_config(AnalyticsConfig(corpus_path=str(SAMPLE_CORPUS), log_level="DEBUG"))


def test_non_numeric_env_names_the_variable(clean_env):
    clean_env.setenv("ANALYTICS_WORKERS", "four")
    with pytest.raises(ValueError, match="ANALYTICS_WORKERS"):
        AnalyticsConfig.from_env()


@pytest.mark.parametrize("timeout,expected", [(None, None), (0, None), (-5, None), (2.5, 2.5)])
def test_timeout_seconds(timeout, expected):
    assert AnalyticsConfig(query_timeout=timeout).timeout_seconds == expected
