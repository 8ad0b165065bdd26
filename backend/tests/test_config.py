import logging
from datetime import datetime, timedelta

from goodfeed.config import DEFAULT_SOURCES, Settings, configured_sources, http_headers
from goodfeed.logging_config import cleanup_old_logs, setup_logging
from goodfeed.models import Category


def test_default_sources_are_enabled_with_unique_ids():
    ids = [s.id for s in DEFAULT_SOURCES]

    assert len(ids) == len(set(ids)) == 7
    assert all(s.enabled for s in DEFAULT_SOURCES)
    assert DEFAULT_SOURCES[0].id == "good-news-network"


def test_disabled_sources_are_dropped_case_insensitively():
    settings = Settings(_env_file=None, DISABLED_SOURCES=["upworthy", " Sunny Skyz "])

    names = [s.name for s in configured_sources(settings)]

    assert "Upworthy" not in names
    assert "Sunny Skyz" not in names
    assert len(names) == 5


def test_http_headers_carry_user_agent():
    settings = Settings(_env_file=None, USER_AGENT="goodfeed-test")

    assert http_headers(settings)["User-Agent"] == "goodfeed-test"


def test_category_from_value_falls_back():
    assert Category.from_value("environment") is Category.ENVIRONMENT
    assert Category.from_value("nonsense") is Category.GOOD_NEWS
    assert Category.from_value(None, Category.ARTS_CULTURE) is Category.ARTS_CULTURE


def test_cleanup_old_logs_keeps_recent_and_foreign_files(tmp_path):
    old = tmp_path / f"{(datetime.now() - timedelta(days=40)):%Y-%m-%d}.log"
    recent = tmp_path / f"{(datetime.now() - timedelta(days=2)):%Y-%m-%d}.log"
    foreign = tmp_path / "notes.log"
    for path in (old, recent, foreign):
        path.write_text("x")

    cleanup_old_logs(tmp_path, retention_days=30)

    assert not old.exists()
    assert recent.exists()
    assert foreign.exists()


def test_setup_logging_adds_file_handler(tmp_path):
    root = logging.getLogger()
    saved = root.handlers[:], root.level
    try:
        setup_logging(level="WARNING", log_dir=tmp_path / "logs")

        assert len(root.handlers) == 2
        assert root.handlers[0].level == logging.WARNING
        assert (tmp_path / "logs").is_dir()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])
