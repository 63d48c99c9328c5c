from __future__ import annotations

import logging

import pytest

from appcache.runtime import BUILD_JOBS_ENV, get_build_jobs


def test_build_jobs_default_to_one(monkeypatch) -> None:
    monkeypatch.delenv(BUILD_JOBS_ENV, raising=False)

    assert get_build_jobs() == 1


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(" 4 ", 4), ("64", 64), ("500", 64)],
)
def test_build_jobs_read_from_environment(
    monkeypatch, raw: str, expected: int
) -> None:
    monkeypatch.setenv(BUILD_JOBS_ENV, raw)

    assert get_build_jobs() == expected


@pytest.mark.parametrize("raw", ["0", "-2", "two", "1.5", "²"])
def test_invalid_build_jobs_fall_back_with_a_warning(
    monkeypatch, caplog, raw: str
) -> None:
    monkeypatch.setenv(BUILD_JOBS_ENV, raw)

    with caplog.at_level(logging.WARNING, logger="appcache.runtime"):
        assert get_build_jobs() == 1

    assert BUILD_JOBS_ENV in caplog.text
