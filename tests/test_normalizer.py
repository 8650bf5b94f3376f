# File: tests/test_normalizer.py
"""Тесты нормализации записей: разрешение favicon, развёртка даты, классификация ошибок."""
import copy

import pytest

from favicon_stats.models import MISSING_FIELDS_ERROR
from favicon_stats.normalizer import flatten_date, normalize, normalize_all


def test_relative_favicon_resolved():
    raw = {"url": "http://ex.com/a", "favicon": "/favicon.ico", "status": "downloaded"}
    rec = normalize(raw)
    assert rec["favicon"] == "http://ex.com/favicon.ico"
    assert "error" not in rec
    assert rec["status"] == "downloaded"


@pytest.mark.parametrize(
    "raw",
    [
        {"url": "http://ex.com/", "date": {"value": "2024-01-01"}},
        {"favicon": "/favicon.ico", "date": {"value": "2024-01-01"}},
        {"url": "", "favicon": "/favicon.ico", "date": {"value": "2024-01-01"}},
        {"url": "http://ex.com/", "favicon": None, "date": {"value": "2024-01-01"}},
    ],
)
def test_missing_fields(raw):
    rec = normalize(raw)
    assert rec["error"] == MISSING_FIELDS_ERROR
    assert rec["date"] == "2024-01-01"
    assert rec.get("favicon") == raw.get("favicon")


def test_invalid_url_keeps_original_favicon():
    raw = {"url": "not a url", "favicon": "/favicon.ico", "date": {"value": "d"}}
    rec = normalize(raw)
    assert rec["error"].startswith("Invalid URL: ")
    assert rec["favicon"] == "/favicon.ico"
    assert rec["date"] == "d"


def test_existing_error_passes_through():
    raw = {
        "url": "http://ex.com/",
        "favicon": "/f.png",
        "status": "failed",
        "error": "HTTP 404",
        "date": {"value": "d"},
    }
    rec = normalize(raw)
    assert rec["error"] == "HTTP 404"
    assert rec["favicon"] == "http://ex.com/f.png"


def test_keep_error_preserves_downloader_error():
    raw = {"url": "http://ex.com/", "favicon": None, "status": "failed", "error": "HTTP 404 Not Found"}
    assert normalize(raw, keep_error=True)["error"] == "HTTP 404 Not Found"
    assert normalize(raw)["error"] == MISSING_FIELDS_ERROR

    bad = {"url": "not a url", "favicon": "/f.ico", "error": "timeout"}
    assert normalize(bad, keep_error=True)["error"] == "timeout"
    assert normalize_all([bad], keep_error=True)[0]["error"] == "timeout"


def test_keep_error_still_classifies_clean_records():
    raw = {"url": "http://ex.com/"}
    assert normalize(raw, keep_error=True)["error"] == MISSING_FIELDS_ERROR


def test_input_not_mutated_and_extra_keys_kept():
    raw = {"url": "http://ex.com/", "favicon": "f.ico", "date": {"value": "d"}, "extra": [1]}
    snapshot = copy.deepcopy(raw)
    rec = normalize(raw)
    assert raw == snapshot
    assert rec["extra"] == [1]
    assert rec is not raw


@pytest.mark.parametrize(
    "value,expected",
    [({"value": "2024-01-01"}, "2024-01-01"), ("2024-01-01", "2024-01-01"), (None, None), ({}, None)],
)
def test_flatten_date(value, expected):
    assert flatten_date(value) == expected


def test_normalize_twice_is_stable():
    once = normalize({"url": "https://Ex.com/a/b", "favicon": "../i.png", "date": {"value": "d"}})
    twice = normalize(once)
    assert twice == once


def test_normalize_all_one_output_per_input(raw_records):
    out = normalize_all(raw_records)
    assert len(out) == len(raw_records)
    assert [r.get("url") for r in out] == [r.get("url") for r in raw_records]
    assert out[3]["error"] == MISSING_FIELDS_ERROR
    assert out[4]["error"].startswith("Invalid URL: ")
    assert out[2]["favicon"] == "https://cdn.other.org/icon.svg"
    assert out[2]["date"] == "2024-05-03"
