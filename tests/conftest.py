# File: tests/conftest.py
import json
from pathlib import Path
from typing import Any, Dict, List

import pytest

from favicon_stats.logger import configure


@pytest.fixture(autouse=True)
def reset_logger():
    """
    CliRunner swaps sys.stdout; re-bind the logger to the real stream after each test.
    """
    yield
    configure(level="WARNING")


@pytest.fixture()
def raw_records() -> List[Dict[str, Any]]:
    """
    A small crawl result set covering every normalization path.
    """
    return [
        {
            "url": "http://ex.com/a",
            "favicon": "/favicon.ico",
            "date": {"value": "2024-05-01"},
            "status": "downloaded",
            "httpStatus": 200,
        },
        {
            "url": "https://www.ex.com/b",
            "favicon": "icons/fav.png",
            "date": {"value": "2024-05-02"},
            "status": "downloaded",
            "httpStatus": 200,
        },
        {
            "url": "https://other.org/",
            "favicon": "//cdn.other.org/icon.svg",
            "date": "2024-05-03",
            "status": "skipped_recent",
        },
        {
            "url": "https://broken.net/",
            "date": {"value": "2024-05-04"},
            "status": "failed",
        },
        {
            "url": "not a url",
            "favicon": "/favicon.ico",
            "date": {"value": "2024-05-05"},
            "status": "error",
            "httpStatus": 500,
        },
    ]


@pytest.fixture()
def icons_dir(tmp_path) -> Path:
    """
    Icon store with sizes in different buckets.
    """
    root = tmp_path / "icons"
    root.mkdir()
    (root / "ex.com.png").write_bytes(b"\0" * 2048)
    (root / "other.org.png").write_bytes(b"\0" * 600)
    return root


@pytest.fixture()
def records_file(tmp_path, raw_records) -> Path:
    """
    Write raw_records to a JSON file.
    """
    path = tmp_path / "favicons.json"
    path.write_text(json.dumps(raw_records), encoding="utf-8")
    return path
