# tests/unit/logging/test_unit_handlers.py — v1
"""Tests for logging/handlers.py — file rotation handler."""

from __future__ import annotations

import pytest

from favicache.logging.handlers import create_rotating_handler, parse_size


class TestParseSize:
    def test_mb(self):
        assert parse_size("10MB") == 10 * 1024 * 1024

    def test_kb_with_space(self):
        assert parse_size("512 KB") == 512 * 1024

    def test_bare_bytes(self):
        assert parse_size("4096") == 4096

    def test_case_insensitive(self):
        assert parse_size("1gb") == 1024**3

    def test_invalid_format(self):
        with pytest.raises(ValueError, match="Invalid size"):
            parse_size("10bytes")

    def test_zero_rejected(self):
        with pytest.raises(ValueError, match="positive"):
            parse_size("0MB")


class TestCreateRotatingHandler:
    def test_creates_handler(self, tmp_path):
        handler = create_rotating_handler(tmp_path / "test.log", rotation="1MB", retention=3)
        try:
            assert handler.maxBytes == 1024 * 1024
            assert handler.backupCount == 3
        finally:
            handler.close()

    def test_creates_parent_dirs(self, tmp_path):
        log_file = tmp_path / "nested" / "dir" / "test.log"
        handler = create_rotating_handler(log_file)
        try:
            assert log_file.parent.is_dir()
        finally:
            handler.close()
