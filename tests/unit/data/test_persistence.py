"""
Unit tests for JSON document persistence.
"""
import json
import os
import stat
from unittest.mock import patch

import pytest

from market_pulse.data.persistence import atomic_write_json, read_json


@pytest.mark.unit
class TestAtomicWrite:
    """Test atomic replacement of dashboard documents."""

    def test_write_and_read(self, tmp_path):
        target = tmp_path / "public" / "data.json"

        path = atomic_write_json(target, {"story": "Le marché a peur", "score": 7})

        assert path == target
        assert read_json(target) == {"story": "Le marché a peur", "score": 7}
        assert "Le marché a peur" in target.read_text(encoding="utf-8")

    def test_replaces_previous_document(self, tmp_path):
        target = tmp_path / "data.json"
        atomic_write_json(target, {"version": 1})

        atomic_write_json(target, {"version": 2})

        assert json.loads(target.read_text()) == {"version": 2}
        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]

    @pytest.mark.parametrize("umask,expected", [(0o022, 0o644), (0o077, 0o600)])
    def test_mode_follows_umask(self, tmp_path, umask, expected):
        target = tmp_path / "data.json"
        previous = os.umask(umask)
        try:
            atomic_write_json(target, {"version": 1})
        finally:
            os.umask(previous)

        assert stat.S_IMODE(target.stat().st_mode) == expected

    def test_failed_serialization_keeps_old_file(self, tmp_path):
        target = tmp_path / "data.json"
        atomic_write_json(target, {"version": 1})

        with pytest.raises(TypeError):
            atomic_write_json(target, {"version": object()})

        assert read_json(target) == {"version": 1}
        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]

    def test_failed_replace_removes_temp_file(self, tmp_path):
        target = tmp_path / "data.json"

        with patch("market_pulse.data.persistence.os.replace", side_effect=OSError("read-only")):
            with pytest.raises(OSError):
                atomic_write_json(target, {"version": 1})

        assert list(tmp_path.iterdir()) == []


@pytest.mark.unit
class TestReadJson:
    """Test tolerant document reads."""

    def test_missing(self, tmp_path):
        assert read_json(tmp_path / "missing.json") is None

    def test_corrupt(self, tmp_path):
        target = tmp_path / "data.json"
        target.write_text("{truncated")

        assert read_json(target) is None
