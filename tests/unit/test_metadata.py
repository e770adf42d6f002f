"""
Unit tests for metadata projection.
"""

import pytest

from sync_trigger.core.models import METADATA_KEYS
from sync_trigger.sync.metadata import project_metadata


class TestProjectMetadata:
    """Tests for project_metadata."""

    def test_none_gives_all_placeholders(self):
        assert project_metadata(None) == {
            "oihUid": "oihUid not set yet",
            "recordUid": "recordUid not set yet",
            "applicationUid": "applicationUid not set yet",
        }

    def test_empty_gives_all_placeholders(self):
        assert project_metadata({}) == project_metadata(None)

    def test_partial_metadata(self):
        result = project_metadata({"oihUid": "x"})

        assert result["oihUid"] == "x"
        assert result["recordUid"] == "recordUid not set yet"
        assert result["applicationUid"] == "applicationUid not set yet"

    def test_key_order_is_fixed(self):
        result = project_metadata({"applicationUid": "a", "oihUid": "o", "recordUid": "r"})
        assert tuple(result) == METADATA_KEYS

    def test_extra_keys_are_dropped(self):
        result = project_metadata({"oihUid": "o", "other": 1})
        assert set(result) == set(METADATA_KEYS)

    def test_falsy_values_are_kept(self):
        result = project_metadata({"recordUid": 0, "applicationUid": ""})
        assert result["recordUid"] == 0
        assert result["applicationUid"] == ""

    def test_input_not_mutated(self):
        metadata = {"oihUid": "x"}
        project_metadata(metadata)
        assert metadata == {"oihUid": "x"}

    def test_present_none_is_kept(self):
        result = project_metadata({"oihUid": None})

        assert result["oihUid"] is None
        assert result["recordUid"] == "recordUid not set yet"

    @pytest.mark.parametrize("metadata", ["x", 42, ["oihUid"], True])
    def test_non_mapping_gives_all_placeholders(self, metadata):
        assert project_metadata(metadata) == project_metadata(None)
