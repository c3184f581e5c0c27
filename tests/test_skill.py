"""
Tests for the Skill entity and row mapping.
"""

from datetime import datetime

from mentorapp.skill import Skill, parse_timestamp


class TestFromRow:
    """Every read path builds Skills through from_row."""

    def test_datetime_passthrough(self):
        added = datetime(2024, 3, 1, 9, 30)
        skill = Skill.from_row({"id": "0123456789", "name": "Go", "authorized": 1, "added": added})

        assert skill == Skill(id="0123456789", name="Go", authorized=True, added=added)

    def test_string_timestamp_parsed(self):
        skill = Skill.from_row(
            {"id": "0123456789", "name": "Go", "authorized": 0, "added": "2024-03-01 09:30:00"}
        )

        assert skill.added == datetime(2024, 3, 1, 9, 30)
        assert skill.authorized is False

    def test_string_flag_coerced(self):
        skill = Skill.from_row({"id": "0123456789", "name": "Go", "authorized": "1", "added": None})
        assert skill.authorized is True
        assert skill.added is None


class TestToRow:
    def test_authorized_stored_as_int(self):
        row = Skill(id="0123456789", name="Go", authorized=True).to_row()
        assert row["authorized"] == 1

        row = Skill(id="0123456789", name="Go").to_row()
        assert row["authorized"] == 0


def test_parse_timestamp_iso_t_separator():
    assert parse_timestamp("2024-03-01T09:30:00") == datetime(2024, 3, 1, 9, 30)
