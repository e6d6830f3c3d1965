from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone

from kmipexplorer.directory_model.rows import (
    STYLE_ACTIVE,
    STYLE_DEFAULT,
    STYLE_DESTROYED_COMPROMISED,
    DirectoryRow,
    format_age,
    project_row,
    row_matches,
    state_style,
)
from kmipexplorer.kmip.types import Attribute, AttributeSet, AttributeValue

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _obj(uid: str, *attributes: Attribute) -> AttributeSet:
    return AttributeSet(uid=uid, attributes=attributes)


class FormatAgeTests(unittest.TestCase):
    def test_buckets(self) -> None:
        self.assertEqual(format_age(timedelta(seconds=0)), "<1m")
        self.assertEqual(format_age(timedelta(seconds=59)), "<1m")
        self.assertEqual(format_age(timedelta(seconds=60)), "1m")
        self.assertEqual(format_age(timedelta(minutes=59, seconds=59)), "59m")
        self.assertEqual(format_age(timedelta(hours=1)), "1h0m")
        self.assertEqual(format_age(timedelta(hours=23, minutes=59)), "23h59m")
        self.assertEqual(format_age(timedelta(days=1)), "1d")
        self.assertEqual(format_age(timedelta(days=400, hours=5)), "400d")

    def test_negative_age_from_clock_skew_counts_as_fresh(self) -> None:
        self.assertEqual(format_age(timedelta(seconds=-30)), "<1m")


class StateStyleTests(unittest.TestCase):
    def test_known_states_map_to_styles(self) -> None:
        self.assertEqual(state_style("Active"), STYLE_ACTIVE)
        self.assertEqual(state_style("DestroyedCompromised"), STYLE_DESTROYED_COMPROMISED)

    def test_pre_active_and_unknown_use_default(self) -> None:
        self.assertEqual(state_style("PreActive"), STYLE_DEFAULT)
        self.assertEqual(state_style("Whatever"), STYLE_DEFAULT)
        self.assertEqual(state_style(""), STYLE_DEFAULT)


class ProjectRowTests(unittest.TestCase):
    def test_projects_every_column(self) -> None:
        obj = _obj(
            "k1",
            Attribute("Object Type", AttributeValue.enum("SymmetricKey")),
            Attribute("Name", AttributeValue.name("payments")),
            Attribute("Cryptographic Algorithm", AttributeValue.enum("AES")),
            Attribute("Cryptographic Length", AttributeValue.integer(256)),
            Attribute("State", AttributeValue.enum("Active")),
            Attribute("Initial Date", AttributeValue.timestamp(NOW - timedelta(hours=2, minutes=5))),
        )

        row = project_row(obj, NOW)

        self.assertEqual(
            row,
            DirectoryRow(
                uid="k1",
                object_type="SymmetricKey",
                name="payments",
                algorithm="AES",
                size="256",
                state="Active",
                age="2h5m",
                style=STYLE_ACTIVE,
            ),
        )

    def test_missing_attributes_leave_empty_cells(self) -> None:
        row = project_row(_obj("bare"), NOW)

        self.assertEqual(row.columns(), ("bare", "", "", "", "", "", ""))
        self.assertEqual(row.style, STYLE_DEFAULT)

    def test_indexed_entries_other_than_zero_are_ignored(self) -> None:
        obj = _obj(
            "k2",
            Attribute("Name", AttributeValue.name("first"), index=0),
            Attribute("Name", AttributeValue.name("second"), index=1),
        )

        self.assertEqual(project_row(obj, NOW).name, "first")

    def test_later_entry_overrides_earlier(self) -> None:
        obj = _obj(
            "k3",
            Attribute("State", AttributeValue.enum("PreActive")),
            Attribute("State", AttributeValue.enum("Active")),
        )

        row = project_row(obj, NOW)

        self.assertEqual(row.state, "Active")
        self.assertEqual(row.style, STYLE_ACTIVE)

    def test_mismatched_value_kind_is_skipped(self) -> None:
        obj = _obj("k4", Attribute("Cryptographic Length", AttributeValue.text("lots")))

        self.assertEqual(project_row(obj, NOW).size, "")

    def test_plain_text_name_is_accepted(self) -> None:
        obj = _obj("k5", Attribute("Name", AttributeValue.text("legacy")))

        self.assertEqual(project_row(obj, NOW).name, "legacy")


class RowMatchesTests(unittest.TestCase):
    def test_matches_case_insensitively_across_columns(self) -> None:
        row = DirectoryRow(uid="abc-1", object_type="PrivateKey", name="Signer", algorithm="RSA", state="Active")

        self.assertTrue(row_matches(row, "signer"))
        self.assertTrue(row_matches(row, "privatekey"))
        self.assertTrue(row_matches(row, "rsa"))
        self.assertTrue(row_matches(row, "ABC"))
        self.assertFalse(row_matches(row, "aes"))

    def test_blank_query_matches_everything(self) -> None:
        self.assertTrue(row_matches(DirectoryRow(uid="x"), "   "))


if __name__ == "__main__":
    unittest.main()
