from __future__ import annotations

import unittest

from app.domain.dataset import ColumnProfile, ColumnType
from app.mappers.field_mapper import FieldMapper


def _profile(name: str, column_type: ColumnType) -> ColumnProfile:
    return ColumnProfile(name=name, inferred_type=column_type)


class TestFieldMapper(unittest.TestCase):
    def setUp(self) -> None:
        self.mapper = FieldMapper()

    def test_maps_keyword_columns(self) -> None:
        profiles = [
            _profile("Order Date", ColumnType.DATE),
            _profile("Revenue", ColumnType.NUMBER),
            _profile("Sales Region", ColumnType.STRING),
            _profile("Item", ColumnType.STRING),
            _profile("Group", ColumnType.STRING),
        ]

        mapping = self.mapper.resolve(profiles)

        self.assertEqual(
            mapping.role_to_source(),
            {
                "date": "Order Date",
                "sales": "Revenue",
                "region": "Sales Region",
                "product": "Item",
                "category": "Group",
            },
        )
        self.assertEqual(mapping.unmapped_roles(), ())

    def test_date_detected_by_type_without_keyword(self) -> None:
        mapping = self.mapper.resolve([_profile("Day", ColumnType.DATE)])

        self.assertEqual(mapping.date, "Day")
        self.assertEqual(mapping.match_strategies["date"], "type")

    def test_date_picks_first_column_satisfying_either_condition(self) -> None:
        profiles = [
            _profile("Timestamp", ColumnType.STRING),
            _profile("Created", ColumnType.DATE),
        ]

        mapping = self.mapper.resolve(profiles)

        self.assertEqual(mapping.date, "Timestamp")
        self.assertEqual(mapping.match_strategies["date"], "keyword")

    def test_sales_keyword_requires_number_type(self) -> None:
        profiles = [
            _profile("Sales Rep", ColumnType.STRING),
            _profile("Units", ColumnType.NUMBER),
            _profile("Total Value", ColumnType.NUMBER),
        ]

        mapping = self.mapper.resolve(profiles)

        self.assertEqual(mapping.sales, "Total Value")
        self.assertEqual(mapping.sales_fallback, "Units")
        self.assertEqual(mapping.match_strategies["sales"], "keyword")

    def test_sales_falls_back_to_first_number(self) -> None:
        profiles = [
            _profile("Label", ColumnType.STRING),
            _profile("Units", ColumnType.NUMBER),
            _profile("Cost", ColumnType.NUMBER),
        ]

        mapping = self.mapper.resolve(profiles)

        self.assertEqual(mapping.sales, "Units")
        self.assertEqual(mapping.match_strategies["sales"], "first_number")

    def test_no_numeric_columns_leaves_sales_unmapped(self) -> None:
        mapping = self.mapper.resolve([_profile("Region", ColumnType.STRING)])

        self.assertIsNone(mapping.sales)
        self.assertIsNone(mapping.sales_fallback)
        self.assertEqual(mapping.match_strategies["sales"], "fallback")
        self.assertIn("sales", mapping.unmapped_roles())

    def test_one_column_may_satisfy_two_roles(self) -> None:
        mapping = self.mapper.resolve([_profile("Product Type", ColumnType.STRING)])

        self.assertEqual(mapping.product, "Product Type")
        self.assertEqual(mapping.category, "Product Type")

    def test_matching_is_case_insensitive(self) -> None:
        mapping = self.mapper.resolve([_profile("LOCATION", ColumnType.STRING)])

        self.assertEqual(mapping.region, "LOCATION")

    def test_no_profiles_maps_nothing(self) -> None:
        mapping = self.mapper.resolve([])

        self.assertEqual(
            mapping.unmapped_roles(),
            ("date", "sales", "region", "product", "category"),
        )

    def test_custom_keywords_override_defaults(self) -> None:
        mapper = FieldMapper(keywords={"region": ("territory",)})

        mapping = mapper.resolve(
            [_profile("Region", ColumnType.STRING), _profile("Territory", ColumnType.STRING)]
        )

        self.assertEqual(mapping.region, "Territory")


if __name__ == "__main__":
    unittest.main()
