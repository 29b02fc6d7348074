import unittest
from dataclasses import dataclass

from utils.pure import (
    ALL_CATEGORIES,
    category_options,
    distinct_categories,
    filter_by_category,
    format_money,
    format_timestamp,
    generate_markdown_table,
    short_id,
)


@dataclass
class Item:
    name: str
    category: str


class MarkdownTableTestCase(unittest.TestCase):
    def test_headers_and_alignment(self):
        table = generate_markdown_table(["Field", "Value"], [["Email", "a@b.c"]], ["l", "r"])
        self.assertEqual(
            table.splitlines(),
            ["| Field | Value |", "| :--- | ---: |", "| Email | a@b.c |"],
        )

    def test_first_row_as_header_and_escaping(self):
        table = generate_markdown_table(None, [["A"], ["x|y\nz"]])
        self.assertEqual(table.splitlines()[-1], "| x\\|y z |")

    def test_empty_and_mismatched(self):
        self.assertEqual(generate_markdown_table(["A"], []), "")
        with self.assertRaises(ValueError):
            generate_markdown_table(["A", "B"], [["1", "2"]], ["l"])


class CategoryTestCase(unittest.TestCase):
    items = [Item("a", "Perfumes"), Item("b", "Makeup"), Item("c", "Perfumes")]

    def test_options_in_first_seen_order(self):
        self.assertEqual(
            category_options(i.category for i in self.items),
            [(ALL_CATEGORIES, None), ("Perfumes", "Perfumes"), ("Makeup", "Makeup")],
        )
        self.assertEqual(category_options([]), [(ALL_CATEGORIES, None)])
        self.assertEqual(distinct_categories(i.category for i in self.items), ["Perfumes", "Makeup"])

    def test_filter(self):
        self.assertEqual(filter_by_category(self.items, None), self.items)
        self.assertEqual(
            [i.name for i in filter_by_category(self.items, "Perfumes")], ["a", "c"]
        )
        # exact, case-sensitive match
        self.assertEqual(filter_by_category(self.items, "perfumes"), [])

    def test_category_named_all_is_its_own_option(self):
        items = [*self.items, Item("d", "All")]
        options = category_options(i.category for i in items)
        self.assertEqual(options[0], (ALL_CATEGORIES, None))
        self.assertIn(("All", "All"), options[1:])
        self.assertEqual([i.name for i in filter_by_category(items, "All")], ["d"])
        self.assertEqual(len(filter_by_category(items, None)), 4)


class FormattingTestCase(unittest.TestCase):
    def test_formatting(self):
        self.assertEqual(short_id("20000000-0000-4000"), "20000000")
        self.assertEqual(short_id(None), "")
        self.assertEqual(format_money(5), "$5.00")
        self.assertEqual(format_money(49.9, "£"), "£49.90")
        self.assertEqual(format_timestamp("2025-10-10T12:00:00.000000+00:00"), "2025-10-10 12:00")
        self.assertEqual(format_timestamp(None), "-")


if __name__ == "__main__":
    unittest.main()
