from unittest import TestCase

from tradestial.config import TAGS_KEY
from tradestial.storage import MemoryStore
from tradestial.tags import TagCatalog


class TagCatalogTests(TestCase):
    def test_defaults(self):
        catalog = TagCatalog()
        self.assertEqual([c.id for c in catalog.get_categories()], ["mistakes", "custom", "reviewed"])
        self.assertEqual(catalog.get_tags("reviewed"), ["Reviewed", "Not Reviewed"])
        self.assertEqual(catalog.get_tags("unknown"), [])

    def test_defaults_are_not_shared(self):
        TagCatalog().add_tag("custom", "scalp")
        self.assertEqual(TagCatalog().get_tags("custom"), [])

    def test_add_category_uses_hyphenated_id_and_is_idempotent(self):
        catalog = TagCatalog()
        cat = catalog.add_category("Market Conditions", "#f59e0b")
        self.assertEqual(cat.id, "market-conditions")
        again = catalog.add_category("Market Conditions", "#000000")
        self.assertEqual(again.color, "#f59e0b")
        self.assertEqual(catalog.get_tags("market-conditions"), [])

    def test_tag_and_category_edits_notify(self):
        catalog = TagCatalog()
        calls = []
        unsubscribe = catalog.subscribe(lambda: calls.append(1))
        catalog.add_tag("mistakes", "late entry")
        catalog.add_tag("mistakes", "late entry")
        catalog.remove_tag("mistakes", "late entry")
        catalog.update_category("mistakes", name="Errors")
        catalog.update_category("nope", name="x")
        catalog.remove_category("custom")
        unsubscribe()
        catalog.add_tag("mistakes", "fomo")
        self.assertEqual(len(calls), 4)
        self.assertEqual(catalog.get_category("mistakes").name, "Errors")
        self.assertIsNone(catalog.get_category("custom"))
        self.assertNotIn("custom", catalog.get_all_tags())

    def test_persists_through_store(self):
        store = MemoryStore()
        TagCatalog(store).add_tag("custom", "A+ setup")
        self.assertEqual(TagCatalog(store).get_tags("custom"), ["A+ setup"])

    def test_unreadable_payload_falls_back_to_defaults(self):
        store = MemoryStore({TAGS_KEY: {"categories": "broken"}})
        with self.assertLogs("tradestial.tags", level="WARNING"):
            catalog = TagCatalog(store)
        self.assertEqual(len(catalog.get_categories()), 3)
