import unittest

from posthub.core.errors import NotFoundError
from posthub.core.queries import find_first, get_or_raise, get_resource_or_raise
from posthub.db.store import MemoryTable, Post


class TestGetOrRaise(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self):
        self.posts = MemoryTable()
        for title in ("first", "second", "third"):
            await self.posts.add(Post(title=title, body=f"{title} body", created_at=0.0))

    async def test_returns_matching_entity(self):
        post = await get_or_raise(self.posts, lambda p: p.id == 2, "Post not found!")
        self.assertEqual(post.title, "second")

    async def test_missing_entity_uses_literal_message(self):
        with self.assertRaises(NotFoundError) as ctx:
            await get_or_raise(self.posts, lambda p: p.id == 999, "Post not found!")
        self.assertEqual(ctx.exception.message, "Post not found!")
        self.assertIsNone(ctx.exception.additional_data)

    async def test_missing_entity_resource_form(self):
        with self.assertRaises(NotFoundError) as ctx:
            await get_resource_or_raise(self.posts, lambda p: p.id == 999, "Post", 999)
        self.assertEqual(ctx.exception.message, "Post with ID 999 not found")
        self.assertEqual(ctx.exception.additional_data, {"ResourceType": "Post", "Id": 999})

    async def test_resource_form_returns_entity(self):
        post = await get_resource_or_raise(self.posts, lambda p: p.id == 1, "Post", 1)
        self.assertEqual(post.id, 1)

    async def test_complex_predicate(self):
        post = await get_or_raise(
            self.posts, lambda p: p.title.startswith("th") and p.body.endswith("body"), "nope"
        )
        self.assertEqual(post.title, "third")

    async def test_multiple_matches_returns_one_of_them(self):
        post = await get_or_raise(self.posts, lambda p: p.body.endswith("body"), "nope")
        self.assertIn(post.title, {"first", "second", "third"})


class TestPlainIterableSource(unittest.IsolatedAsyncioTestCase):
    async def test_list_source(self):
        items = [Post(title="a", body="b", created_at=0.0, id=7)]
        found = await get_or_raise(items, lambda p: p.id == 7, "missing")
        self.assertIs(found, items[0])

    async def test_empty_list_raises(self):
        with self.assertRaises(NotFoundError):
            await get_resource_or_raise([], lambda p: True, "Comment", 5)

    async def test_find_first_none(self):
        self.assertIsNone(await find_first([1, 2, 3], lambda n: n > 10))


if __name__ == "__main__":
    unittest.main()
