import unittest

from posthub.core.security import bearer_token, hash_password, new_token, verify_password


class TestPasswords(unittest.TestCase):
    def test_roundtrip(self):
        encoded = hash_password("hunter22", iterations=1000)
        self.assertTrue(encoded.startswith("pbkdf2_sha256$1000$"))
        self.assertTrue(verify_password("hunter22", encoded))
        self.assertFalse(verify_password("hunter23", encoded))

    def test_salted(self):
        self.assertNotEqual(
            hash_password("same", iterations=1000), hash_password("same", iterations=1000)
        )

    def test_malformed_hash(self):
        self.assertFalse(verify_password("x", "garbage"))
        self.assertFalse(verify_password("x", "md5$1$a$b"))


class TestTokens(unittest.TestCase):
    def test_new_token_unique(self):
        self.assertNotEqual(new_token(), new_token())

    def test_bearer_token(self):
        self.assertEqual(bearer_token("Bearer abc"), "abc")
        self.assertEqual(bearer_token("bearer  abc "), "abc")
        self.assertIsNone(bearer_token("Basic abc"))
        self.assertIsNone(bearer_token("Bearer"))
        self.assertIsNone(bearer_token(None))


if __name__ == "__main__":
    unittest.main()
