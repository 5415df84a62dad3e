"""Unit tests for sos_api.core.security: bcrypt hashing and verification."""

import unittest

from sos_api.core.security import BCRYPT_ROUNDS, hash_password, verify_password


class TestPasswordHashing(unittest.TestCase):
    def test_hash_is_salted_and_not_plaintext(self) -> None:
        first = hash_password("abcdef")
        second = hash_password("abcdef")
        self.assertNotEqual(first, "abcdef")
        self.assertNotEqual(first, second)

    def test_cost_factor(self) -> None:
        self.assertEqual(BCRYPT_ROUNDS, 10)
        self.assertTrue(hash_password("abcdef").startswith("$2b$10$"))

    def test_verify(self) -> None:
        hashed = hash_password("s3cret-pass")
        self.assertTrue(verify_password("s3cret-pass", hashed))
        self.assertFalse(verify_password("wrong-pass", hashed))

    def test_verify_garbage_hash_is_false(self) -> None:
        self.assertFalse(verify_password("abcdef", "not-a-bcrypt-hash"))


if __name__ == "__main__":
    unittest.main()
