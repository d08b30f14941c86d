from __future__ import annotations

import unittest

from binsnap.core.sizes import U64_MAX, parse_size


class SizeParsingTests(unittest.TestCase):
    def test_plain_digits_are_bytes(self) -> None:
        self.assertEqual(parse_size("0"), 0)
        self.assertEqual(parse_size("4096"), 4096)

    def test_unit_suffixes_are_binary_and_case_insensitive(self) -> None:
        for suffix, mult in (("k", 1024), ("K", 1024), ("m", 1024**2), ("M", 1024**2), ("g", 1024**3), ("G", 1024**3)):
            with self.subTest(suffix=suffix):
                self.assertEqual(parse_size(f"7{suffix}"), 7 * mult)

    def test_rejects_non_numeric_and_empty(self) -> None:
        for bad in ("", "k", "abc", "12x", "1.5k", "-4", " 12", "12 ", "1kb", "0x10"):
            with self.subTest(bad=bad):
                with self.assertRaises(ValueError):
                    parse_size(bad)

    def test_overflow_fails_instead_of_wrapping(self) -> None:
        self.assertEqual(parse_size(str(U64_MAX)), U64_MAX)
        self.assertEqual(parse_size(f"{U64_MAX // 1024**3}g"), (U64_MAX // 1024**3) * 1024**3)
        with self.assertRaises(ValueError):
            parse_size(str(U64_MAX + 1))
        with self.assertRaises(ValueError):
            parse_size(f"{U64_MAX // 1024 + 1}k")
        with self.assertRaises(ValueError):
            parse_size(f"{U64_MAX}G")


if __name__ == "__main__":
    unittest.main()
