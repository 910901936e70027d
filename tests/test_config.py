import unittest
import tempfile
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from reqfuzz.config import (
    RunConfig, HTTP_METHODS, validate_method, parse_header_flags, load_profile, resolve_config,
)
from reqfuzz.errors import ConfigError, InvalidMethod, WordlistError
from reqfuzz.wordlist import load_wordlist


def write_temp(content: str, suffix: str) -> str:
    fd, path = tempfile.mkstemp(suffix=suffix)
    with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
        f.write(content)
    return path


class TestHeaderFlags(unittest.TestCase):
    def test_well_formed(self):
        self.assertEqual(parse_header_flags(["Accept: application/json"]), [("Accept", "application/json")])

    def test_no_separator_is_skipped(self):
        self.assertEqual(parse_header_flags(["NoColonHere", "X-A: 1"]), [("X-A", "1")])

    def test_more_than_two_parts_is_skipped(self):
        self.assertEqual(parse_header_flags(["X-Time: 12: 30"]), [])

    def test_colon_without_space_is_skipped(self):
        self.assertEqual(parse_header_flags(["Host:example.com"]), [])

    def test_order_preserved(self):
        headers = parse_header_flags(["B: 2", "A: 1"])
        self.assertEqual([k for k, _ in headers], ["B", "A"])


class TestMethod(unittest.TestCase):
    def test_known_methods(self):
        for method in HTTP_METHODS:
            self.assertEqual(validate_method(method), method)

    def test_unknown_method(self):
        with self.assertRaises(InvalidMethod):
            validate_method("FETCH")

    def test_case_sensitive(self):
        with self.assertRaises(InvalidMethod):
            validate_method("get")


class TestProfile(unittest.TestCase):
    def setUp(self):
        self.paths = []

    def tearDown(self):
        for p in self.paths:
            os.remove(p)

    def _profile(self, content):
        path = write_temp(content, ".yaml")
        self.paths.append(path)
        return path

    def test_load_profile(self):
        path = self._profile("method: POST\nurl: http://t/\nheaders:\n  - 'A: 1'\nthreads: 4\n")
        data = load_profile(path)
        self.assertEqual(data["method"], "POST")
        self.assertEqual(data["headers"], ["A: 1"])
        self.assertEqual(data["threads"], 4)

    def test_unknown_key(self):
        with self.assertRaises(ConfigError):
            load_profile(self._profile("url: http://t/\nbogus: 1\n"))

    def test_not_a_mapping(self):
        with self.assertRaises(ConfigError):
            load_profile(self._profile("- a\n- b\n"))

    def test_invalid_yaml(self):
        with self.assertRaises(ConfigError):
            load_profile(self._profile("url: [unclosed\n"))

    def test_missing_file(self):
        with self.assertRaises(ConfigError):
            load_profile("/nonexistent/profile.yaml")

    def test_cli_wins_over_profile(self):
        profile = {"url": "http://profile/", "threads": 4, "method": "POST", "headers": ["A: 1"]}
        overrides = {"url": "http://cli/", "threads": None, "method": None, "headers": ["B: 2"], "debug": False}
        config = resolve_config(overrides, profile)
        self.assertEqual(config.url, "http://cli/")
        self.assertEqual(config.threads, 4)
        self.assertEqual(config.method, "POST")
        self.assertEqual(config.headers, ["A: 1", "B: 2"])

    def test_defaults(self):
        config = resolve_config({"url": "http://t/", "wordlist": "w.txt"})
        self.assertEqual(config, RunConfig(url="http://t/", wordlist="w.txt"))
        self.assertEqual(config.delimiter, "##")
        self.assertEqual(config.threads, 10)

    def test_bad_value_type(self):
        with self.assertRaises(ConfigError):
            resolve_config({"threads": "many"})

    def test_validate(self):
        for kwargs in [
            {"wordlist": "w"},
            {"url": "http://t/"},
            {"url": "http://t/", "wordlist": "w", "delimiter": ""},
            {"url": "http://t/", "wordlist": "w", "threads": 0},
            {"url": "http://t/", "wordlist": "w", "delay": -1},
        ]:
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(ConfigError):
                    RunConfig(**kwargs).validate()
        with self.assertRaises(InvalidMethod):
            RunConfig(url="http://t/", wordlist="w", method="BREW").validate()


class TestWordlist(unittest.TestCase):
    def test_lines_become_words(self):
        path = write_temp("alice\r\nbob\n\ncarol\n", ".txt")
        try:
            self.assertEqual(load_wordlist(path), ["alice", "bob", "", "carol"])
        finally:
            os.remove(path)

    def test_no_trailing_newline(self):
        path = write_temp("a\nb", ".txt")
        try:
            self.assertEqual(load_wordlist(path), ["a", "b"])
        finally:
            os.remove(path)

    def test_special_characters_kept(self):
        path = write_temp("a\x0cb\n' OR 1=1 --\n", ".txt")
        try:
            self.assertEqual(load_wordlist(path), ["a\x0cb", "' OR 1=1 --"])
        finally:
            os.remove(path)

    def test_empty_file(self):
        path = write_temp("", ".txt")
        try:
            self.assertEqual(load_wordlist(path), [])
        finally:
            os.remove(path)

    def test_unreadable(self):
        with self.assertRaises(WordlistError):
            load_wordlist("/nonexistent/words.txt")


if __name__ == '__main__':
    unittest.main()
