import random
import tempfile
import unittest
from pathlib import Path

from crossfill.core.exceptions import DictionaryCapacityError, DictionaryLoadError
from crossfill.data.dictionary import DictionaryConfig, WordDictionary, iter_records

SAMPLE = (
    "CAT\tfeline\n"
    "CAR\tvehicle\n"
    "COT\tbed\n"
    "DOG\tcanine\n"
    "DOGS\tcanines\n"
    "CROSSWORD\tpuzzle\n"
    "CROSSROAD\tjunction\n"
    "CROSSBOWS\tweapons\n"
)


class DictionaryTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmpdir = Path(self._tmp.name)

    def _write(self, content: bytes, name: str = "dict.txt") -> Path:
        path = self.tmpdir / name
        path.write_bytes(content)
        return path

    def _dictionary(self, content: str = SAMPLE, **overrides) -> WordDictionary:
        path = self._write(content.encode("ascii"))
        overrides.setdefault("rng", random.Random(7))
        return WordDictionary(DictionaryConfig(path=path, **overrides))

    def test_known_letters_filter_candidates(self) -> None:
        dictionary = self._dictionary()
        self.assertEqual(sorted(dictionary.find_matches("C?T")), ["CAT", "COT"])
        self.assertEqual(sorted(dictionary.find_matches("C??")), ["CAR", "CAT", "COT"])

    def test_unknown_middle_letter_excludes_other_endings(self) -> None:
        dictionary = self._dictionary("CAT\tfeline\nCAR\tvehicle\n")
        self.assertEqual(list(dictionary.find_matches("C?T")), ["CAT"])

    def test_every_word_matches_itself(self) -> None:
        dictionary = self._dictionary()
        for word_id in range(len(dictionary)):
            word = dictionary.word(word_id)
            self.assertIn(word_id, list(dictionary.find_matches(word).word_ids()))

    def test_all_unknown_pattern_returns_words_of_that_length(self) -> None:
        dictionary = self._dictionary()
        self.assertEqual(sorted(dictionary.find_matches("???")), ["CAR", "CAT", "COT", "DOG"])
        self.assertEqual(list(dictionary.find_matches("????")), ["DOGS"])
        self.assertEqual(len(dictionary.find_matches("?" * 9)), 3)
        self.assertEqual(dictionary.count(9), 3)

    def test_repeated_queries_are_stable(self) -> None:
        dictionary = self._dictionary()
        first = sorted(dictionary.find_matches("?O?"))
        dictionary.shuffle()
        second = sorted(dictionary.find_matches("?O?"))
        self.assertEqual(first, second)
        self.assertEqual(dictionary.cache_size, 1)

    def test_stricter_pattern_never_grows(self) -> None:
        dictionary = self._dictionary()
        pairs = [("???", "C??"), ("C??", "C?T"), ("?????????", "CROSS????"), ("CROSS????", "CROSS???D")]
        for loose, strict in pairs:
            self.assertLessEqual(set(dictionary.find_matches(strict)), set(dictionary.find_matches(loose)))

    def test_long_patterns_check_positions_past_six(self) -> None:
        dictionary = self._dictionary()
        self.assertEqual(list(dictionary.find_matches("CROSS?ORD")), ["CROSSWORD"])
        self.assertEqual(sorted(dictionary.find_matches("????????D")), ["CROSSROAD", "CROSSWORD"])
        self.assertEqual(len(dictionary.find_matches("?" * 30)), 0)

    def test_load_shuffle_follows_config(self) -> None:
        words = [f"B{chr(65 + i // 26)}{chr(65 + i % 26)}" for i in range(50)]
        content = "".join(f"{word}\tgloss\n" for word in words)

        ordered = self._dictionary(content, shuffle_on_load=False)
        self.assertEqual(list(ordered.find_matches("???")), words)

        shuffled = self._dictionary(content, rng=random.Random(99))
        result = list(shuffled.find_matches("???"))
        self.assertNotEqual(result, words)
        self.assertEqual(sorted(result), words)

    def test_lowercase_patterns_are_accepted(self) -> None:
        dictionary = self._dictionary()
        self.assertEqual(sorted(dictionary.find_matches("c?t")), ["CAT", "COT"])

    def test_first_duplicate_wins(self) -> None:
        dictionary = self._dictionary("Cat\tfirst\nCAT\tsecond\nc-a-t\tthird\n")
        self.assertEqual(len(dictionary), 1)
        self.assertEqual(dictionary.get_surface_form("CAT"), "Cat")
        self.assertEqual(dictionary.get_explanation("CAT"), "first")
        self.assertEqual(len(dictionary.find_matches("???")), 1)

    def test_unknown_key_lookups_return_empty_string(self) -> None:
        dictionary = self._dictionary()
        self.assertEqual(dictionary.get_surface_form("ZEBRA"), "")
        self.assertEqual(dictionary.get_explanation("ZEBRA"), "")
        self.assertIsNone(dictionary.entry("ZEBRA"))

    def test_legacy_encoded_file(self) -> None:
        path = self._write(b"\x8a\x8e\x92\tcat\r\n\xaa\xae\xaa\xa0\tcoca\n")
        dictionary = WordDictionary(DictionaryConfig(path=path))
        self.assertTrue(dictionary.contains("кот"))
        self.assertEqual(dictionary.get_surface_form("КОТ"), "КОТ")
        self.assertEqual(dictionary.get_explanation("КОТ"), "cat")
        self.assertEqual(list(dictionary.find_matches("К?Т")), ["КОТ"])

    def test_missing_file_fails_softly(self) -> None:
        dictionary = WordDictionary(DictionaryConfig(path=self.tmpdir / "missing.txt"))
        self.assertEqual(len(dictionary), 0)
        self.assertIsNotNone(dictionary.load_error)
        self.assertEqual(len(dictionary.find_matches("???")), 0)

    def test_missing_file_raises_in_strict_mode(self) -> None:
        with self.assertRaises(DictionaryLoadError):
            WordDictionary(DictionaryConfig(path=self.tmpdir / "missing.txt", strict=True))

    def test_capacity_overflow_is_fatal(self) -> None:
        with self.assertRaises(DictionaryCapacityError):
            self._dictionary(max_words=2)

    def test_reload_clears_cache(self) -> None:
        dictionary = self._dictionary()
        self.assertEqual(len(dictionary.find_matches("C?T")), 2)
        replacement = self._write(b"CUT\tslice\n", name="other.txt")
        self.assertEqual(dictionary.load(replacement), 1)
        self.assertEqual(dictionary.cache_size, 0)
        self.assertEqual(list(dictionary.find_matches("C?T")), ["CUT"])
        dictionary.reset()
        self.assertEqual(len(dictionary), 0)

    def test_extend_accepts_text_records(self) -> None:
        dictionary = WordDictionary()
        added = dictionary.extend([("cat", "feline"), ("CAT", "again"), ("car", "vehicle")])
        self.assertEqual(added, 2)
        self.assertEqual(sorted(dictionary.find_matches("CA?")), ["CAR", "CAT"])

    def test_suggest_orders_by_distance(self) -> None:
        dictionary = self._dictionary()
        self.assertEqual(dictionary.suggest("cax", max_distance=1), ["CAR", "CAT"])
        self.assertEqual(dictionary.suggest("DOG", max_distance=1), ["DOG", "DOGS"])
        self.assertEqual(dictionary.suggest(""), [])

    def test_edit_distance(self) -> None:
        self.assertEqual(WordDictionary.edit_distance("KITTEN", "SITTING"), 3)

    def test_iter_records_handles_missing_tab_and_blank_lines(self) -> None:
        records = list(iter_records(b"CAT\tfeline\n\nDOG\n"))
        self.assertEqual(records, [(b"CAT", b"feline"), (b"DOG", b"")])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
