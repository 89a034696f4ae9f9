import json
import tempfile
import unittest
from pathlib import Path

import main


class CliTests(unittest.TestCase):
    def test_patterns_and_grid_slots(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            dictionary = root / "dict.txt"
            dictionary.write_bytes(b"CAT\tfeline\nCAR\tvehicle\nCOT\tbed\n")
            grid = root / "puzzle.ctb"
            grid.write_bytes(bytes([1, 3, ord("C"), 0x00, ord("T")]))
            output = root / "out.json"

            exit_code = main.main([
                "--dictionary", str(dictionary),
                "--grid", str(grid),
                "--fill-patterns",
                "--pattern", "CA?",
                "--suggest", "CUT",
                "--seed", "3",
                "--output", str(output),
                "--log-level", "WARNING",
            ])
            payload = json.loads(output.read_text(encoding="utf-8"))

        self.assertEqual(exit_code, 0)
        self.assertEqual(payload["words_loaded"], 3)
        self.assertEqual(payload["grid"], ["C.T"])
        self.assertEqual(len(payload["slots"]), 1)
        self.assertEqual(payload["slots"][0]["pattern"], "C?T")
        by_pattern = {entry["pattern"]: entry for entry in payload["matches"]}
        self.assertEqual(by_pattern["CA?"]["count"], 2)
        self.assertEqual(
            sorted(by_pattern["C?T"]["words"], key=lambda item: item["word"]),
            [
                {"word": "CAT", "surface": "CAT", "explanation": "feline"},
                {"word": "COT", "surface": "COT", "explanation": "bed"},
            ],
        )
        self.assertEqual(payload["suggestions"]["CUT"], ["CAT", "COT", "CAR"])

    def test_missing_grid_exits_cleanly(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            dictionary = root / "dict.txt"
            dictionary.write_bytes(b"CAT\tfeline\n")
            with self.assertRaises(SystemExit) as caught:
                main.main([
                    "--dictionary", str(dictionary),
                    "--grid", str(root / "absent.ctb"),
                    "--log-level", "ERROR",
                ])
        self.assertEqual(caught.exception.code, 2)

    def test_fill_patterns_requires_grid(self) -> None:
        with self.assertRaises(SystemExit):
            main.main(["--dictionary", "unused.txt", "--fill-patterns"])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
