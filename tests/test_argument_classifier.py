from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from binsnap.arguments.classifier import (
    Literal,
    PlaceholderInputFile,
    StagedFileReference,
    StagingInvariantError,
    classify_arguments,
    classify_token,
)
from binsnap.config.snapshot_config import DEFAULT_INPUT_FILE_SIZE, TRUNCATED_INPUT_PATH


class _InTempCwd:
    def __enter__(self) -> Path:
        self._td = tempfile.TemporaryDirectory()
        self._old = os.getcwd()
        os.chdir(self._td.name)
        return Path(self._td.name).resolve()

    def __exit__(self, *exc: object) -> None:
        os.chdir(self._old)
        self._td.cleanup()


class ArgumentClassifierTests(unittest.TestCase):
    def test_token_order_is_preserved(self) -> None:
        with _InTempCwd():
            out = classify_arguments("a @@ b")
        self.assertEqual(out.tokens, (Literal("a"), PlaceholderInputFile(), Literal("b")))
        self.assertEqual(out.argv(), ["a", TRUNCATED_INPUT_PATH, "b"])

    def test_no_arguments(self) -> None:
        for raw in (None, "", "   "):
            with self.subTest(raw=raw):
                out = classify_arguments(raw, input_file_size=10)
                self.assertEqual(out.tokens, ())
                self.assertIsNone(out.truncation)
                self.assertEqual(out.argv(), [])

    def test_runs_of_whitespace_do_not_produce_empty_tokens(self) -> None:
        with _InTempCwd():
            out = classify_arguments("-v   --fast\t-n")
        self.assertEqual(out.argv(), ["-v", "--fast", "-n"])

    def test_existing_file_is_staged(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            cfg = Path(td) / "cfg.json"
            cfg.write_text("{}", encoding="utf-8")
            out = classify_arguments(f"-x {cfg}")
        self.assertIsInstance(out.tokens[1], StagedFileReference)
        staged = out.staged_files
        self.assertEqual(len(staged), 1)
        self.assertEqual(staged[0].name, "cfg.json")
        self.assertEqual(out.copy_instructions(), [f'COPY "{cfg}" /opt'])
        self.assertEqual(out.argv(), ["-x", "/opt/cfg.json"])
        self.assertIsNone(out.truncation)

    def test_relative_path_resolves_against_cwd(self) -> None:
        with _InTempCwd() as cwd:
            (cwd / "seed.bin").write_bytes(b"\x00")
            tok = classify_token("seed.bin")
        self.assertIsInstance(tok, StagedFileReference)
        self.assertEqual(tok.staged.source, cwd / "seed.bin")
        self.assertEqual(tok.rendered(), "/opt/seed.bin")

    def test_missing_path_is_literal(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            missing = str(Path(td) / "nope.txt")
            self.assertEqual(classify_token(missing), Literal(missing))

    def test_device_paths_are_not_staged(self) -> None:
        self.assertEqual(classify_token("/dev/null"), Literal("/dev/null"))

    def test_staging_dir_is_configurable(self) -> None:
        with _InTempCwd() as cwd:
            (cwd / "in.txt").write_text("x", encoding="utf-8")
            tok = classify_token("in.txt", staging_dir="/work")
        self.assertEqual(tok.rendered(), "/work/in.txt")
        self.assertEqual(tok.staged.copy_instruction(), f'COPY "{cwd / "in.txt"}" /work')

    def test_existing_file_named_like_marker_is_staged_not_placeholder(self) -> None:
        with _InTempCwd() as cwd:
            (cwd / "@@").write_text("", encoding="utf-8")
            out = classify_arguments("@@")
        self.assertIsInstance(out.tokens[0], StagedFileReference)
        self.assertEqual(out.argv(), ["/opt/@@"])
        self.assertIsNone(out.truncation)

    def test_root_directory_is_an_internal_fault(self) -> None:
        with self.assertRaises(StagingInvariantError):
            classify_token("/")

    def test_parent_directory_token_is_an_internal_fault(self) -> None:
        with _InTempCwd() as cwd:
            (cwd / "work").mkdir()
            os.chdir(cwd / "work")
            with self.assertRaises(StagingInvariantError):
                classify_token("..")

    def test_relative_path_resolves_against_base_dir(self) -> None:
        with tempfile.TemporaryDirectory() as td, _InTempCwd():
            base = Path(td)
            (base / "seed.bin").write_bytes(b"\x00")
            self.assertEqual(classify_token("seed.bin"), Literal("seed.bin"))
            tok = classify_token("seed.bin", base_dir=base)
        self.assertIsInstance(tok, StagedFileReference)
        self.assertEqual(tok.staged.source, base / "seed.bin")
        self.assertEqual(tok.rendered(), "/opt/seed.bin")

    def test_truncation_only_with_placeholder(self) -> None:
        with _InTempCwd():
            self.assertIsNone(classify_arguments("-a -b", input_file_size=99).truncation)
            default = classify_arguments("@@")
            explicit = classify_arguments("--in @@", input_file_size=4096)
        self.assertEqual(default.truncation.size, DEFAULT_INPUT_FILE_SIZE)
        self.assertEqual(default.truncation.path, TRUNCATED_INPUT_PATH)
        self.assertEqual(explicit.truncation.size, 4096)
        self.assertEqual(explicit.truncation.directive(), f"RUN truncate -s 4096 {TRUNCATED_INPUT_PATH}")

    def test_marker_inside_token_is_literal(self) -> None:
        with _InTempCwd():
            out = classify_arguments("--file=@@")
        self.assertEqual(out.tokens, (Literal("--file=@@"),))
        self.assertIsNone(out.truncation)


if __name__ == "__main__":
    unittest.main()
