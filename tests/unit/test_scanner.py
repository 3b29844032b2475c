import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from dataset_processor.exceptions import InvalidArgumentError, IOFailure
from dataset_processor.scanner import (
    get_image_files,
    get_text_from_file,
    save_text_for_image,
    scan_groups,
    sidecar_path,
)


class TestScanner(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def touch(self, *names):
        for name in names:
            (self.root / name).write_bytes(b"data")

    def test_groups_sorted_lexicographically(self):
        self.touch("b.png", "a.png", "c.png", "10.jpg", "2.jpg")

        names = [g.image.name for g in scan_groups(self.root)]

        self.assertEqual(names, ["10.jpg", "2.jpg", "a.png", "b.png", "c.png"])

    def test_scan_order_is_stable(self):
        self.touch("z.webp", "m.gif", "a.jpeg", "b.png")

        first = [g.image for g in scan_groups(self.root)]
        second = [g.image for g in scan_groups(self.root)]

        self.assertEqual(first, second)
        self.assertEqual(first, sorted(first, key=str))

    def test_extension_match_is_case_insensitive(self):
        self.touch("upper.PNG", "mixed.JpG", "notes.md", "video.mp4")

        names = {g.image.name for g in scan_groups(self.root)}

        self.assertEqual(names, {"upper.PNG", "mixed.JpG"})

    def test_sidecars_attached_only_when_present(self):
        self.touch("a.png", "a.txt", "a.caption", "b.png", "b.caption", "c.png")

        groups = {g.image.name: g for g in scan_groups(self.root)}

        self.assertEqual(set(groups["a.png"].sidecars), {".txt", ".caption"})
        self.assertEqual(set(groups["b.png"].sidecars), {".caption"})
        self.assertEqual(groups["c.png"].sidecars, {})
        self.assertEqual(
            [p.name for p in groups["a.png"].files()],
            ["a.png", "a.txt", "a.caption"],
        )

    def test_orphan_sidecars_are_not_groups(self):
        self.touch("orphan.txt", "a.png")

        groups = scan_groups(self.root)

        self.assertEqual(len(groups), 1)
        self.assertEqual(groups[0].image.name, "a.png")

    def test_reserved_file_is_excluded(self):
        self.touch("a.png", "sample_prompt_custom.txt", "sample_prompt_custom.png")

        groups = scan_groups(self.root)
        names = [g.image.name for g in groups]

        self.assertEqual(names, ["a.png", "sample_prompt_custom.png"])
        reserved_group = groups[1]
        self.assertNotIn(".txt", reserved_group.sidecars)

    def test_shared_stem_sidecar_belongs_to_first_image(self):
        self.touch("a.jpg", "a.png", "a.txt")

        groups = scan_groups(self.root)

        self.assertEqual([g.image.name for g in groups], ["a.jpg", "a.png"])
        self.assertIn(".txt", groups[0].sidecars)
        self.assertEqual(groups[1].sidecars, {})

    def test_subdirectories_are_ignored(self):
        (self.root / "nested.png").mkdir()
        (self.root / "sub").mkdir()
        (self.root / "sub" / "inner.png").write_bytes(b"data")
        self.touch("top.png")

        self.assertEqual([g.image.name for g in scan_groups(self.root)], ["top.png"])

    def test_missing_directory(self):
        with self.assertRaises(InvalidArgumentError):
            scan_groups(self.root / "missing")

    def test_get_image_files(self):
        self.touch("b.png", "b.txt", "a.png")

        self.assertEqual(get_image_files(self.root), [self.root / "a.png", self.root / "b.png"])

    def test_sidecar_with_bom_reads_without_it(self):
        image = self.root / "a.png"
        self.touch("a.png")
        (self.root / "a.txt").write_bytes(b"\xef\xbb\xbfcat, dog")

        self.assertEqual(get_text_from_file(image, ".txt"), "cat, dog")

    def test_non_utf8_sidecar_is_replaced_not_fatal(self):
        image = self.root / "a.png"
        self.touch("a.png")
        (self.root / "a.txt").write_bytes(b"caf\xe9, cat")

        self.assertEqual(get_text_from_file(image, ".txt"), "caf\ufffd, cat")

    def test_unreadable_sidecar_raises_io_failure(self):
        image = self.root / "a.png"
        self.touch("a.png")
        (self.root / "a.txt").mkdir()

        with self.assertRaises(IOFailure) as ctx:
            get_text_from_file(image, ".txt")
        self.assertEqual(ctx.exception.operation, "read-sidecar")
        self.assertEqual(ctx.exception.path, self.root / "a.txt")

    @patch("dataset_processor.scanner.os.scandir")
    def test_listing_failure_raises_io_failure(self, mock_scandir):
        mock_scandir.side_effect = PermissionError("denied")

        with self.assertRaises(IOFailure) as ctx:
            scan_groups(self.root)
        self.assertEqual(ctx.exception.operation, "scan")
        self.assertIsInstance(ctx.exception.__cause__, PermissionError)

    def test_sidecar_text_round_trip(self):
        image = self.root / "a.png"
        self.touch("a.png")

        self.assertEqual(get_text_from_file(image, ".txt"), "")

        save_text_for_image(sidecar_path(image, ".txt"), "red, blue")

        self.assertEqual(get_text_from_file(image, ".txt"), "red, blue")
        self.assertEqual(get_text_from_file(image, ".caption"), "")


if __name__ == '__main__':
    unittest.main()
