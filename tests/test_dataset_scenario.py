"""End-to-end checks across operations on one small dataset."""

import tempfile
import unittest
from pathlib import Path

from PIL import Image

from dataset_processor import (
    backup_files,
    filter_by_content,
    rename_all_to_crescent,
    scan_groups,
    sort_images,
)


class TestDatasetScenario(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.base = Path(self._tmp.name)
        self.root = self.base / "dataset"
        self.root.mkdir()

        # b.png: "red,blue", a.png: "blue", c.png: no sidecar
        Image.new("RGB", (32, 32), "red").save(self.root / "b.png")
        Image.new("RGB", (32, 32), "blue").save(self.root / "a.png")
        Image.new("RGB", (700, 10), "green").save(self.root / "c.png")
        (self.root / "b.txt").write_text("red,blue", encoding="utf-8")
        (self.root / "a.txt").write_text("blue", encoding="utf-8")

        self.originals = {p.name: p.read_bytes() for p in self.root.iterdir()}

    def tearDown(self):
        self._tmp.cleanup()

    def test_scan_order(self):
        self.assertEqual([g.image.name for g in scan_groups(self.root)], ["a.png", "b.png", "c.png"])

    def test_filter_then_rename(self):
        result = filter_by_content(self.root, ".txt", "blue", exact_match=False)
        self.assertEqual(result, [self.root / "a.png", self.root / "b.png"])

        rename_all_to_crescent(self.root)

        self.assertEqual(sorted(p.name for p in self.root.iterdir()),
                         ["1.png", "1.txt", "2.png", "2.txt", "3.png"])
        self.assertEqual((self.root / "1.png").read_bytes(), self.originals["a.png"])
        self.assertEqual((self.root / "2.png").read_bytes(), self.originals["b.png"])
        self.assertEqual((self.root / "3.png").read_bytes(), self.originals["c.png"])
        self.assertEqual((self.root / "1.txt").read_text(encoding="utf-8"), "blue")
        self.assertEqual((self.root / "2.txt").read_text(encoding="utf-8"), "red,blue")

        # After renaming the numeric ordering is available
        numeric = filter_by_content(self.root, ".txt", "red, blue", numeric_order=True)
        self.assertEqual([p.name for p in numeric], ["1.png", "2.png"])

    def test_group_integrity_after_rename(self):
        before = {g.image.read_bytes(): {ext: p.read_bytes() for ext, p in g.sidecars.items()}
                  for g in scan_groups(self.root)}

        rename_all_to_crescent(self.root)

        after = {}
        for group in scan_groups(self.root):
            for sidecar in group.sidecars.values():
                self.assertEqual(sidecar.stem, group.image.stem)
            after[group.image.read_bytes()] = {ext: p.read_bytes() for ext, p in group.sidecars.items()}
        self.assertEqual(before, after)

    def test_backup_then_sort(self):
        backup = self.base / "backup"
        selected = self.base / "selected"
        discarded = self.base / "discarded"
        for folder in (backup, selected, discarded):
            folder.mkdir()

        backup_files(self.root, backup)
        sort_images(self.root, discarded, selected, 512)

        self.assertEqual({p.name: p.read_bytes() for p in backup.iterdir()}, self.originals)
        self.assertEqual(sorted(p.name for p in discarded.iterdir()), ["a.png", "b.png"])
        self.assertEqual(sorted(p.name for p in selected.iterdir()), ["c.png"])
        # Sorting copies; the dataset itself keeps every group intact
        self.assertEqual({p.name: p.read_bytes() for p in self.root.iterdir()}, self.originals)


if __name__ == '__main__':
    unittest.main()
