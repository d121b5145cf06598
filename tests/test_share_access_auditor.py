"""
Tests for the auditing sink, its reports, and the command-line entry point.
"""

import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import pandas as pd

import network_share_crawler_cli
from network_share_crawler import (
    DirectoryListing,
    ListingStatus,
    Notification,
    NotificationKind,
    ShareAccessAuditor,
)


ROOT = r"\\srv\share"
A = r"\\srv\share\A"
B = r"\\srv\share\B"

TREE = {
    ROOT: DirectoryListing.ok([A, B]),
    A: DirectoryListing.ok([]),
    B: DirectoryListing.failed(ListingStatus.ACCESS_DENIED, "access is denied"),
}


def fake_lister(path):
    return TREE.get(path, DirectoryListing.failed(ListingStatus.NOT_FOUND, "no such path"))


class AuditorTestCase(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.output_dir = Path(self._tmp.name) / "out"

    def tearDown(self):
        self._tmp.cleanup()


class TestShareAccessAuditor(AuditorTestCase):

    def test_handle_tallies_and_records(self):
        auditor = ShareAccessAuditor(ROOT, self.output_dir)
        self.addCleanup(auditor.close)
        with self.assertLogs("network_share_crawler", level="INFO") as logs:
            auditor(Notification(NotificationKind.ACCESSIBLE, ROOT))
            auditor(Notification(NotificationKind.ACCESS_DENIED, B, "access is denied"))

        self.assertEqual(auditor.statistics['accessible'], 1)
        self.assertEqual(auditor.statistics['access_denied'], 1)
        self.assertEqual(auditor.events[1], {'kind': 'access_denied', 'path': B,
                                             'detail': 'access is denied'})
        self.assertTrue(any("WARNING" in line and B in line for line in logs.output))

    def test_run_audit_recursive(self):
        auditor = ShareAccessAuditor(ROOT, self.output_dir, recursive=True)
        self.addCleanup(auditor.close)
        report_files = auditor.run_audit(lister=fake_lister)

        self.assertEqual(auditor.accessible_directories, [ROOT, A])
        self.assertFalse(auditor.root_not_found)
        for path in report_files.values():
            self.assertTrue(Path(path).exists(), path)

        directories = pd.read_csv(report_files['directories_file'])
        self.assertEqual(list(directories['path']), [ROOT, A])
        self.assertEqual(list(directories['order']), [1, 2])

        events = pd.read_csv(report_files['events_file'])
        self.assertEqual(list(events['kind']), ['accessible', 'accessible', 'access_denied'])

        with open(report_files['statistics_file']) as f:
            stats = json.load(f)
        self.assertEqual(stats['accessible'], 2)
        self.assertEqual(stats['access_denied'], 1)
        self.assertTrue(stats['recursive'])

        summary = Path(report_files['summary_file']).read_text()
        self.assertIn("Accessible Directories: 2", summary)
        self.assertIn(B, summary)

    def test_run_audit_root_not_found(self):
        auditor = ShareAccessAuditor(r"\\srv\missing", self.output_dir, recursive=True)
        self.addCleanup(auditor.close)
        report_files = auditor.run_audit(lister=fake_lister)

        self.assertEqual(auditor.accessible_directories, [])
        self.assertTrue(auditor.root_not_found)
        self.assertEqual(auditor.statistics['root_not_found'], 1)
        self.assertEqual(auditor.statistics['not_found'], 1)

        directories = pd.read_csv(report_files['directories_file'])
        self.assertTrue(directories.empty)
        self.assertIn("SHARE ROOT NOT FOUND", Path(report_files['summary_file']).read_text())

    def test_each_auditor_writes_its_own_log(self):
        first = ShareAccessAuditor(ROOT, Path(self._tmp.name) / "first")
        self.addCleanup(first.close)
        first.logger.warning("first crawl")

        second = ShareAccessAuditor(ROOT, Path(self._tmp.name) / "second")
        self.addCleanup(second.close)
        second.logger.warning("second crawl")
        first.file_handler.flush()
        second.file_handler.flush()

        self.assertTrue(first.log_file.exists())
        self.assertTrue(second.log_file.exists())
        self.assertIn("second crawl", second.log_file.read_text())
        self.assertNotIn("first crawl", second.log_file.read_text())

    def test_close_detaches_log_file(self):
        auditor = ShareAccessAuditor(ROOT, self.output_dir)
        auditor.close()
        self.assertNotIn(auditor.file_handler, auditor.logger.handlers)


class TestMain(AuditorTestCase):

    def test_rejects_non_share_path(self):
        with self.assertRaises(SystemExit) as ctx:
            network_share_crawler_cli.main(["/mnt/share", "--output-dir", str(self.output_dir)])
        self.assertEqual(ctx.exception.code, 2)

    def test_rejects_negative_depth(self):
        with self.assertRaises(SystemExit) as ctx:
            network_share_crawler_cli.main([ROOT, "-r", "--max-depth", "-1", "--output-dir", str(self.output_dir)])
        self.assertEqual(ctx.exception.code, 2)

    def test_missing_share_exits_with_error(self):
        with patch.object(Path, "iterdir", side_effect=FileNotFoundError("not found")):
            code = network_share_crawler_cli.main([ROOT, "--output-dir", str(self.output_dir)])
        self.assertEqual(code, 1)

    def test_accessible_share(self):
        with patch.object(Path, "iterdir", return_value=iter([])):
            with patch("builtins.print") as mock_print:
                code = network_share_crawler_cli.main([ROOT, "-r", "--output-dir", str(self.output_dir)])

        self.assertEqual(code, 0)
        printed = [call.args[0] for call in mock_print.call_args_list if call.args]
        self.assertIn(f"  {ROOT}", printed)


if __name__ == "__main__":
    unittest.main()
