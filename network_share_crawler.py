# Network Share Crawler
# Daniel S Cochran
# https://github.com/Alderon714/network_share_analyzer
#
# June 27, 2025


#!/usr/bin/env python3
"""
Network Share Crawler
Enumerates the directories of a network share that the current credentials can access
"""

import re
import json
import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
import pandas as pd

SHARE_ROOT_PATTERN = re.compile(r'^\\\\[^\\/]+\\[^\\/]+')

logger = logging.getLogger(__name__)


class ListingStatus(Enum):
    OK = "ok"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    UNEXPECTED = "unexpected"


class NotificationKind(Enum):
    ACCESSIBLE = "accessible"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    UNEXPECTED = "unexpected"
    ROOT_NOT_FOUND = "root_not_found"


# Listing outcome -> notification emitted for the listed path
NOTIFICATION_FOR_STATUS = {
    ListingStatus.OK: NotificationKind.ACCESSIBLE,
    ListingStatus.ACCESS_DENIED: NotificationKind.ACCESS_DENIED,
    ListingStatus.NOT_FOUND: NotificationKind.NOT_FOUND,
    ListingStatus.UNEXPECTED: NotificationKind.UNEXPECTED,
}


@dataclass(frozen=True)
class DirectoryListing:
    """Outcome of listing one directory: its child directories or a failure kind"""
    status: ListingStatus
    children: tuple = ()
    detail: str = ""

    @classmethod
    def ok(cls, children):
        return cls(ListingStatus.OK, tuple(children))

    @classmethod
    def failed(cls, status, detail=""):
        return cls(status, (), str(detail))


@dataclass(frozen=True)
class Notification:
    kind: NotificationKind
    path: str
    detail: str = ""


def classify_error(error):
    """Map an OSError raised while listing to a ListingStatus"""
    if isinstance(error, PermissionError):
        return ListingStatus.ACCESS_DENIED
    if isinstance(error, (FileNotFoundError, NotADirectoryError)):
        return ListingStatus.NOT_FOUND
    return ListingStatus.UNEXPECTED


def list_directory(path):
    """List the immediate child directories of path"""
    try:
        items = list(Path(path).iterdir())
    except OSError as e:
        return DirectoryListing.failed(classify_error(e), e)

    children = []
    for item in items:
        try:
            if item.is_dir():
                children.append(str(item))
        except OSError as e:
            logger.warning(f"Cannot determine type of {item}: {e}")
            continue

    return DirectoryListing.ok(children)


def is_share_root(path):
    """Check that path starts with the \\\\server\\share marker"""
    return bool(path) and SHARE_ROOT_PATTERN.match(path) is not None


def validate_share_root(path):
    if not is_share_root(path):
        raise ValueError(f"Not a network share path (expected \\\\server\\share): {path!r}")
    return path


class DirectoryCrawler:
    """
    Breadth-first walk over a share, recording every directory that can be listed.

    Per-directory failures are reported to the sink and never raised. A root
    that does not exist ends the crawl early with a ROOT_NOT_FOUND notification.

    There is no cycle detection: a share with links back into an ancestor
    directory keeps enqueueing the same directories.
    """

    def __init__(self, root, recursive=False, lister=list_directory, sink=None,
                 max_depth=None, should_stop=None):
        self.root = root
        self.recursive = recursive
        self.lister = lister
        self.sink = sink
        self.max_depth = max_depth
        self.should_stop = should_stop

        self.accessible_directories = []
        self.root_not_found = False
        self.stopped = False

    def notify(self, kind, path, detail=""):
        if self.sink is not None:
            self.sink(Notification(kind, path, detail))

    def list_path(self, path):
        try:
            return self.lister(path)
        except OSError as e:
            return DirectoryListing.failed(classify_error(e), e)
        except Exception as e:
            # Protocol clients raise their own error types
            logger.debug(f"Lister raised {type(e).__name__} for {path}", exc_info=True)
            return DirectoryListing.failed(ListingStatus.UNEXPECTED, e)

    def crawl(self):
        """Run the traversal and return the accessible directories in discovery order"""
        self.accessible_directories = []
        self.root_not_found = False
        self.stopped = False

        queue = deque([(self.root, 0)])
        listed = 0

        while queue:
            # Root is always listed; cancellation is only checked between entries
            if listed and self.should_stop is not None and self.should_stop():
                logger.debug(f"Crawl of {self.root} stopped with {len(queue)} directories pending")
                self.stopped = True
                break

            current, depth = queue.popleft()
            listed += 1
            logger.debug(f"Listing {current} (depth {depth})")
            listing = self.list_path(current)

            self.notify(NOTIFICATION_FOR_STATUS[listing.status], current, listing.detail)

            if listing.status is ListingStatus.OK:
                self.accessible_directories.append(current)
                if self.recursive and (self.max_depth is None or depth < self.max_depth):
                    queue.extend((child, depth + 1) for child in listing.children)
            elif listing.status is ListingStatus.NOT_FOUND and current == self.root:
                self.root_not_found = True
                self.notify(NotificationKind.ROOT_NOT_FOUND, current, listing.detail)
                return self.accessible_directories

        return self.accessible_directories


def crawl(root, recursive, lister=list_directory, sink=None):
    """Enumerate the accessible directories under root"""
    return DirectoryCrawler(root, recursive, lister, sink).crawl()


class ShareAccessAuditor:
    def __init__(self, share_path, output_dir="crawl_output", recursive=False, max_depth=None):
        self.share_path = share_path
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(exist_ok=True)
        self.recursive = recursive
        self.max_depth = max_depth

        # Initialize data structures
        self.accessible_directories = []
        self.events = []
        self.root_not_found = False
        self.statistics = {
            'accessible': 0,
            'access_denied': 0,
            'not_found': 0,
            'unexpected': 0,
            'root_not_found': 0,
        }

        # Setup logging
        self.setup_logging()

    def setup_logging(self):
        """Setup logging configuration"""
        log_format = '%(asctime)s - %(levelname)s - %(message)s'
        self.log_file = self.output_dir / f"crawl_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"

        logging.basicConfig(
            level=logging.INFO,
            format=log_format,
            handlers=[
                logging.StreamHandler()
            ]
        )

        # One log file per auditor, even when the root logger is already configured
        self.file_handler = logging.FileHandler(self.log_file)
        self.file_handler.setFormatter(logging.Formatter(log_format))
        self.logger = logging.getLogger(__name__)
        self.logger.addHandler(self.file_handler)

    def close(self):
        """Detach and close this auditor's log file"""
        self.logger.removeHandler(self.file_handler)
        self.file_handler.close()

    def handle(self, notification):
        """Log and record a crawl notification"""
        kind, path = notification.kind, notification.path

        if kind is NotificationKind.ACCESSIBLE:
            self.logger.info(f"Accessible: {path}")
        elif kind is NotificationKind.ACCESS_DENIED:
            self.logger.warning(f"Access denied: {path}: {notification.detail}")
        elif kind is NotificationKind.NOT_FOUND:
            self.logger.warning(f"Not found: {path}: {notification.detail}")
        elif kind is NotificationKind.UNEXPECTED:
            self.logger.error(f"Unexpected error listing {path}: {notification.detail}")
        else:
            self.logger.error(f"Share root does not exist: {path}")

        self.statistics[kind.value] += 1
        self.events.append({
            'kind': kind.value,
            'path': path,
            'detail': notification.detail
        })

    __call__ = handle

    def generate_reports(self):
        """Generate crawl reports"""
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')

        # 1. Accessible directories CSV
        directories_file = self.output_dir / f"accessible_directories_{timestamp}.csv"
        df = pd.DataFrame({
            'order': range(1, len(self.accessible_directories) + 1),
            'path': self.accessible_directories
        })
        df.to_csv(directories_file, index=False)

        # 2. Every notification, in the order it was raised
        events_file = self.output_dir / f"access_events_{timestamp}.csv"
        pd.DataFrame(self.events, columns=['kind', 'path', 'detail']).to_csv(events_file, index=False)

        # 3. Statistics summary
        stats_file = self.output_dir / f"statistics_{timestamp}.json"
        stats_copy = self.statistics.copy()
        stats_copy['share_path'] = self.share_path
        stats_copy['recursive'] = self.recursive
        stats_copy['max_depth'] = self.max_depth
        stats_copy['root_not_found'] = self.root_not_found

        with open(stats_file, 'w') as f:
            json.dump(stats_copy, f, indent=2)

        # 4. Generate summary report
        report_file = self.generate_summary_report(timestamp)

        return {
            'directories_file': directories_file,
            'events_file': events_file,
            'statistics_file': stats_file,
            'summary_file': report_file
        }

    def generate_summary_report(self, timestamp):
        """Generate human-readable summary report"""
        report_file = self.output_dir / f"summary_report_{timestamp}.txt"

        with open(report_file, 'w') as f:
            f.write("=" * 60 + "\n")
            f.write("NETWORK SHARE ACCESS SUMMARY\n")
            f.write("=" * 60 + "\n\n")

            f.write(f"Share Path: {self.share_path}\n")
            f.write(f"Recursive: {'yes' if self.recursive else 'no'}\n")
            if self.max_depth is not None:
                f.write(f"Max Depth: {self.max_depth}\n")
            f.write(f"Crawl Date: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n\n")

            if self.root_not_found:
                f.write("SHARE ROOT NOT FOUND - nothing was crawled\n\n")

            f.write("ACCESS STATISTICS\n")
            f.write("-" * 20 + "\n")
            f.write(f"Accessible Directories: {self.statistics['accessible']:,}\n")
            f.write(f"Access Denied: {self.statistics['access_denied']:,}\n")
            f.write(f"Not Found: {self.statistics['not_found']:,}\n")
            f.write(f"Unexpected Errors: {self.statistics['unexpected']:,}\n\n")

            denied = [e['path'] for e in self.events if e['kind'] == NotificationKind.ACCESS_DENIED.value]
            f.write("ACCESS DENIED\n")
            f.write("-" * 15 + "\n")
            for path in denied[:10]:  # Show first 10
                f.write(f"  - {path}\n")
            if len(denied) > 10:
                f.write(f"  ... and {len(denied) - 10} more\n")

        return report_file

    def run_audit(self, lister=list_directory, should_stop=None):
        """Crawl the share and generate reports"""
        self.logger.info(f"Starting crawl of {self.share_path}")

        crawler = DirectoryCrawler(
            self.share_path,
            recursive=self.recursive,
            lister=lister,
            sink=self,
            max_depth=self.max_depth,
            should_stop=should_stop
        )
        self.accessible_directories = crawler.crawl()
        self.root_not_found = crawler.root_not_found

        self.logger.info(f"Found {len(self.accessible_directories)} accessible directories")

        # Generate reports
        self.logger.info("Generating reports...")
        report_files = self.generate_reports()

        self.logger.info("Crawl complete!")
        self.logger.info(f"Reports generated in: {self.output_dir}")

        return report_files
