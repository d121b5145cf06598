# Network Share Crawler command line
# Daniel S Cochran
# https://github.com/Alderon714/network_share_analyzer
#
# June 27, 2025

import argparse
import logging

from network_share_crawler import ShareAccessAuditor, validate_share_root


def main(argv=None):
    parser = argparse.ArgumentParser(description='List the directories of a network share you can access')
    parser.add_argument('share_path', help='Path to network share (\\\\server\\share)')
    parser.add_argument('--recursive', '-r', action='store_true',
                       help='Descend into every accessible subdirectory')
    parser.add_argument('--max-depth', type=int,
                       help='Maximum directory depth to descend when recursive')
    parser.add_argument('--output-dir', default='crawl_output',
                       help='Output directory for reports')
    parser.add_argument('--verbose', '-v', action='store_true',
                       help='Enable verbose logging')

    args = parser.parse_args(argv)

    try:
        validate_share_root(args.share_path)
    except ValueError as e:
        parser.error(str(e))

    if args.max_depth is not None and args.max_depth < 0:
        parser.error("--max-depth must not be negative")

    # Create auditor
    auditor = ShareAccessAuditor(args.share_path, args.output_dir,
                                 recursive=args.recursive, max_depth=args.max_depth)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        # Run crawl
        report_files = auditor.run_audit()
    except OSError as e:
        print(f"Error during crawl: {e}")
        return 1
    finally:
        auditor.close()

    if auditor.root_not_found:
        print(f"\nShare root not found: {args.share_path}")
    else:
        print(f"\nAccessible directories ({len(auditor.accessible_directories)}):")
        for path in auditor.accessible_directories:
            print(f"  {path}")

    print(f"\nReports generated in: {args.output_dir}")
    for name, path in report_files.items():
        print(f"  - {name}: {path}")

    return 1 if auditor.root_not_found else 0


if __name__ == "__main__":
    exit(main())
