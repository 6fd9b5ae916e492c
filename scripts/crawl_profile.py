"""
Crawl the staff page, Google Scholar and ORCID and refresh the profile snapshots.

This script:
1. Fetches each source, saving a raw capture under data/crawl/
2. Merges the results with data/profile.yml, the previous snapshots and data/overrides.yml
3. Writes data/crawl/crawl.yml and data/crawl/publications.yml
"""

import logging
import sys
from pathlib import Path

#
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.settings import settings
from crawler.pipeline import run_crawl
from crawler.sources.data import SnapshotWriteError


def main(argv=None) -> int:
    import argparse

    parser = argparse.ArgumentParser(
        description="Refresh the academic profile snapshots from public sources"
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help=f"Directory holding profile.yml, overrides.yml and crawl/ (default: {settings.data_dir})"
    )
    scholar_group = parser.add_mutually_exclusive_group()
    scholar_group.add_argument(
        "--skip-scholar",
        dest="skip_scholar",
        action="store_true",
        default=None,
        help="Do not contact Google Scholar (default on GitHub Actions)"
    )
    scholar_group.add_argument(
        "--no-skip-scholar",
        dest="skip_scholar",
        action="store_false",
        help="Contact Google Scholar even in CI"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Crawl and compose but do not write the snapshots"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    run_settings = settings
    if args.data_dir is not None:
        run_settings = settings.model_copy(update={"data_dir": args.data_dir})

    try:
        report = run_crawl(run_settings, skip_scholar=args.skip_scholar, write=not args.dry_run)
    except SnapshotWriteError as e:
        print(f"Error: {e}")
        return 1

    print(f"\n{'='*60}")
    print(f"Crawl completed at {report.snapshot.generated_at}")
    print(f"  Name: {report.snapshot.profile.name}")
    print(f"  Citations: {report.snapshot.metrics.citations or '-'}")
    print(f"  Publications: {len(report.publications.items)}")
    print(f"  Work history entries: {len(report.snapshot.work_history)}")
    if report.unavailable:
        print(f"  Unavailable sources: {', '.join(report.unavailable)}")
    print(f"  Warnings: {len(report.warnings)}")
    print(f"{'='*60}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
