#!/usr/bin/env python3
"""
Maintenance script to remove orphaned temporary audio objects.

Audio summarization jobs stage the downloaded audio under a temporary object
name and delete it once transcription finishes. A process that dies mid-job
never reaches that cleanup, so the objects are left behind in the bucket.

Usage:
    python scripts/clean_audio_bucket.py [--older-than MINUTES] [--dry-run]

Options:
    --older-than  Only delete objects older than this many minutes (default 60)
    --prefix      Object name prefix to match (default from settings)
    --dry-run     Show what would be deleted without actually deleting
    -y, --yes     Skip confirmation prompt
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from video_digest.commons.settings import get_settings

if TYPE_CHECKING:
    from minio import Minio

    from video_digest.commons.settings import Settings


@dataclass
class CleanupArgs:
    """Parsed command line arguments."""

    older_than: timedelta
    prefix: str | None
    dry_run: bool
    skip_confirm: bool


def parse_args() -> CleanupArgs:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Remove orphaned temporary audio objects from blob storage",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--older-than",
        type=int,
        default=60,
        metavar="MINUTES",
        help="Only delete objects older than this many minutes",
    )
    parser.add_argument(
        "--prefix", default=None, help="Object name prefix to match"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be deleted without actually deleting",
    )
    parser.add_argument(
        "-y", "--yes", action="store_true", help="Skip confirmation prompt"
    )

    args = parser.parse_args()
    if args.older_than < 0:
        parser.error("--older-than must be zero or positive")

    return CleanupArgs(
        older_than=timedelta(minutes=args.older_than),
        prefix=args.prefix,
        dry_run=args.dry_run,
        skip_confirm=args.yes,
    )


def get_minio_client(settings: Settings) -> Minio:
    """Create a MinIO client from the service settings."""
    from minio import Minio

    blob = settings.blob_storage
    return Minio(
        endpoint=blob.endpoint,
        access_key=blob.access_key,
        secret_key=blob.secret_key,
        secure=blob.use_ssl,
        region=blob.region,
    )


def find_orphans(
    client: Minio, bucket: str, prefix: str, older_than: timedelta
) -> list[str]:
    """List temporary objects whose last modification is past the cutoff."""
    if not client.bucket_exists(bucket):
        print(f"  Bucket '{bucket}' does not exist")
        return []

    cutoff = datetime.now(UTC) - older_than
    return [
        obj.object_name
        for obj in client.list_objects(bucket, prefix=prefix)
        if obj.object_name
        and obj.last_modified is not None
        and obj.last_modified < cutoff
    ]


def delete_orphans(
    client: Minio, bucket: str, names: list[str], dry_run: bool
) -> list[str]:
    """Delete the given objects and return a list of errors."""
    errors: list[str] = []

    for name in names:
        if dry_run:
            print(f"  [DRY-RUN] Would delete '{name}'")
            continue
        try:
            client.remove_object(bucket, name)
            print(f"  Deleted '{name}'")
        except Exception as e:
            errors.append(f"{name}: {e}")
            print(f"  Failed to delete '{name}': {e}")

    return errors


def main() -> None:
    """Main entry point."""
    args = parse_args()
    settings = get_settings()
    bucket = settings.blob_storage.buckets.audio
    prefix = args.prefix or settings.jobs.temp_object_prefix

    print("=" * 50)
    print("  TEMPORARY AUDIO CLEANUP")
    print("=" * 50)
    print(f"\nBucket: {bucket}")
    print(f"Prefix: {prefix}")
    print(f"Older than: {int(args.older_than.total_seconds() // 60)} minutes")
    print(f"Mode: {'DRY-RUN' if args.dry_run else 'DESTRUCTIVE'}")

    try:
        client = get_minio_client(settings)
        orphans = find_orphans(client, bucket, prefix, args.older_than)
    except Exception as e:
        print(f"  Failed to connect to MinIO: {e}")
        sys.exit(1)

    if not orphans:
        print("\nNo orphaned objects found.")
        return

    print(f"\nFound {len(orphans)} orphaned object(s)")

    if not args.skip_confirm and not args.dry_run:
        response = input("\nAre you sure you want to continue? [y/N]: ")
        if response.lower() not in ("y", "yes"):
            print("Aborted.")
            sys.exit(0)

    errors = delete_orphans(client, bucket, orphans, args.dry_run)

    print("\n" + "=" * 50)
    if errors:
        print(f"Completed with {len(errors)} error(s):")
        for error in errors:
            print(f"  - {error}")
        sys.exit(1)
    print("Cleanup completed successfully!")
    print("=" * 50)


if __name__ == "__main__":
    main()
