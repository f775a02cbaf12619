import argparse
import asyncio
import csv
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from loguru import logger

from leadmerge import LeadDatasetService, MergeOutcome
from leadmerge.config import CONCURRENCY, DATA_DIR, DEFAULT_DATASET, LOG_LEVEL, MAX_UPLOAD_BYTES
from leadmerge.errors import LeadMergeError
from leadmerge.store import FileDatasetStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Merge scraped lead CSVs into named datasets.")
    parser.add_argument("--data-dir", default=DATA_DIR, help=f"Dataset directory (default: {DATA_DIR})")
    sub = parser.add_subparsers(dest="command", required=True)

    upload = sub.add_parser("upload", help="Merge one or more CSV files into a dataset")
    upload.add_argument("dataset", help=f"Dataset name, e.g. {DEFAULT_DATASET}")
    upload.add_argument("files", nargs="+", type=Path)

    fetch = sub.add_parser("fetch", help="Print a dataset's records")
    fetch.add_argument("dataset", nargs="?", default=DEFAULT_DATASET)

    export = sub.add_parser("export", help="Write a dataset's CSV to a file or stdout")
    export.add_argument("dataset", nargs="?", default=DEFAULT_DATASET)
    export.add_argument("--out", type=Path, default=None, help="Output path (default: stdout)")

    sub.add_parser("list", help="List datasets")
    return parser


async def upload_files(
    service: LeadDatasetService,
    dataset: str,
    paths: List[Path],
    concurrency: int = CONCURRENCY,
) -> List[Tuple[Path, Optional[MergeOutcome], Optional[Exception]]]:
    """
    Merge several files into one dataset concurrently.

    Each merge runs in a worker thread; the engine's per-dataset lock keeps
    the read-modify-write cycles from interleaving.

    Returns:
        List of (path, outcome, error) in input order. Exactly one of outcome/error is set.
    """
    semaphore = asyncio.Semaphore(concurrency)

    async def upload_one(path: Path):
        async with semaphore:
            logger.debug(f"▶️ Uploading {path} into '{dataset}'")
            try:
                content = await asyncio.to_thread(path.read_bytes)
                outcome = await asyncio.to_thread(service.upload, content, dataset)
                return path, outcome, None
            except (LeadMergeError, OSError) as e:
                logger.debug(f"⚠️ Upload of {path} rejected: {e}")
                return path, None, e

    return await asyncio.gather(*[upload_one(path) for path in paths])


async def main(argv: Optional[List[str]] = None) -> int:
    """
    Run one CLI command.

    - upload: merges files concurrently and prints one summary line per file.
    - fetch: prints the dataset's records as CSV rows.
    - export: writes the dataset's CSV bytes.
    - list: prints dataset names.
    """
    args = build_parser().parse_args(argv)

    # Initialize logs
    logger.remove()  # Remove default handler
    logger.add(sys.stderr, level=LOG_LEVEL, format="<green>{time:HH:mm:ss}</green> | <level>{message}</level>")

    service = LeadDatasetService(FileDatasetStore(args.data_dir), max_upload_bytes=MAX_UPLOAD_BYTES)
    exit_code = 0

    try:
        if args.command == "upload":
            results = await upload_files(service, args.dataset, args.files)
            for path, outcome, error in results:
                if error is not None:
                    details = error.to_dict() if isinstance(error, LeadMergeError) else str(error)
                    print(f"{path}: FAILED {details}")
                    exit_code = 1
                else:
                    print(f"{path}: {outcome.admitted} new, {outcome.skipped} skipped, {outcome.total} total")

        elif args.command == "fetch":
            records = await asyncio.to_thread(service.fetch, args.dataset)
            writer = csv.writer(sys.stdout)
            writer.writerow(service.schema.columns)
            for record in records:
                writer.writerow(service.schema.to_row(record))

        elif args.command == "export":
            export = await asyncio.to_thread(service.export, args.dataset)
            if args.out is None:
                sys.stdout.write(export.content.decode("utf-8"))
            else:
                out_path = args.out / export.filename if args.out.is_dir() else args.out
                out_path.write_bytes(export.content)
                print(f"Exported {export.filename} to {out_path}")

        elif args.command == "list":
            for name in service.list_datasets():
                print(name)
    except LeadMergeError as e:
        print(f"Error: {e.to_dict()}", file=sys.stderr)
        exit_code = 1

    return exit_code


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
