import time
from typing import Dict, List, Optional

from loguru import logger

from leadmerge.csv_codec import decode_content, parse_dataset, parse_records, read_header, serialize_records
from leadmerge.errors import NoDataRowsError, ParseError, StoreReadError
from leadmerge.identity import IdentifierResolver, dedupe_records, resolve_identifier
from leadmerge.locks import DATASET_LOCKS, KeyedLock
from leadmerge.models import LEAD_SCHEMA, BusinessRecord, MergeOutcome, RecordSchema
from leadmerge.schema_validator import validate_header
from leadmerge.store import DatasetStore, normalize_dataset_name


class MergeEngine:
    """
    Merges uploaded lead CSVs into a stored dataset without overwriting existing rows.

    Existing records keep their position and values; incoming records whose
    identifier is not yet present are appended in upload order. Merges on the
    same dataset are serialized through `locks`, which defaults to the
    process-wide DATASET_LOCKS and is keyed by the store's `lock_key`.
    """

    def __init__(
        self,
        store: DatasetStore,
        schema: RecordSchema = LEAD_SCHEMA,
        resolve: IdentifierResolver = resolve_identifier,
        locks: Optional[KeyedLock] = None,
    ):
        self.store = store
        self.schema = schema
        self.resolve = resolve
        self.locks = locks if locks is not None else DATASET_LOCKS

    def load_existing(self, dataset_name: str) -> List[BusinessRecord]:
        """
        Read a dataset's records in stored order. A dataset that was never written is empty.

        Raises:
            StoreReadError: If the store fails or the stored file cannot be parsed.
        """
        name = normalize_dataset_name(dataset_name)
        data = self.store.read(name)
        if data is None:
            logger.debug(f"📭 Dataset '{name}' does not exist yet, treating as empty")
            return []
        try:
            return parse_dataset(decode_content(data), self.schema)
        except ParseError as e:
            raise StoreReadError(name, f"stored dataset is not readable CSV: {e}") from e

    def merge(self, content: bytes, dataset_name: str) -> MergeOutcome:
        """
        Validate an upload and merge its new records into `dataset_name`.

        Args:
            content (bytes): Raw bytes of the uploaded CSV.
            dataset_name (str): Target dataset, normalized to end with ".csv".

        Returns:
            MergeOutcome: Admitted/skipped counts and the dataset's new total.

        Raises:
            EmptyInputError: No non-blank line in the upload.
            SchemaError: Header does not match the schema.
            ParseError: Upload rows are malformed.
            NoDataRowsError: Upload has a header but no rows.
            StoreReadError / StoreWriteError: The store failed.
        """
        start = time.perf_counter()
        name = normalize_dataset_name(dataset_name)

        # Validation and parsing happen before the dataset is touched
        text = decode_content(content)
        validate_header(read_header(text), self.schema)
        incoming = parse_records(text, self.schema)
        if not incoming:
            raise NoDataRowsError()

        unique, duplicates = dedupe_records(incoming, self.resolve)
        logger.debug(f"📥 '{name}': {len(incoming)} uploaded rows, {duplicates} duplicates within upload")

        with self.locks.hold(self.store.lock_key(name)):
            existing = self.load_existing(name)
            known: Dict[str, BusinessRecord] = {self.resolve(record): record for record in existing}

            admitted: List[BusinessRecord] = []
            for record in unique:
                key = self.resolve(record)
                if key in known:
                    continue
                known[key] = record
                admitted.append(record)

            merged = existing + admitted
            self.store.write(name, serialize_records(merged, self.schema))

        outcome = MergeOutcome(
            admitted=len(admitted),
            skipped=len(incoming) - len(admitted),
            total=len(merged),
            duplicates=duplicates,
        )
        duration = time.perf_counter() - start
        logger.info(
            f"✅ Merged upload into '{name}' in {duration:.2f}s: "
            f"{outcome.admitted} new, {outcome.skipped} skipped, {outcome.total} total"
        )
        return outcome
