from typing import Callable, Iterable, List, Tuple

from leadmerge.models import BusinessRecord

IdentifierResolver = Callable[[BusinessRecord], str]


def resolve_identifier(record: BusinessRecord) -> str:
    """
    Return the key used to detect duplicate businesses.

    The scraped Google Maps link is preferred. Rows without one fall back to
    "<name>-<address>", which is sensitive to whitespace and case differences.
    """
    if record.link_id:
        return record.link_id
    return f"{record.name}-{record.address}"


def dedupe_records(
    records: Iterable[BusinessRecord],
    resolve: IdentifierResolver = resolve_identifier,
) -> Tuple[List[BusinessRecord], int]:
    """
    Keep the first record seen for each identifier, preserving order.

    Returns:
        Tuple[List[BusinessRecord], int]: (unique records, number of records dropped)
    """
    seen = set()
    unique: List[BusinessRecord] = []
    dropped = 0
    for record in records:
        key = resolve(record)
        if key in seen:
            dropped += 1
            continue
        seen.add(key)
        unique.append(record)
    return unique, dropped
