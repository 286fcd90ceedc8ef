"""ID generators. Record ids are ULIDs so they sort by creation time."""

import ulid


def generate_ulid() -> str:
    """Generate a lexicographically sortable unique identifier (ULID).

    Returns:
        26-character Crockford base32 string; later ids sort after earlier ones
        (millisecond resolution).
    """
    return str(ulid.new())
