"""DTOs for record use cases (no dependency on ORM or Redis)."""

from dataclasses import dataclass, field

from cms.domain.entities.record import RecordEntity


@dataclass(frozen=True)
class RecordPage:
    """One page of a listing.

    ``cursor`` is an opaque continuation token owned by the store that
    produced it; ``None`` means the listing is exhausted. Cursors are not
    portable between store implementations.
    """

    records: list[RecordEntity] = field(default_factory=list)
    cursor: str | None = None
