"""GTID display formatting."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from replication_console.integrations.repman.models import GtidRecord


def _coerce(record: GtidRecord | Mapping[str, Any]) -> GtidRecord:
    if isinstance(record, GtidRecord):
        return record
    return GtidRecord.model_validate(record)


def format_gtid(records: Iterable[GtidRecord | Mapping[str, Any]] | None) -> str:
    """Render replication positions as ``domain-server-seq`` joined by commas.

    Input order is kept; GTID lists are ordered by domain on the server side
    and that order is meaningful to operators.

    Args:
        records: GtidRecord instances or raw API mappings
            (``domainId``/``serverId``/``seqNo``). None is treated as empty.

    Returns:
        e.g. ``"0-1-42,1-2-7"``, or ``""`` for no records.
    """
    if not records:
        return ""
    return ",".join(
        f"{gtid.domain_id}-{gtid.server_id}-{gtid.seq_no}" for gtid in map(_coerce, records)
    )
