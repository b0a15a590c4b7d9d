# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Persistence -- snapshot codec and storage backends."""

from .data_access import DataAccess, FileDataAccess, PersistenceIOError
from .snapshot import (
    FORMAT_VERSION,
    GuardSnapshot,
    PersistenceError,
    PersistenceFormatError,
    SessionSnapshot,
    decode_snapshot,
    encode_session,
    encode_snapshot,
)

__all__ = [
    "DataAccess",
    "FORMAT_VERSION",
    "FileDataAccess",
    "GuardSnapshot",
    "PersistenceError",
    "PersistenceFormatError",
    "PersistenceIOError",
    "SessionSnapshot",
    "decode_snapshot",
    "encode_session",
    "encode_snapshot",
]
