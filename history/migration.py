# history/migration.py
"""
Legacy note id migration.

Old history blobs stored note ids as LZ-string compressToBase64() output of
the 36-character UUID string. Current blobs store the canonical base64url
encoding (see history.note_ids). Every read runs each id through
IdentifierMigrator so legacy ids are upgraded transparently.

Migration is best-effort: an id that cannot be decoded is left as it is and
will be tried again on the next read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from lzstring import LZString

from history.note_ids import UUID_STRING_LENGTH, check_note_id_valid, encode_note_id

_logger = logging.getLogger(__name__)

# Shortest base64 form of a compressed UUID, minus one character of slack.
# Ids no longer than this are never handed to the decoder.
DEFAULT_LEGACY_LENGTH_FLOOR = (4 * UUID_STRING_LENGTH) // 3 - 1

# Decoder errors expected for ids that were never legacy. lzstring raises
# UnboundLocalError when a malformed stream makes it read a dictionary value
# it never assigned, KeyError for a character outside the base64 alphabet
# (such as "-" or "_"), and IndexError when it reads past the end of input.
IGNORABLE_DECODE_ERRORS = (UnboundLocalError, KeyError, IndexError)


class MigrationOutcome(str, Enum):
    """What the migrator did with a candidate id."""
    SKIPPED = "skipped"  # below length floor, decoder not invoked
    MIGRATED = "migrated"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class MigrationResult:
    identifier: str
    outcome: MigrationOutcome

    @property
    def migrated(self) -> bool:
        return self.outcome is MigrationOutcome.MIGRATED


def _default_decompress(value: str) -> Optional[str]:
    return LZString().decompressFromBase64(value)


class IdentifierMigrator:
    """
    Upgrades legacy compressed note ids to the canonical encoding.

    Never raises. Running it on its own output is a no-op, since canonical
    ids are well below the length floor.
    """

    def __init__(
        self,
        length_floor: int = DEFAULT_LEGACY_LENGTH_FLOOR,
        decompress: Optional[Callable[[str], Optional[str]]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            length_floor: Ids with length <= floor skip decoding
            decompress: Legacy decoder (defaults to LZ-string base64)
            logger: Logger for decode failures (defaults to module logger)
        """
        self._length_floor = length_floor
        self._decompress = decompress or _default_decompress
        self._logger = logger or _logger

    @property
    def length_floor(self) -> int:
        return self._length_floor

    def classify(self, candidate: str) -> MigrationResult:
        """Decode candidate if it looks legacy and report the outcome."""
        if len(candidate) <= self._length_floor:
            return MigrationResult(candidate, MigrationOutcome.SKIPPED)

        try:
            decoded = self._decompress(candidate)
        except IGNORABLE_DECODE_ERRORS as e:
            self._logger.info(
                f'Looks like we can not decode "{candidate}" as a legacy note id '
                f"({type(e).__name__}). Can be ignored."
            )
            return MigrationResult(candidate, MigrationOutcome.UNCHANGED)
        except Exception as e:
            self._logger.error(
                f'Unexpected error decoding legacy note id "{candidate}": {e!r}'
            )
            return MigrationResult(candidate, MigrationOutcome.UNCHANGED)

        if decoded and check_note_id_valid(decoded):
            return MigrationResult(encode_note_id(decoded), MigrationOutcome.MIGRATED)
        return MigrationResult(candidate, MigrationOutcome.UNCHANGED)

    def migrate(self, candidate: str) -> str:
        """Return the canonical form of candidate, or candidate itself."""
        return self.classify(candidate).identifier
