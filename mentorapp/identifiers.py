"""
Collision-checked identifier generation.

Candidates are 10 lowercase hex characters (a 2^40 keyspace). Each one is
checked against an existence predicate supplied by the consuming service;
the loop is bounded so a broken predicate cannot spin forever.
"""

import secrets
from typing import Callable, Optional

from .errors import FatalStoreError, IdentifierExhaustedError
from .logger import StructuredLogger, get_logger
from .schema import ID_LENGTH, is_valid_id


def random_hex_id() -> str:
    return secrets.token_hex(ID_LENGTH // 2)


class IdentifierGenerator:
    """
    Produce identifiers that do not collide with any stored id at the
    moment of generation.

    Args:
        exists: Predicate returning True when an id is already taken.
            Exceptions it raises propagate unchanged.
        max_attempts: Candidates to try before giving up
        source: Candidate factory (default: secrets-backed random hex)
        logger: Logger for collision warnings (default: global logger)
    """

    def __init__(
        self,
        exists: Callable[[str], bool],
        max_attempts: int = 100,
        source: Optional[Callable[[], str]] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.exists = exists
        self.max_attempts = max_attempts
        self.source = source or random_hex_id
        self.logger = logger or get_logger()

    def generate(self) -> str:
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.source()
            if not is_valid_id(candidate):
                raise FatalStoreError(f"Identifier source produced malformed id {candidate!r}")

            if not self.exists(candidate):
                self.logger.record_id_generated(collisions=attempt - 1)
                return candidate

            self.logger.warning(
                "Identifier collision, retrying",
                candidate=candidate,
                attempt=attempt,
                max_attempts=self.max_attempts,
            )

        self.logger.critical("Identifier generation exhausted", max_attempts=self.max_attempts)
        raise IdentifierExhaustedError(
            f"No free identifier after {self.max_attempts} attempts"
        )
