"""
Skill service: persistence operations for Skill against a shared session.

Every value reaches the store as a bound parameter. The session is owned by
the caller; this module commits or rolls back after each statement so no
transaction spans two calls, but never closes it.

Read operations have two layers. lookup/fetch_* return a QueryResult that
keeps a store failure distinguishable from an empty result; the public
retrieve*/search_by_term methods collapse a failure into None or [] after
logging it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, List, NamedTuple, Optional

from sqlalchemy import delete, insert, select
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from .database import skill_table
from .errors import FatalStoreError, InvalidInputError, NotFoundError, StoreFailure
from .identifiers import IdentifierGenerator
from .logger import StructuredLogger, get_logger
from .schema import (
    is_valid_id,
    validate_lookup_id,
    validate_pagination,
    validate_skill,
    validate_term,
)
from .skill import Skill

LIKE_ESCAPE = "\\"


class QueryStatus(Enum):
    FOUND = "found"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass
class QueryResult:
    """Outcome of a read: FOUND with skills, EMPTY, or FAILED with the cause."""

    status: QueryStatus
    skills: List[Skill] = field(default_factory=list)
    failure: Optional[StoreFailure] = None

    @classmethod
    def of(cls, skills: List[Skill]) -> "QueryResult":
        return cls(QueryStatus.FOUND if skills else QueryStatus.EMPTY, skills)

    @classmethod
    def failed(cls, failure: StoreFailure) -> "QueryResult":
        return cls(QueryStatus.FAILED, [], failure)

    @property
    def ok(self) -> bool:
        return self.status is not QueryStatus.FAILED

    def one(self) -> Skill:
        """Return the first skill, or raise NotFoundError / the StoreFailure."""
        if self.status is QueryStatus.FAILED:
            raise self.failure
        if self.status is QueryStatus.EMPTY:
            raise NotFoundError("Skill not found")
        return self.skills[0]


class _Executed(NamedTuple):
    rows: List[Any]
    rowcount: int


def like_pattern(term: str) -> str:
    """Wrap term in % wildcards, escaping LIKE metacharacters inside it."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


class SkillService:
    """
    Interface to the data store for Skill objects.

    Args:
        session: Shared SQLAlchemy session. Its lifecycle belongs to the caller.
        logger: Structured logger (default: global logger)
        id_max_attempts: Identifier candidates tried before a fatal error
        id_source: Optional candidate factory passed to IdentifierGenerator
    """

    def __init__(
        self,
        session,
        logger: Optional[StructuredLogger] = None,
        id_max_attempts: int = 100,
        id_source=None,
    ):
        self.session = session
        self.logger = logger or get_logger()
        self.generator = IdentifierGenerator(
            self.exists,
            max_attempts=id_max_attempts,
            source=id_source,
            logger=self.logger,
        )

    # Public operations

    def retrieve(self, skill_id: str) -> Optional[Skill]:
        """Fetch one skill by id. None when absent or when the store failed."""
        result = self.lookup(skill_id)
        if result.status is QueryStatus.FAILED:
            self.logger.warning("Skill lookup degraded to not found", id=skill_id)
        return result.skills[0] if result.skills else None

    def retrieve_all(self, page: int = 1, results_per_page: int = 50) -> List[Skill]:
        """Return one page of skills ordered by id. [] when empty or on store failure."""
        return self._degrade(self.fetch_page(page, results_per_page), "retrieve_all")

    def retrieve_by_ids(self, ids: Iterable[str]) -> List[Skill]:
        return self._degrade(self.fetch_by_ids(ids), "retrieve_by_ids")

    def search_by_term(self, term: str) -> List[Skill]:
        """Case-insensitive substring match on name."""
        return self._degrade(self.fetch_matching(term), "search_by_term")

    def save(self, skill: Skill) -> bool:
        """
        Insert skill, or update only its authorized flag if the id exists.

        A skill without an id gets a fresh id and creation time and is
        written with a plain insert, so a concurrent creator that took the
        same id makes this call fail rather than update the other row.

        Returns:
            True on success, False when the store rejected the statement

        Raises:
            InvalidInputError: name is empty or the supplied id is malformed
            FatalStoreError: the existence check failed during id generation
        """
        errors = validate_skill(skill)
        if errors:
            self.logger.warning("Rejected skill save", errors=errors)
            raise InvalidInputError("; ".join(errors))

        if skill.id is None:
            skill.id = self.generator.generate()
            if skill.added is None:
                skill.added = datetime.now()
            statement = insert(skill_table).values(**skill.to_row())
        else:
            row = skill.to_row()
            # only used if the row turns out to be new; never written back to skill
            if row["added"] is None:
                row["added"] = datetime.now()
            statement = self._upsert_statement(row)

        try:
            self._execute("save", statement)
        except StoreFailure:
            return False

        self.logger.info("Saved skill", id=skill.id, authorized=skill.authorized)
        return True

    def delete(self, skill_id: str) -> bool:
        """Delete by id. False for malformed ids, zero matches or store failure."""
        if not is_valid_id(skill_id):
            self.logger.warning("Rejected delete of malformed id", id=skill_id)
            return False

        try:
            executed = self._execute(
                "delete", delete(skill_table).where(skill_table.c.id == skill_id)
            )
        except StoreFailure:
            return False

        if executed.rowcount < 1:
            return False
        self.logger.info("Deleted skill", id=skill_id)
        return True

    def exists(self, skill_id: str) -> bool:
        """
        Whether a skill with this id is stored.

        A store failure raises FatalStoreError instead of answering False:
        identifier generation relies on this to detect collisions.
        """
        statement = select(skill_table.c.id).where(skill_table.c.id == skill_id).limit(1)
        try:
            executed = self._execute("exists", statement)
        except StoreFailure as e:
            self.logger.critical("Existence check failed", id=skill_id, error=str(e.cause))
            raise FatalStoreError(f"Could not check whether {skill_id!r} exists") from e
        return len(executed.rows) > 0

    # Tagged reads

    def lookup(self, skill_id: str) -> QueryResult:
        self._require(validate_lookup_id(skill_id))
        statement = select(skill_table).where(skill_table.c.id == skill_id)
        return self._query("retrieve", statement)

    def fetch_page(self, page: int, results_per_page: int) -> QueryResult:
        self._require(validate_pagination(page, results_per_page))
        offset = (page - 1) * results_per_page
        statement = (
            select(skill_table)
            .order_by(skill_table.c.id)
            .limit(results_per_page)
            .offset(offset)
        )
        return self._query("retrieve_all", statement)

    def fetch_by_ids(self, ids: Iterable[str]) -> QueryResult:
        if isinstance(ids, str):
            raise InvalidInputError("ids must be a collection of ids, not a single string")
        ids = list(dict.fromkeys(ids))
        if any(not isinstance(skill_id, str) for skill_id in ids):
            raise InvalidInputError("ids must all be strings")
        if not ids:
            return QueryResult.of([])

        statement = (
            select(skill_table)
            .where(skill_table.c.id.in_(ids))
            .order_by(skill_table.c.id)
        )
        return self._query("retrieve_by_ids", statement)

    def fetch_matching(self, term: str) -> QueryResult:
        self._require(validate_term(term))
        statement = (
            select(skill_table)
            .where(skill_table.c.name.ilike(like_pattern(term), escape=LIKE_ESCAPE))
            .order_by(skill_table.c.id)
        )
        return self._query("search_by_term", statement)

    # Internals

    def _require(self, errors: List[str]) -> None:
        if errors:
            self.logger.warning("Invalid input", errors=errors)
            raise InvalidInputError("; ".join(errors))

    def _degrade(self, result: QueryResult, operation: str) -> List[Skill]:
        if result.status is QueryStatus.FAILED:
            self.logger.warning(f"{operation} degraded to empty result")
        return result.skills

    def _query(self, operation: str, statement) -> QueryResult:
        try:
            executed = self._execute(operation, statement)
        except StoreFailure as e:
            return QueryResult.failed(e)
        return QueryResult.of([Skill.from_row(row) for row in executed.rows])

    def _execute(self, operation: str, statement) -> _Executed:
        """Run one statement and end its transaction. Raises StoreFailure."""
        self.logger.debug("Executing statement", operation=operation)
        self.logger.record_statement(operation)
        try:
            result = self.session.execute(statement)
            rows = result.mappings().all() if result.returns_rows else []
            rowcount = len(rows) if result.returns_rows else result.rowcount
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            self.logger.record_store_failure(operation, type(e).__name__)
            self.logger.error(
                "Store statement failed",
                operation=operation,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise StoreFailure(operation, e) from e

        return _Executed(rows, rowcount)

    def _upsert_statement(self, row: dict):
        dialect = self.session.get_bind().dialect.name
        if dialect in ("mysql", "mariadb"):
            statement = mysql.insert(skill_table).values(**row)
            return statement.on_duplicate_key_update(
                authorized=statement.inserted.authorized
            )

        dialect_insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
        statement = dialect_insert(skill_table).values(**row)
        return statement.on_conflict_do_update(
            index_elements=[skill_table.c.id],
            set_={"authorized": statement.excluded.authorized},
        )
