"""The platform facade tying a dialect's builder, reader and type map together."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING, Any, ClassVar, Protocol

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, SQLAlchemyError

from ddl_toolkit.errors import (
    IntrospectionFailure,
    ResourceFailure,
    UnsupportedDialectFeature,
)
from ddl_toolkit.platform.builder import SqlBuilder, SqlScript
from ddl_toolkit.platform.execution import ExecutionReport, execute_statements
from ddl_toolkit.platform.info import PlatformInfo
from ddl_toolkit.platform.metadata import InspectorMetaData
from ddl_toolkit.platform.reader import ModelReader
from ddl_toolkit.platform.type_map import TypeMap

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from typing import TextIO

    from sqlalchemy import Connection, Engine

    from ddl_toolkit.model.database import Database
    from ddl_toolkit.model.table import Table
    from ddl_toolkit.platform.metadata import DatabaseMetaData

logger = getLogger(__name__)


class Closable(Protocol):
    """Anything holding a connection that must be closed."""

    def close(self) -> None:
        """Release the connection."""
        ...


ConnectionFactory = Callable[[str | None, str, str | None, str | None], Closable]


class EngineConnection:
    """A connection together with the engine that opened it."""

    def __init__(self, engine: Engine) -> None:
        """Open a connection on the engine."""
        self.engine = engine
        try:
            self.connection = engine.connect()
        except SQLAlchemyError:
            engine.dispose()
            raise

    def close(self) -> None:
        """Close the connection and dispose of the engine."""
        try:
            self.connection.close()
        finally:
            self.engine.dispose()


def open_connection(
    driver: str | None,  # noqa: ARG001
    url: str,
    username: str | None,
    password: str | None,
) -> EngineConnection:
    """Open a connection to a SQLAlchemy URL, adding the credentials if given."""
    try:
        parsed = make_url(url)
    except ArgumentError as error:
        msg = f"Cannot open a connection to {url}: not a SQLAlchemy URL"
        raise ResourceFailure(msg) from error
    if username is not None:
        parsed = parsed.set(username=username)
    if password is not None:
        parsed = parsed.set(password=password)
    try:
        return EngineConnection(create_engine(parsed))
    except (SQLAlchemyError, ImportError) as error:
        msg = f"Cannot open a connection to {parsed.render_as_string()}: {error}"
        raise ResourceFailure(msg) from error


def creation_url(url: str, parameters: Mapping[str, str | None] | None = None) -> str:
    """Append ``;create=true`` and the parameters to a Derby style URL.

    A ``create`` parameter given by the caller replaces the default flag.
    """
    parameters = dict(parameters or {})
    options: list[str] = []
    if not any(key.lower() == "create" for key in parameters):
        options.append("create=true")
    options.extend(f"{key}={'' if value is None else value}" for key, value in parameters.items())
    return ";".join([url, *options])


class Platform:
    """Facade over one dialect: SQL generation, execution and introspection.

    A platform holds only immutable configuration, so one instance can serve
    concurrent callers; each operation uses a fresh builder and reader.
    """

    name: ClassVar[str] = "generic"
    builder_class: ClassVar[type[SqlBuilder]] = SqlBuilder
    reader_class: ClassVar[type[ModelReader]] = ModelReader
    drivers: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        info: PlatformInfo | None = None,
        type_map: TypeMap | None = None,
        connection_factory: ConnectionFactory | None = None,
    ) -> None:
        """Initialize with the dialect defaults unless overridden."""
        self.info = info if info is not None else self.default_info()
        self.type_map = (type_map if type_map is not None else self.default_type_map()).freeze()
        self.connection_factory = connection_factory or open_connection

    @classmethod
    def default_info(cls) -> PlatformInfo:
        """Return the dialect's capabilities."""
        return PlatformInfo(name=cls.name)

    @classmethod
    def default_type_map(cls) -> TypeMap:
        """Return the dialect's type spellings."""
        return TypeMap()

    def with_options(self, **changes: Any) -> Platform:
        """Return a copy of the platform with some :class:`PlatformInfo` fields changed."""
        return type(self)(replace(self.info, **changes), self.type_map, self.connection_factory)

    # SQL generation

    def create_builder(self, output: TextIO | None = None) -> SqlBuilder:
        """Return a fresh builder writing into a new script."""
        return self.builder_class(self.info, self.type_map, SqlScript(output))

    def create_reader(self) -> ModelReader:
        """Return a fresh model reader."""
        return self.reader_class(self.info, self.type_map)

    def get_create_tables_sql(
        self,
        database: Database,
        *,
        drop_first: bool = False,
        output: TextIO | None = None,
    ) -> SqlScript:
        """Return the script creating every table of the model."""
        builder = self.create_builder(output)
        builder.create_tables(database, drop_first=drop_first)
        return builder.script

    def get_drop_tables_sql(self, database: Database, *, output: TextIO | None = None) -> SqlScript:
        """Return the script dropping every table of the model."""
        builder = self.create_builder(output)
        builder.drop_tables(database)
        return builder.script

    def get_create_table_sql(
        self,
        table: Table,
        database: Database | None = None,
        *,
        output: TextIO | None = None,
    ) -> SqlScript:
        """Return the script creating a single table."""
        builder = self.create_builder(output)
        builder.create_table(table, database)
        return builder.script

    def get_drop_table_sql(
        self,
        table: Table,
        database: Database | None = None,
        *,
        output: TextIO | None = None,
    ) -> SqlScript:
        """Return the script dropping a single table."""
        builder = self.create_builder(output)
        builder.drop_table(table, database)
        return builder.script

    def get_alter_tables_sql(
        self,
        current: Database,
        desired: Database,
        *,
        output: TextIO | None = None,
    ) -> SqlScript:
        """Return the script turning the current model into the desired one."""
        builder = self.create_builder(output)
        builder.alter_database(current, desired)
        return builder.script

    def select_last_identity_values(self, table: Table) -> str:
        """Return the query reading the identity values last generated for a table."""
        return self.create_builder().select_last_identity_values(table)

    # Execution

    def evaluate_batch(
        self,
        connection: Connection,
        statements: Iterable[str],
        *,
        continue_on_error: bool = False,
    ) -> ExecutionReport:
        """Execute statements on the connection."""
        return execute_statements(
            connection,
            statements,
            continue_on_error=continue_on_error,
        )

    def _execute_script(
        self,
        connection: Connection,
        script: SqlScript,
        *,
        continue_on_error: bool,
    ) -> ExecutionReport:
        report = self.evaluate_batch(
            connection,
            script.statements,
            continue_on_error=continue_on_error,
        )
        report.warnings.extend(script.warnings)
        return report

    def create_tables(
        self,
        connection: Connection,
        database: Database,
        *,
        drop_first: bool = False,
        continue_on_error: bool = False,
    ) -> ExecutionReport:
        """Create the model's tables on the connection."""
        script = self.get_create_tables_sql(database, drop_first=drop_first)
        return self._execute_script(connection, script, continue_on_error=continue_on_error)

    def drop_tables(
        self,
        connection: Connection,
        database: Database,
        *,
        continue_on_error: bool = False,
    ) -> ExecutionReport:
        """Drop the model's tables on the connection."""
        script = self.get_drop_tables_sql(database)
        return self._execute_script(connection, script, continue_on_error=continue_on_error)

    def alter_tables(
        self,
        connection: Connection,
        desired: Database,
        *,
        continue_on_error: bool = False,
        catalog: str | None = None,
        schema: str | None = None,
        table_types: Sequence[str] | None = None,
    ) -> ExecutionReport:
        """Bring the live schema in line with the desired model."""
        current = self.read_model_from_database(
            connection,
            desired.name,
            catalog=catalog,
            schema=schema,
            table_types=table_types,
        )
        script = self.get_alter_tables_sql(current, desired)
        return self._execute_script(connection, script, continue_on_error=continue_on_error)

    # Introspection

    def create_metadata(self, connection: Connection) -> DatabaseMetaData:
        """Return the metadata interface for a connection."""
        try:
            return InspectorMetaData(connection)
        except SQLAlchemyError as error:
            msg = f"Cannot inspect the {self.info.name} database: {error}"
            raise IntrospectionFailure(msg) from error

    def read_model_from_database(
        self,
        connection: Connection,
        name: str | None = None,
        *,
        catalog: str | None = None,
        schema: str | None = None,
        table_types: Sequence[str] | None = None,
    ) -> Database:
        """Read the live schema into a model."""
        return self.create_reader().read(
            self.create_metadata(connection),
            name,
            catalog=catalog,
            schema=schema,
            table_types=table_types,
        )

    # Database creation

    def create_database(
        self,
        driver: str | None,
        url: str,
        username: str | None = None,
        password: str | None = None,
        parameters: Mapping[str, str | None] | None = None,
    ) -> None:
        """Create a new database; only some dialects can do this."""
        msg = f"{self.info.name} databases cannot be created programmatically"
        raise UnsupportedDialectFeature(msg)

    def open_and_close(
        self,
        driver: str | None,
        url: str,
        username: str | None,
        password: str | None,
    ) -> None:
        """Open a connection through the factory and close it again on every path."""
        logger.debug("About to create database using this URL: %s", url)
        try:
            connection = self.connection_factory(driver, url, username, password)
        except ResourceFailure:
            raise
        except Exception as error:
            msg = f"Error while trying to create a database at {url}"
            raise ResourceFailure(msg) from error
        try:
            connection.close()
        except Exception as error:
            msg = f"Error while closing the connection to {url}"
            raise ResourceFailure(msg) from error
        logger.info("Created %s database at %s", self.info.name, url)
