from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

Base = declarative_base()


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for the registry store.

    An in-memory SQLite URL gets a single shared connection so every session
    of one registry sees the same database.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, echo=echo, **kwargs)

        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(database_url, echo=echo)


def create_session_factory(engine: Engine) -> sessionmaker:
    # Snapshots are built from instances after commit
    return sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
    )


def init_db(engine: Engine) -> None:
    """Create the schema and seed the id sequences if they are missing."""
    # Import models so they are registered on Base.metadata
    import rental_registry.db.models  # noqa: F401
    from rental_registry.db.models.id_sequence import SEQUENCE_NAMES, IdSequence

    Base.metadata.create_all(bind=engine)

    session = create_session_factory(engine)()
    try:
        existing = {row.name for row in session.query(IdSequence).all()}
        for name in SEQUENCE_NAMES:
            if name not in existing:
                session.add(IdSequence(name=name, value=0))
        session.commit()
    finally:
        session.close()
