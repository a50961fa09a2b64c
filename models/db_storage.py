from sqlalchemy import create_engine, event
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.exc import SQLAlchemyError
from os import getenv
from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///user-accounts.db"


class DBStorage:
    __engine = None
    __session = None

    def __init__(self, database_url=None):
        """Remember the database URL; the engine is built by reload()"""
        self.__database_url = database_url or getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

    @property
    def engine(self):
        return self.__engine

    def _build_engine(self, database_url):
        engine = create_engine(database_url, pool_pre_ping=True)
        if engine.url.get_backend_name() == "sqlite":
            @event.listens_for(engine, "connect")
            def _set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()
        return engine

    def reload(self, database_url=None):
        """Create engine and tables, then start a scoped session.

        Passing a URL rebinds the storage (the app factory does this with the
        configured DATABASE_URL).
        """
        # imported here so every model is registered on Base.metadata
        from models.base_model import Base
        from models.user import User  # noqa: F401

        if database_url:
            self.__database_url = database_url
        if self.__session is not None:
            self.__session.remove()
        if self.__engine is not None:
            self.__engine.dispose()

        self.__engine = self._build_engine(self.__database_url)
        Base.metadata.create_all(self.__engine)
        session_factory = sessionmaker(bind=self.__engine, expire_on_commit=False)
        self.__session = scoped_session(session_factory)

    def new(self, obj):
        """Add object to session"""
        self.__session.add(obj)

    def save(self):
        """Commit session"""
        try:
            self.__session.commit()
        except SQLAlchemyError:
            self.__session.rollback()
            raise

    def get(self, cls, id):
        """Fetch one object by class and ID"""
        if id is None:
            return None
        return self.__session.get(cls, id)

    def close(self):
        """Remove session (for API teardown)"""
        if self.__session is not None:
            self.__session.remove()

    # expose the SQLAlchemy session for filters and conditional updates
    def get_session(self):
        return self.__session
