from sqlalchemy import create_engine, event, delete
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.exc import SQLAlchemyError

from models.base_model import Base
from models.user import User
from models.post import Post
from models.comment import Comment
from models.refresh_token import RefreshToken

DEFAULT_DATABASE_URL = "sqlite:///blog.db"

# Map model names for easy querying
classes = {
    "User": User,
    "Post": Post,
    "Comment": Comment,
    "RefreshToken": RefreshToken,
}


class DBStorage:
    __engine = None
    __session = None

    def __init__(self, database_url=None):
        self.database_url = database_url or DEFAULT_DATABASE_URL

    def configure(self, database_url=None, echo=False):
        """(Re)create the engine for `database_url`; call reload() afterwards."""
        if self.__session is not None:
            self.__session.remove()
        if self.__engine is not None:
            self.__engine.dispose()
        self.database_url = database_url or DEFAULT_DATABASE_URL
        self.__engine = create_engine(self.database_url, echo=echo, pool_pre_ping=True)
        # Enable SQLite foreign keys (needed for ON DELETE CASCADE)
        if self.__engine.url.get_backend_name() == "sqlite":
            @event.listens_for(self.__engine, "connect")
            def _set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

    def reload(self):
        """Create tables and start session"""
        if self.__engine is None:
            self.configure(self.database_url)
        Base.metadata.create_all(self.__engine)
        session_factory = sessionmaker(bind=self.__engine, expire_on_commit=False)
        self.__session = scoped_session(session_factory)

    def drop_all(self):
        """Drop every table (test teardown)."""
        if self.__session is not None:
            self.__session.remove()
        Base.metadata.drop_all(self.__engine)

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

    def delete(self, obj=None):
        """Delete object if exists (hard delete)"""
        if obj:
            self.__session.delete(obj)

    def delete_where(self, cls, *criteria):
        """
        Bulk DELETE of `cls` rows matching `criteria`, committed immediately.
        Returns the number of rows removed, so callers can use the count as a
        conditional (e.g. consume-once semantics).
        """
        stmt = delete(cls).where(*criteria).execution_options(synchronize_session="fetch")
        try:
            result = self.__session.execute(stmt)
            self.__session.commit()
        except SQLAlchemyError:
            self.__session.rollback()
            raise
        return result.rowcount or 0

    def get(self, cls, id):
        """Fetch one object by class and ID"""
        if cls in classes.values():
            return self.__session.get(cls, id)
        return None

    def close(self):
        """Remove session (for API teardown)"""
        if self.__session is not None:
            self.__session.remove()

    # expose the SQLAlchemy session for advanced querying (joins, filters, etc.)
    def get_session(self):
        return self.__session
