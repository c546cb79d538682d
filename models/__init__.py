"""
Persistence package: SQLAlchemy models plus the shared DBStorage instance.

`storage` is bound to a database by the application factory
(`storage.configure(url)` followed by `storage.reload()`).
"""
from models.db_storage import DBStorage

storage = DBStorage()
