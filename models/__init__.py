"""
Persistence package: SQLAlchemy models plus the shared DBStorage instance.
"""
from models.db_storage import DBStorage

storage = DBStorage()
storage.reload()
