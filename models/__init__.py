"""
Persistence package.

`storage` is the process-wide DBStorage; the app factory connects it to the
configured database before any request is served.
"""
from models.db_storage import DBStorage

storage = DBStorage()
