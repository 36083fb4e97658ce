"""Persistence layer: the process-wide DBStorage instance lives here."""
from models.db_storage import DBStorage

storage = DBStorage()
