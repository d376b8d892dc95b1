from doctranslator.session.base import BaseStorage
from doctranslator.session.json_file_storage import JsonFileStorage
from doctranslator.session.memory_storage import MemoryStorage
from doctranslator.session.models import Session
from doctranslator.session.store import SessionStore

__all__ = ["BaseStorage", "JsonFileStorage", "MemoryStorage", "Session", "SessionStore"]
