"""
MongoDB client manager that creates and tracks labelled Motor clients.
"""

import atexit
import threading
from typing import Dict

from loguru import logger
from motor.motor_asyncio import AsyncIOMotorClient

from ..config import config


class MongoManager:
    """
    MongoDB client manager.

    - Loads connection strings from MONGO_URL_<LABEL> settings
    - Applies the configured pool size and timeouts to every client
    - Closes all clients on process exit

    The `default` label resolves MONGO_URL_DEFAULT, then MONGO_URL, then a
    localhost fallback.
    """

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if hasattr(self, "_initialized"):
            return

        self._clients: Dict[str, AsyncIOMotorClient] = {}
        self._connection_strings: Dict[str, str] = {}
        self._lock = threading.Lock()

        self._max_pool_size = config.get_mongo_max_pool_size()
        self._server_selection_timeout = config.get_mongo_server_selection_timeout()
        self._connect_timeout = config.get_mongo_connect_timeout()
        self._socket_timeout = config.get_mongo_socket_timeout()
        logger.info(
            "Loaded MongoDB parameters: pool={} server_selection={}ms connect={}ms socket={}ms",
            self._max_pool_size,
            self._server_selection_timeout,
            self._connect_timeout,
            self._socket_timeout,
        )

        self._load_connection_strings()

        atexit.register(self.close_all)

        self._initialized = True

    @staticmethod
    def _label_from_key(key: str) -> str | None:
        if key.startswith("MONGO_URL_"):
            return key[len("MONGO_URL_"):].lower()
        return None

    def _load_connection_strings(self):
        for key, value in config.items():
            label = self._label_from_key(key)
            if label is None or not value:
                continue
            self._connection_strings[label] = value
            logger.info(
                "Loaded MongoDB connection string for label '{}': {}",
                label,
                hide_password(value),
            )

        if "default" not in self._connection_strings:
            self._connection_strings["default"] = config.get_mongo_url("default")

    def get_client(self, label: str | None = None) -> AsyncIOMotorClient:
        """
        Get (or lazily create) the MongoDB client for `label`.

        Raises:
            ValueError: If no connection string is configured for the label
        """
        label = label or "default"

        with self._lock:
            if label not in self._clients:
                if label not in self._connection_strings:
                    raise ValueError(f"No MongoDB connection string found for label '{label}'")

                logger.info("Open MongoDB client for label '{}'", label)
                self._clients[label] = AsyncIOMotorClient(
                    self._connection_strings[label],
                    serverSelectionTimeoutMS=self._server_selection_timeout,
                    connectTimeoutMS=self._connect_timeout,
                    socketTimeoutMS=self._socket_timeout,
                    maxPoolSize=self._max_pool_size,
                    uuidRepresentation="standard",
                )

            return self._clients[label]

    def close_client(self, label: str):
        with self._lock:
            client = self._clients.pop(label, None)
        if client is not None:
            client.close()
            logger.info("Closed MongoDB client for label '{}'", label)

    def close_all(self):
        with self._lock:
            labels = list(self._clients.keys())

        for label in labels:
            self.close_client(label)


def hide_password(connection_string: str) -> str:
    """Mask the password part of a MongoDB URI for logging."""
    if "://" not in connection_string or "@" not in connection_string:
        return connection_string

    scheme, rest = connection_string.split("://", 1)
    auth, _, host = rest.rpartition("@")
    username, sep, password = auth.partition(":")
    if not sep or not username or not password:
        return connection_string

    return f"{scheme}://{username}:***@{host}"


_mongo_manager = None


def get_mongo_manager() -> MongoManager:
    """Get the global MongoDB manager instance."""
    global _mongo_manager
    if _mongo_manager is None:
        _mongo_manager = MongoManager()
    return _mongo_manager


def get_mongo_client(label: str | None = None) -> AsyncIOMotorClient:
    """Get MongoDB client by label."""
    return get_mongo_manager().get_client(label)
