import os
import logging
from typing import Optional

from google.cloud.firestore_v1 import AsyncClient

logger = logging.getLogger(__name__)


class FirestoreDB:
    """
    Connection to the document store holding the ``products`` collection.

    Set ``emulator_host`` (or ``FIRESTORE_EMULATOR_HOST`` with
    :meth:`from_env`) to run the catalog against a local emulator.
    """

    def __init__(
        self,
        project_id: str,
        database: str | None = None,
        credentials=None,
        emulator_host: Optional[str] = None,
    ):
        """
        Parameters
        ----------
        project_id :
            Project that owns the catalog database.
        database :
            Database ID; ``None`` selects the project's default database.
        credentials :
            Passed to :class:`AsyncClient`; ``None`` uses application default
            credentials.
        emulator_host :
            ``host:port`` of an emulator to use instead of the hosted service.
        """
        self.project_id = project_id
        self.database = database
        self.credentials = credentials
        self._emulator_host = emulator_host

        self.client: AsyncClient = self._init_client()

    @classmethod
    def from_env(cls, credentials=None) -> "FirestoreDB":
        """
        Build an instance from ``GOOGLE_CLOUD_PROJECT``, ``FIRESTORE_DATABASE``
        and ``FIRESTORE_EMULATOR_HOST``.
        """
        project_id = os.environ.get("GOOGLE_CLOUD_PROJECT") or "catalog-dev"
        database = os.environ.get("FIRESTORE_DATABASE") or None
        emulator_host = os.environ.get("FIRESTORE_EMULATOR_HOST", "").strip() or None
        return cls(
            project_id=project_id,
            database=database,
            credentials=credentials,
            emulator_host=emulator_host,
        )

    # --------------------------------------------------------------------- #
    # Internal helpers                                                      #
    # --------------------------------------------------------------------- #

    def _init_client(self) -> AsyncClient:
        """
        Client for the configured target.  ``FIRESTORE_EMULATOR_HOST`` is
        exported or cleared to match it.
        """
        if self._emulator_host:
            os.environ["FIRESTORE_EMULATOR_HOST"] = self._emulator_host
            logger.info(f"Using Firestore emulator on {self._emulator_host}")
        else:
            os.environ.pop("FIRESTORE_EMULATOR_HOST", None)
            logger.info(f"Using Firestore project {self.project_id}")
        return AsyncClient(
            project=self.project_id,
            database=self.database,
            credentials=self.credentials,
        )

    # --------------------------------------------------------------------- #
    # Public utility methods                                                #
    # --------------------------------------------------------------------- #

    def use_emulator(self, host: str = "localhost:8080"):
        """Reconnect the catalog to the emulator at ``host``."""
        self._emulator_host = host
        self.client = self._init_client()
        logger.info(f"Emulator enabled on {host}")

    def clear_emulator(self):
        """Reconnect the catalog to the hosted service."""
        self._emulator_host = None
        self.client = self._init_client()
        logger.info(f"Emulator disabled, using project {self.project_id}")

    def mock_firestore_for_tests(self):
        """Swap the client for a :class:`unittest.mock.MagicMock`."""
        from unittest.mock import MagicMock

        self.client = MagicMock()
        logger.info("Catalog store client replaced with MagicMock")
