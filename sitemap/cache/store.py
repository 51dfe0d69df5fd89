"""
Repository-backed storage of sitemap files, one per owner node and locale.

Reads go through the session that loaded the owner node (the visitor's).
Writes open a short-lived system session on the live workspace, since
visitors that trigger a regeneration cannot write published content.
"""
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import object_session

from config.settings import settings
from sitemap import crud
from sitemap.db import SessionLocal, system_session
from sitemap.errors import CacheReadError, RepositoryError
from sitemap.models import ContentNode
from .core import CacheEntry, SITEMAP_MIME_TYPE
from .keys import CACHE_NAME, cache_key_for

logger = logging.getLogger("cache.store")


class CacheStore:
    """
    Reads and writes the sitemap file stored under a content node.
    """

    def __init__(
        self,
        session_factory=SessionLocal,
        workspace: Optional[str] = None,
        cache_name: str = CACHE_NAME,
    ):
        """
        Args:
            session_factory: Factory for privileged write sessions
            workspace: Workspace written to (defaults to the live workspace)
            cache_name: Prefix of stored file names
        """
        self._session_factory = session_factory
        self._workspace = workspace or settings.live_workspace
        self._cache_name = cache_name

    def key_for(self, locale: str) -> str:
        return cache_key_for(locale, prefix=self._cache_name)

    def get(self, owner: Optional[ContentNode], locale: str) -> Optional[CacheEntry]:
        """
        Get the stored file for an owner node and locale.

        Returns:
            The entry, or None if the owner has no file for this locale

        Raises:
            RepositoryError: Owner handle is detached or the query fails
        """
        if owner is None:
            return None

        db = object_session(owner)
        if db is None:
            raise RepositoryError(f"Node handle is no longer attached to a session: {owner!r}")

        name = self.key_for(locale)
        try:
            file = crud.get_child_file(db, owner, name)
        except SQLAlchemyError as e:
            raise RepositoryError(f"Unable to read {name} under {owner.path}: {e}") from e

        if file is None:
            return None
        return CacheEntry(
            owner_path=owner.path,
            locale=locale,
            data=file.data,
            content_type=file.mime_type,
            last_modified=file.last_modified,
        )

    def read_text(self, owner: Optional[ContentNode], locale: str) -> str:
        """
        Read the stored file back as text.

        Raises:
            CacheReadError: No file stored, or its content is not valid UTF-8
            RepositoryError: Owner handle is detached or the query fails
        """
        entry = self.get(owner, locale)
        if entry is None:
            path = owner.path if owner is not None else None
            raise CacheReadError(f"No {self.key_for(locale)} stored under {path}")
        try:
            return entry.text()
        except UnicodeDecodeError as e:
            raise CacheReadError(f"Corrupt {self.key_for(locale)} under {entry.owner_path}: {e}") from e

    def put(
        self,
        owner_path: str,
        locale: str,
        data: bytes,
        content_type: str = SITEMAP_MIME_TYPE,
    ) -> None:
        """
        Create or overwrite the stored file and commit.

        Raises:
            RepositoryError: Owner node missing or the commit fails
        """
        name = self.key_for(locale)
        with system_session(self._workspace, session_factory=self._session_factory) as db:
            try:
                node = crud.get_node_by_path(db, self._workspace, owner_path)
                if node is None:
                    raise RepositoryError(f"Node not found: {self._workspace}:{owner_path}")
                crud.upload_file(db, node, name, data, content_type)
                db.commit()
            except SQLAlchemyError as e:
                raise RepositoryError(f"Unable to save {name} under {owner_path}: {e}") from e

        logger.info(f"Stored {name} under {owner_path} ({len(data)} bytes)")
