"""
Database models for the content repository
SQLAlchemy ORM models for content nodes and their file children
"""
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Integer, LargeBinary, String, UniqueConstraint
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()

PAGE_NODE_TYPE = "jnt:page"
SITEMAP_NODE_TYPES = ("jseont:sitemapResource", "jseont:sitemap")


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored by SQLite."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ContentNode(Base):
    """
    Content node - one record per path per workspace
    Pages, sitemaps and any other renderable resource
    """
    __tablename__ = "content_nodes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    workspace = Column(String, nullable=False, index=True)
    path = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    parent_id = Column(Integer, ForeignKey("content_nodes.id"), nullable=True)
    node_type = Column(String, nullable=False)
    template = Column(String, nullable=False, default="default")
    title = Column(String, nullable=True)
    exclude_from_sitemap = Column(Boolean, nullable=False, default=False)
    last_modified = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    parent = relationship("ContentNode", remote_side=[id], back_populates="children")
    children = relationship("ContentNode", back_populates="parent")
    files = relationship("NodeFile", back_populates="node", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("workspace", "path", name="uq_node_workspace_path"),
    )

    def __repr__(self):
        return f"<ContentNode(workspace='{self.workspace}', path='{self.path}')>"


class NodeFile(Base):
    """
    File artifact stored as a named child of a content node
    One record per node per name
    """
    __tablename__ = "node_files"

    id = Column(Integer, primary_key=True, autoincrement=True)
    node_id = Column(Integer, ForeignKey("content_nodes.id"), nullable=False)
    name = Column(String, nullable=False)
    mime_type = Column(String, nullable=False)
    data = Column(LargeBinary, nullable=False)
    last_modified = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    node = relationship("ContentNode", back_populates="files")

    __table_args__ = (
        UniqueConstraint("node_id", "name", name="uq_file_node_name"),
    )

    def __repr__(self):
        return f"<NodeFile(node_id={self.node_id}, name='{self.name}', mime_type='{self.mime_type}')>"
