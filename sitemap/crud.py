"""
CRUD operations for the content repository
Lookup of nodes by path, child file access, and privileged file uploads
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from sitemap.errors import AccessDeniedError, RepositoryError
from sitemap.models import ContentNode, NodeFile, PAGE_NODE_TYPE, utcnow


# ===== NODES =====

def get_node_by_path(db: Session, workspace: str, path: str) -> Optional[ContentNode]:
    """
    Get a node by its absolute path in a workspace
    """
    return (
        db.query(ContentNode)
        .filter(ContentNode.workspace == workspace, ContentNode.path == path)
        .first()
    )


def create_node(
    db: Session,
    workspace: str,
    path: str,
    node_type: str,
    template: str = "default",
    title: Optional[str] = None,
    exclude_from_sitemap: bool = False,
) -> ContentNode:
    """
    Create a node below its parent path (the parent must already exist,
    except for top-level nodes)
    """
    parent_path, _, name = path.rstrip("/").rpartition("/")
    parent = None
    if parent_path:
        parent = get_node_by_path(db, workspace, parent_path)
        if parent is None:
            raise RepositoryError(f"Parent node not found: {workspace}:{parent_path}")

    node = ContentNode(
        workspace=workspace,
        path=path,
        name=name,
        parent=parent,
        node_type=node_type,
        template=template,
        title=title,
        exclude_from_sitemap=exclude_from_sitemap,
    )
    db.add(node)
    db.flush()
    return node


def get_pages_under(db: Session, workspace: str, path: str) -> List[ContentNode]:
    """
    Get all pages below a path that are not excluded from the sitemap,
    ordered by path
    """
    prefix = path.rstrip("/") + "/"
    return (
        db.query(ContentNode)
        .filter(
            ContentNode.workspace == workspace,
            ContentNode.node_type == PAGE_NODE_TYPE,
            ContentNode.path.startswith(prefix, autoescape=True),
            ContentNode.exclude_from_sitemap.is_(False),
        )
        .order_by(ContentNode.path)
        .all()
    )


# ===== FILES =====

def get_child_file(db: Session, node: ContentNode, name: str) -> Optional[NodeFile]:
    """
    Get a named file child of a node, bypassing any stale copy in the session
    """
    return (
        db.query(NodeFile)
        .filter(NodeFile.node_id == node.id, NodeFile.name == name)
        .populate_existing()
        .first()
    )


def upload_file(
    db: Session,
    node: ContentNode,
    name: str,
    data: bytes,
    mime_type: str,
) -> NodeFile:
    """
    Create or overwrite a named file child of a node.

    Only privileged sessions may write; the caller commits.
    """
    if not db.info.get("system"):
        raise AccessDeniedError(
            f"User '{db.info.get('user')}' cannot write {name} under {node.path}"
        )

    file = get_child_file(db, node, name)
    if file is None:
        file = NodeFile(node_id=node.id, name=name)
        db.add(file)
    file.data = data
    file.mime_type = mime_type
    file.last_modified = utcnow()
    db.flush()
    return file
