from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class Document:
    id: str
    text_content: str
    description: Optional[str] = None
    created_at: Optional[str] = None  # ISO timestamp as sent by the service


@dataclass
class Subfolder:
    id: str
    name: str
    document_count: int = 0


@dataclass
class Folder:
    id: str
    name: str
    document_count: int = 0
    subfolders: List[Subfolder] = field(default_factory=list)
    documents: List[Document] = field(default_factory=list)


def _edge_nodes(connection: Any) -> list[dict]:
    if not isinstance(connection, dict):
        return []
    edges = connection.get("edges") or []
    return [edge["node"] for edge in edges if isinstance(edge, dict) and isinstance(edge.get("node"), dict)]


def document_from_node(node: dict) -> Document:
    return Document(
        id=str(node["id"]),
        text_content=node.get("textContent") or "",
        description=node.get("description"),
        created_at=node.get("createdAt"),
    )


def subfolder_from_node(node: dict) -> Subfolder:
    return Subfolder(
        id=str(node["id"]),
        name=node.get("name") or "",
        document_count=int(node.get("documentCount") or 0),
    )


def folder_from_node(node: dict) -> Folder:
    documents = [document_from_node(item) for item in _edge_nodes(node.get("documents"))]
    count = node.get("documentCount")
    return Folder(
        id=str(node["id"]),
        name=node.get("name") or "",
        document_count=int(count) if count is not None else len(documents),
        subfolders=[subfolder_from_node(item) for item in _edge_nodes(node.get("subfolders"))],
        documents=documents,
    )


def folders_from_connection(connection: Any) -> List[Folder]:
    return [folder_from_node(node) for node in _edge_nodes(connection)]
