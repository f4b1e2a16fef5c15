"""
Blocks de contenu côté éditeur et moteur de réordonnancement.

Toutes les fonctions sont pures: elles prennent une séquence de blocks et
retournent une nouvelle liste dont les positions valent toujours 0..N-1
dans l'ordre de la liste.
"""

import itertools
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Union
from app.models.content_block import ContentType


@dataclass(frozen=True)
class Persisted:
    """Block déjà enregistré en base"""
    id: int


@dataclass(frozen=True)
class Pending:
    """Block créé dans l'éditeur, pas encore enregistré"""
    local_id: str


BlockRef = Union[Persisted, Pending]

EDITABLE_FIELDS = ("type", "title", "url", "icon", "text_content")

# valeurs par défaut d'un nouveau block, par type
NEW_BLOCK_DEFAULTS: Dict[ContentType, Dict[str, Optional[str]]] = {
    ContentType.LINK: {"title": "New Link", "url": "https://", "icon": None, "text_content": None},
    ContentType.TEXT: {"title": "New Text Block", "url": None, "icon": None, "text_content": "Start writing your text here..."},
    ContentType.HEADER: {"title": "Your Page Title", "url": None, "icon": None, "text_content": "Optional subheading for your page..."},
}


@dataclass(frozen=True)
class EditorBlock:
    ref: BlockRef
    type: ContentType
    position: int
    title: Optional[str] = None
    url: Optional[str] = None
    icon: Optional[str] = None
    text_content: Optional[str] = None
    clicks: int = 0

    @property
    def is_pending(self) -> bool:
        return isinstance(self.ref, Pending)

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "EditorBlock":
        return cls(
            ref=Persisted(int(data["id"])),
            type=ContentType(data["type"]),
            position=data.get("position", 0),
            title=data.get("title"),
            url=data.get("url"),
            icon=data.get("icon"),
            text_content=data.get("text_content"),
            clicks=data.get("clicks") or 0,
        )

    def to_payload(self) -> Dict[str, Any]:
        """Format attendu par PUT /pages/{id}/blocks (id None = à créer)"""
        return {
            "id": self.ref.id if isinstance(self.ref, Persisted) else None,
            "type": self.type.value,
            "position": self.position,
            "title": self.title,
            "url": self.url,
            "icon": self.icon,
            "text_content": self.text_content,
        }


class LocalIdGenerator:
    """Identifiants temporaires des blocks non enregistrés: local-1, local-2, ..."""

    def __init__(self, prefix: str = "local"):
        self.prefix = prefix
        self._counter = itertools.count(1)

    def __call__(self) -> Pending:
        return Pending(f"{self.prefix}-{next(self._counter)}")


def normalize_positions(blocks: Sequence[EditorBlock]) -> List[EditorBlock]:
    return [block if block.position == index else replace(block, position=index) for index, block in enumerate(blocks)]


def _index_of(blocks: Sequence[EditorBlock], ref: BlockRef) -> Optional[int]:
    for index, block in enumerate(blocks):
        if block.ref == ref:
            return index
    return None


def reorder_blocks(blocks: Sequence[EditorBlock], moved: BlockRef, target: BlockRef) -> List[EditorBlock]:
    """
    Déplace `moved` à l'index de `target` (comportement drag & drop).

    No-op si moved == target ou si l'un des deux est absent.
    """
    old_index = _index_of(blocks, moved)
    new_index = _index_of(blocks, target)
    if moved == target or old_index is None or new_index is None:
        return normalize_positions(blocks)

    items = list(blocks)
    item = items.pop(old_index)
    items.insert(new_index, item)
    return normalize_positions(items)


def add_block(blocks: Sequence[EditorBlock], block_type: ContentType, ref: BlockRef) -> List[EditorBlock]:
    """
    LINK / TEXT: ajoutés à la fin.
    HEADER: toujours en position 0, les autres blocks décalés de +1.
    """
    block_type = ContentType(block_type)
    defaults = NEW_BLOCK_DEFAULTS[block_type]

    if block_type == ContentType.HEADER:
        shifted = [replace(block, position=block.position + 1) for block in blocks]
        items = [EditorBlock(ref=ref, type=block_type, position=0, **defaults)] + shifted
    else:
        position = max(block.position for block in blocks) + 1 if blocks else 0
        items = list(blocks) + [EditorBlock(ref=ref, type=block_type, position=position, **defaults)]

    return normalize_positions(items)


def delete_block(blocks: Sequence[EditorBlock], ref: BlockRef) -> List[EditorBlock]:
    return normalize_positions([block for block in blocks if block.ref != ref])


def update_block_field(blocks: Sequence[EditorBlock], ref: BlockRef, field: str, value: Any) -> List[EditorBlock]:
    if field not in EDITABLE_FIELDS:
        raise ValueError(f"Unknown content block field: {field}")
    if field == "type":
        value = ContentType(value)
    return [replace(block, **{field: value}) if block.ref == ref else block for block in blocks]
