"""
Session d'édition d'une page: état optimiste côté client + sauvegarde.

L'utilisateur modifie les réglages et les blocks localement; save_changes()
envoie uniquement ce qui a changé puis relit l'état canonique.
Chaque opération retourne une Notification (ou None) que l'appelant affiche.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence
from app.core.errors import PageBuilderError, PermissionDeniedError, SlugTakenError, ValidationFailedError
from app.editor import blocks as block_ops
from app.editor.blocks import BlockRef, EditorBlock, LocalIdGenerator, Persisted
from app.editor.dirty_state import DirtyStateTracker, Domain
from app.editor.gateway import PageGateway
from app.editor.notifications import Notification, NotificationKind
from app.models.content_block import ContentType

logger = logging.getLogger(__name__)

PAGE_FIELDS = (
    "title",
    "description",
    "slug",
    "banner_image",
    "font_family",
    "background_color",
    "text_color",
    "accent_color",
    "aliases",
    "show_watermark",
)

# seuls ces champs peuvent être envoyés à null (effacement explicite)
CLEARABLE_FIELDS = {"description", "banner_image", "font_family"}

GENERIC_SAVE_ERROR = "Could not save changes. Please try again."
PERMISSION_ERROR = "You don't have permission to update this page."


@dataclass(frozen=True)
class ColorPreset:
    name: str
    background_color: str
    text_color: str
    accent_color: str


COLOR_PRESETS: Dict[str, ColorPreset] = {
    preset.name: preset
    for preset in (
        ColorPreset("Light", "#FFFFFF", "#000000", "#3B82F6"),
        ColorPreset("Dark", "#1F2937", "#F3F4F6", "#60A5FA"),
        ColorPreset("Midnight", "#111827", "#D1D5DB", "#818CF8"),
        ColorPreset("Sunset", "#FFFBEB", "#422006", "#F97316"),
        ColorPreset("Forest", "#F0FDF4", "#14532D", "#22C55E"),
    )
}


class SaveStatus(str, Enum):
    NOTHING_TO_SAVE = "nothing_to_save"
    IN_PROGRESS = "in_progress"
    SAVED = "saved"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass
class BlockSavePlan:
    creates: List[EditorBlock] = field(default_factory=list)
    updates: List[EditorBlock] = field(default_factory=list)
    deletes: List[int] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.creates or self.updates or self.deletes)


@dataclass
class SaveResult:
    status: SaveStatus
    notification: Notification
    page_saved: bool = False
    blocks_saved: bool = False
    plan: Optional[BlockSavePlan] = None
    # rappel "unsaved changes" à réafficher après un échec
    prompt: Optional[Notification] = None


def clean_aliases(values: Optional[Sequence[str]]) -> List[str]:
    """Trim et suppression des vides"""
    return [value.strip() for value in (values or []) if value and value.strip()]


def page_state_from(data: Dict[str, Any]) -> Dict[str, Any]:
    state = {name: data.get(name) for name in PAGE_FIELDS}
    state["aliases"] = list(data.get("aliases") or [])
    if state["show_watermark"] is None:
        state["show_watermark"] = True
    return state


def build_page_diff(page_id: int, current: Dict[str, Any], snapshot: Dict[str, Any]) -> Dict[str, Any]:
    """
    Payload de mise à jour: id + champs dont la valeur a changé.
    Un None n'est envoyé que pour les champs effaçables.
    """
    payload: Dict[str, Any] = {"id": page_id}
    for name in PAGE_FIELDS:
        value = current.get(name)
        if value == snapshot.get(name):
            continue
        if value is None and name not in CLEARABLE_FIELDS:
            continue
        payload[name] = list(value) if name == "aliases" else value
    return payload


def build_block_plan(blocks: Sequence[EditorBlock], persisted_ids: Sequence[int]) -> BlockSavePlan:
    plan = BlockSavePlan()
    for block in blocks:
        if isinstance(block.ref, Persisted):
            plan.updates.append(block)
        else:
            plan.creates.append(block)
    kept = {block.ref.id for block in plan.updates}
    plan.deletes = [block_id for block_id in persisted_ids if block_id not in kept]
    return plan


class EditorSession:
    def __init__(self, gateway: PageGateway, page_data: Dict[str, Any], id_generator: Optional[LocalIdGenerator] = None):
        self.gateway = gateway
        self.tracker = DirtyStateTracker()
        self._new_ref = id_generator or LocalIdGenerator()
        self._load(page_data)

    @classmethod
    def open(cls, gateway: PageGateway, id_generator: Optional[LocalIdGenerator] = None) -> "EditorSession":
        return cls(gateway, gateway.fetch_page(), id_generator)

    def _load(self, data: Dict[str, Any]):
        self.page_id = data["id"]
        self.initial_page = page_state_from(data)
        self.page = page_state_from(data)
        raw_blocks = sorted(data.get("content_blocks") or [], key=lambda block: block.get("position", 0))
        self.blocks: List[EditorBlock] = [EditorBlock.from_response(block) for block in raw_blocks]
        self.persisted_block_ids: List[int] = [block.ref.id for block in self.blocks]

    @property
    def preview_path(self) -> str:
        return f"/{self.page['slug']}"

    # ---------- réglages de la page ----------

    def update_page_field(self, name: str, value: Any) -> Optional[Notification]:
        if name not in PAGE_FIELDS:
            raise ValueError(f"Unknown page field: {name}")
        if name == "aliases":
            value = clean_aliases(value)
        self.page[name] = value
        self.tracker.mark_dirty(Domain.PAGE)
        return self.tracker.evaluate_prompt()

    def set_aliases(self, values: Sequence[str]) -> Optional[Notification]:
        return self.update_page_field("aliases", values)

    def apply_color_preset(self, background_color: str, text_color: str, accent_color: str) -> Optional[Notification]:
        self.page.update(background_color=background_color, text_color=text_color, accent_color=accent_color)
        self.tracker.mark_dirty(Domain.PAGE)
        return self.tracker.evaluate_prompt()

    def apply_named_preset(self, name: str) -> Optional[Notification]:
        preset = COLOR_PRESETS.get(name)
        if preset is None:
            raise ValueError(f"Unknown color preset: {name}")
        return self.apply_color_preset(preset.background_color, preset.text_color, preset.accent_color)

    # ---------- blocks ----------

    def _set_blocks(self, new_blocks: List[EditorBlock]) -> Optional[Notification]:
        self.blocks = new_blocks
        self.tracker.mark_dirty(Domain.BLOCKS)
        return self.tracker.evaluate_prompt()

    def add_block(self, block_type: ContentType) -> Optional[Notification]:
        return self._set_blocks(block_ops.add_block(self.blocks, block_type, self._new_ref()))

    def delete_block(self, ref: BlockRef) -> Optional[Notification]:
        if all(block.ref != ref for block in self.blocks):
            return None
        return self._set_blocks(block_ops.delete_block(self.blocks, ref))

    def reorder_blocks(self, moved: BlockRef, target: BlockRef) -> Optional[Notification]:
        reordered = block_ops.reorder_blocks(self.blocks, moved, target)
        if [block.ref for block in reordered] == [block.ref for block in self.blocks]:
            return None
        return self._set_blocks(reordered)

    def update_block_field(self, ref: BlockRef, name: str, value: Any) -> Optional[Notification]:
        if all(block.ref != ref for block in self.blocks):
            return None
        return self._set_blocks(block_ops.update_block_field(self.blocks, ref, name, value))

    # ---------- sauvegarde ----------

    def dismiss_prompt(self):
        self.tracker.dismiss_prompt()

    def save_changes(self) -> SaveResult:
        if self.tracker.is_saving:
            return SaveResult(SaveStatus.IN_PROGRESS, Notification(NotificationKind.INFO, "A save is already in progress."))
        if not self.tracker.is_dirty():
            return SaveResult(SaveStatus.NOTHING_TO_SAVE, Notification(NotificationKind.INFO, "No changes to save."))

        self.tracker.begin_save()
        cleared: List[Domain] = []
        page_saved = blocks_saved = False
        plan = None
        error = None

        try:
            if self.tracker.is_dirty(Domain.PAGE):
                payload = build_page_diff(self.page_id, self.page, self.initial_page)
                if len(payload) > 1:
                    saved = self.gateway.update_page(payload)
                    self.initial_page = page_state_from(saved)
                    page_saved = True
                cleared.append(Domain.PAGE)

            if self.tracker.is_dirty(Domain.BLOCKS):
                plan = build_block_plan(self.blocks, self.persisted_block_ids)
                self.gateway.save_blocks(self.page_id, [block.to_payload() for block in self.blocks])
                blocks_saved = True
                cleared.append(Domain.BLOCKS)
        except PageBuilderError as e:
            error = e
        finally:
            # même sur une exception inattendue: plus de sauvegarde en cours
            self.tracker.finish_save(cleared)

        if error is not None:
            return self._failure(error, page_saved, plan)

        # relecture de l'état canonique (ids définitifs des nouveaux blocks)
        try:
            self._load(self.gateway.fetch_page())
        except PageBuilderError as e:
            logger.warning(f"Saved page {self.page_id} but could not refresh it: {e}")
            return SaveResult(
                SaveStatus.SAVED,
                Notification(NotificationKind.WARNING, "Your changes have been saved, but the page could not be refreshed."),
                page_saved,
                blocks_saved,
                plan,
            )

        logger.info(f"Saved page {self.page_id} (page={page_saved}, blocks={blocks_saved})")
        return SaveResult(
            SaveStatus.SAVED,
            Notification(NotificationKind.SUCCESS, "Your changes have been saved!"),
            page_saved,
            blocks_saved,
            plan,
        )

    def _failure(self, error: PageBuilderError, page_saved: bool, plan: Optional[BlockSavePlan]) -> SaveResult:
        if isinstance(error, (SlugTakenError, ValidationFailedError)):
            message = str(error)
        elif isinstance(error, PermissionDeniedError):
            message = PERMISSION_ERROR
        else:
            message = GENERIC_SAVE_ERROR
        logger.error(f"Error saving page {self.page_id}: {error}")

        # les flags restés levés: le rappel réapparaît tout de suite
        prompt = self.tracker.evaluate_prompt()
        if page_saved:
            return SaveResult(
                SaveStatus.PARTIAL,
                Notification(NotificationKind.ERROR, f"Page settings saved, but content blocks could not be saved: {message}"),
                page_saved=True,
                plan=plan,
                prompt=prompt,
            )
        return SaveResult(SaveStatus.FAILED, Notification(NotificationKind.ERROR, message), plan=plan, prompt=prompt)
