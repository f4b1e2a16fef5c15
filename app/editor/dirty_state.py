"""
Suivi des modifications non enregistrées de l'éditeur.

Deux domaines indépendants (réglages de la page, blocks) et une machine
à états: CLEAN -> DIRTY -> SAVING -> CLEAN, ou DIRTY si la sauvegarde échoue.
"""

from enum import Enum
from typing import Iterable, Optional
from app.editor.notifications import Notification, NotificationKind

UNSAVED_CHANGES_MESSAGE = "You have unsaved changes."
SAVE_ACTION_LABEL = "Save Changes"


class Domain(str, Enum):
    PAGE = "page"
    BLOCKS = "blocks"


class Phase(str, Enum):
    CLEAN = "clean"
    DIRTY = "dirty"
    SAVING = "saving"


class DirtyStateTracker:
    def __init__(self):
        self._dirty = {domain: False for domain in Domain}
        self._saving = False
        self.prompt_visible = False

    @property
    def phase(self) -> Phase:
        if self._saving:
            return Phase.SAVING
        if any(self._dirty.values()):
            return Phase.DIRTY
        return Phase.CLEAN

    @property
    def is_saving(self) -> bool:
        return self._saving

    def is_dirty(self, domain: Optional[Domain] = None) -> bool:
        if domain is None:
            return any(self._dirty.values())
        return self._dirty[domain]

    def mark_dirty(self, domain: Domain):
        self._dirty[domain] = True

    def begin_save(self) -> bool:
        """Refuse une deuxième sauvegarde tant qu'une est en cours"""
        if self._saving:
            return False
        self._saving = True
        self.prompt_visible = False
        return True

    def finish_save(self, cleared: Iterable[Domain] = ()):
        # seuls les domaines effectivement enregistrés sont nettoyés
        for domain in cleared:
            self._dirty[domain] = False
        self._saving = False

    def evaluate_prompt(self) -> Optional[Notification]:
        """
        Retourne le rappel "modifications non enregistrées" à afficher,
        ou None s'il n'y a rien à faire (propre, sauvegarde en cours, ou
        rappel déjà visible).
        """
        if self._saving or not self.is_dirty():
            self.prompt_visible = False
            return None
        if self.prompt_visible:
            return None
        self.prompt_visible = True
        return Notification(
            kind=NotificationKind.PROMPT,
            message=UNSAVED_CHANGES_MESSAGE,
            action_label=SAVE_ACTION_LABEL,
            persistent=True,
        )

    def dismiss_prompt(self):
        # fermer le rappel ne touche pas aux flags
        self.prompt_visible = False
