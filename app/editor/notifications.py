from dataclasses import dataclass
from enum import Enum
from typing import Optional


class NotificationKind(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    PROMPT = "prompt"


@dataclass(frozen=True)
class Notification:
    """Ce que l'interface doit afficher suite à une opération de l'éditeur"""
    kind: NotificationKind
    message: str
    action_label: Optional[str] = None
    persistent: bool = False  # pas de fermeture automatique
