import json
import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from heap import MinMaxHeap
from player import StepPlayer
from steps import Step

logger = logging.getLogger(__name__)


@dataclass
class SavedState:
    """Содержимое файла состояния: куча и позиция проигрывателя."""

    heap: MinMaxHeap
    steps: List[Step] = field(default_factory=list)
    current_step: int = 0
    playing: bool = False


def save_state(path: str, heap: MinMaxHeap, player: StepPlayer) -> bool:
    """
    Сохраняет кучу и трассу в JSON-файл.

    Args:
        path: Путь к файлу состояния.
        heap: Куча.
        player: Проигрыватель с текущей трассой.

    Returns:
        True при успешной записи. Ошибки записи логируются и не пробрасываются:
        потеря состояния не должна ронять приложение.
    """
    document = {
        "heap": heap.serialize(),
        "steps": [s.to_dict() for s in player.steps],
        "current_step": player.index,
        "playing": player.playing,
    }
    tmp_path = f"{path}.tmp"
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(document, f)
        os.replace(tmp_path, path)
    except OSError as e:
        logger.warning("Failed to save heap state to %s: %s", path, e)
        return False
    return True


def load_state(path: str) -> Optional[SavedState]:
    """
    Читает состояние, записанное save_state().

    Returns:
        SavedState или None, если файла нет либо он повреждён
        (в последнем случае пишется предупреждение).
    """
    if not os.path.exists(path):
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Failed to read heap state from %s: %s", path, e)
        return None

    if not isinstance(document, dict):
        logger.warning("Ignoring heap state in %s: top level is not an object", path)
        return None

    try:
        heap = MinMaxHeap.restore(document.get("heap"))
        steps = [Step.from_dict(s) for s in document.get("steps") or []]
        current_step = int(document.get("current_step", 0))
    except (ValueError, TypeError) as e:
        logger.warning("Ignoring corrupt heap state in %s: %s", path, e)
        return None

    return SavedState(
        heap=heap,
        steps=steps,
        current_step=current_step,
        playing=bool(document.get("playing", False)),
    )
