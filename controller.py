import logging
import random
from typing import Callable, List, Optional

from heap import MinMaxHeap
from player import StepPlayer
from steps import Step
import storage
from settings import VALUE_LIMIT, RANDOM_MIN, RANDOM_MAX

logger = logging.getLogger(__name__)


def parse_value(text: str, limit: int = VALUE_LIMIT) -> int:
    """
    Разбирает ввод пользователя в целое число.

    Args:
        text: Строка из поля ввода.
        limit: Значение обрезается до диапазона [-limit, limit].

    Raises:
        ValueError: Если строка не является целым числом.
    """
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValueError("input is empty")
    try:
        value = int(cleaned)
    except ValueError:
        raise ValueError(f"not an integer: {cleaned!r}") from None
    return max(-limit, min(limit, value))


class HeapController:
    """
    Связывает кучу, проигрыватель шагов и (опционально) файл состояния.

    UI вызывает только run_action()/insert_text(); сообщения для
    пользователя возвращаются строкой, исключения наружу не уходят.
    """

    ACTIONS = (
        "insert_rand",
        "delete_min",
        "delete_max",
        "go_back",
        "reset",
        "toggle_play",
        "prev_step",
        "next_step",
        "skip",
    )

    def __init__(
        self,
        heap: Optional[MinMaxHeap] = None,
        player: Optional[StepPlayer] = None,
        state_path: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ):
        self.heap = heap if heap is not None else MinMaxHeap()
        self.player = player if player is not None else StepPlayer()
        self.state_path = state_path or None
        self._rng = rng or random.Random()

    # ---------- PERSISTENCE ----------

    def load(self) -> bool:
        """Подгружает сохранённое состояние, если оно есть и корректно."""
        if not self.state_path:
            return False
        state = storage.load_state(self.state_path)
        if state is None:
            return False
        self.heap = state.heap
        self.player.load(state.steps, index=state.current_step, playing=state.playing)
        logger.info("Restored heap with %d elements from %s", len(self.heap), self.state_path)
        return True

    def save(self) -> bool:
        if not self.state_path:
            return False
        return storage.save_state(self.state_path, self.heap, self.player)

    # ---------- OPERATIONS ----------

    def _apply(self, operation: Callable[[], List[Step]]) -> List[Step]:
        steps = operation()
        self.player.load(steps)
        self.save()
        return steps

    def insert_text(self, text: str) -> Optional[str]:
        """
        Вставляет значение из поля ввода.

        Returns:
            Сообщение об ошибке ввода или None при успехе.
        """
        try:
            value = parse_value(text)
        except ValueError as e:
            logger.info("Rejected input %r: %s", text, e)
            return f"Invalid number: {e}"
        self._apply(lambda: self.heap.insert(value))
        return None

    def run_action(self, action: str) -> Optional[str]:
        """
        Выполняет действие тулбара по строковому идентификатору.

        Returns:
            Сообщение для пользователя или None.
        """
        if action == "insert_rand":
            value = self._rng.randint(RANDOM_MIN, RANDOM_MAX)
            self._apply(lambda: self.heap.insert(value))
        elif action == "delete_min":
            self._apply(self.heap.delete_min)
        elif action == "delete_max":
            self._apply(self.heap.delete_max)
        elif action == "go_back":
            if not self.player.go_back():
                return "Nothing to replay"
        elif action == "reset":
            self.heap.clear()
            self.player.reset()
            self.save()
        elif action == "toggle_play":
            self.player.toggle()
        elif action == "prev_step":
            self.player.previous()
        elif action == "next_step":
            self.player.next()
        elif action == "skip":
            self.player.skip_to_end()
        else:
            logger.warning("Unknown action: %s", action)
            return f"Unknown action: {action}"
        return None

    def is_enabled(self, action: str) -> bool:
        if action == "go_back":
            return len(self.player) > 1
        if action == "prev_step":
            return self.player.index > 0
        if action == "next_step":
            return self.player.is_animating
        return True

    # ---------- VIEW ----------

    def displayed_values(self) -> List[int]:
        """Массив для отрисовки: снапшот текущего шага либо живая куча."""
        step = self.player.current
        return list(step.values) if step is not None else self.heap.snapshot()

    def displayed_highlight(self) -> frozenset:
        step = self.player.current
        if step is None or step.highlight is None:
            return frozenset()
        return step.highlight

    def description(self) -> str:
        step = self.player.current
        return step.description if step is not None else ""
