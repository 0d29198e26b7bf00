import time
from typing import Callable, List, Optional

from steps import Step
from settings import STEP_INTERVAL_MS


class StepPlayer:
    """
    Проигрыватель шагов последней операции кучи.

    Хранит список шагов и курсор; UI только читает current и
    дергает управляющие методы (play/pause/next/previous/skip).

    Примечания:
        - После load() воспроизведение запускается автоматически.
        - tick() продвигает курсор не чаще одного шага за interval секунд.
    """

    def __init__(
        self,
        interval: float = STEP_INTERVAL_MS / 1000.0,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.steps: List[Step] = []
        self.index = 0
        self.playing = False
        self.interval = max(0.0, interval)
        self._clock = clock
        self._last_advance = clock()

    # ---------- STATE ----------

    @property
    def current(self) -> Optional[Step]:
        """Шаг под курсором или None, если шагов нет."""
        if not self.steps:
            return None
        return self.steps[self.index]

    @property
    def is_animating(self) -> bool:
        """True, пока есть непросмотренные шаги (UI показывает кнопки плеера)."""
        return bool(self.steps) and self.index < len(self.steps) - 1

    def __len__(self) -> int:
        return len(self.steps)

    # ---------- CONTROLS ----------

    def load(self, steps: List[Step], index: int = 0, playing: bool = True) -> None:
        """
        Загружает новую трассу.

        Args:
            steps: Шаги операции.
            index: Начальная позиция курсора (обрезается до допустимой).
            playing: Запускать ли автопроигрывание.
        """
        self.steps = list(steps)
        self.index = min(max(0, index), max(0, len(self.steps) - 1))
        self.playing = playing and self.is_animating
        self._last_advance = self._clock()

    def next(self) -> bool:
        if not self.is_animating:
            return False
        self.index += 1
        self._last_advance = self._clock()
        if not self.is_animating:
            self.playing = False
        return True

    def previous(self) -> bool:
        if not self.steps or self.index <= 0:
            return False
        self.index -= 1
        self._last_advance = self._clock()
        return True

    def skip_to_end(self) -> None:
        """Переход к результату операции; автопроигрывание останавливается."""
        if self.steps:
            self.index = len(self.steps) - 1
        self.playing = False

    def go_back(self) -> bool:
        """Повтор трассы с первого шага (только если шагов больше одного)."""
        if len(self.steps) <= 1:
            return False
        self.index = 0
        self.playing = True
        self._last_advance = self._clock()
        return True

    def toggle(self) -> None:
        if self.playing:
            self.playing = False
        elif self.is_animating:
            self.playing = True
            self._last_advance = self._clock()

    def reset(self) -> None:
        self.steps = []
        self.index = 0
        self.playing = False

    def tick(self) -> bool:
        """
        Продвигает автопроигрывание, если прошёл интервал.

        Returns:
            True, если курсор сдвинулся.
        """
        if not self.playing:
            return False
        if not self.is_animating:
            self.playing = False
            return False
        if self._clock() - self._last_advance < self.interval:
            return False
        return self.next()
