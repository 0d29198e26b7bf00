from dataclasses import dataclass
from typing import List, Optional, Any, Dict, FrozenSet, Iterable


@dataclass(frozen=True)
class Step:
    """
    Один зафиксированный шаг операции над кучей.

    Атрибуты:
        values: Копия массива кучи в момент шага.
        highlight: Индексы, которые сравниваются/переставляются
                   (None — чисто повествовательный шаг).
        description: Человекочитаемое описание шага.
    """

    values: List[int]
    highlight: Optional[FrozenSet[int]]
    description: str

    def to_dict(self) -> Dict[str, Any]:
        """Преобразует шаг в JSON-совместимый словарь."""
        return {
            "values": list(self.values),
            "highlight": sorted(self.highlight) if self.highlight is not None else None,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Step":
        """
        Восстанавливает шаг из словаря, созданного to_dict().

        Raises:
            ValueError: Если словарь не похож на сериализованный шаг.
        """
        try:
            values = [int(v) for v in data["values"]]
            raw_hl = data.get("highlight")
            highlight = frozenset(int(i) for i in raw_hl) if raw_hl is not None else None
            description = str(data.get("description", ""))
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed step record: {data!r} ({e})") from e
        return cls(values=values, highlight=highlight, description=description)


class StepRecorder:
    """
    Журнал шагов одной операции: только добавление, очистка и выдача.

    Примечания:
        - clear() вызывается ровно один раз в начале каждой мутирующей операции.
        - record() всегда копирует массив, поэтому последующие изменения кучи
          не затрагивают уже записанные шаги.
    """

    def __init__(self) -> None:
        self._steps: List[Step] = []

    def clear(self) -> None:
        self._steps = []

    def record(
        self,
        snapshot: Iterable[int],
        highlight: Optional[Iterable[int]],
        description: str,
    ) -> None:
        """
        Добавляет шаг в журнал.

        Args:
            snapshot: Текущее содержимое кучи (копируется).
            highlight: Индексы для подсветки или None.
            description: Текст шага.
        """
        hl = frozenset(highlight) if highlight is not None else None
        self._steps.append(Step(values=list(snapshot), highlight=hl, description=description))

    def drain(self) -> List[Step]:
        """
        Отдаёт накопленные шаги в порядке записи и опустошает журнал.

        Returns:
            Список шагов; владение переходит вызывающему коду.
        """
        steps, self._steps = self._steps, []
        return steps

    def __len__(self) -> int:
        return len(self._steps)
