from typing import List, Optional, Any, Dict, Iterator
from contextlib import contextmanager
import logging

from steps import Step, StepRecorder

logger = logging.getLogger(__name__)

# Индекс-заглушка «родителя нет» (корень и его дети не имеют деда)
NO_INDEX = -1


# ---------- INDEX ARITHMETIC ----------

def level(i: int) -> int:
    """Глубина узла: floor(log2(i + 1)), корень на уровне 0."""
    return (i + 1).bit_length() - 1


def is_min_level(i: int) -> bool:
    """Чётные уровни (включая корень) — min-уровни, нечётные — max-уровни."""
    return level(i) % 2 == 0


def parent(i: int) -> int:
    return (i - 1) // 2 if i > 0 else NO_INDEX


def left_child(i: int) -> int:
    return 2 * i + 1


def right_child(i: int) -> int:
    return 2 * i + 2


def grandparent(i: int) -> int:
    p = parent(i)
    return parent(p) if p > 0 else NO_INDEX


class MinMaxHeap:
    """
    Min-max куча целых чисел с пошаговой трассировкой операций.

    Возможности:
        - insert / delete_min / delete_max за O(log n).
        - Каждая мутирующая операция возвращает список шагов (Step):
          снапшот массива, подсвеченные индексы и описание.
        - Защита от реэнтрантных изменений структуры.
        - Выборочная проверка инварианта (verify_sample_rate).
        - serialize()/restore() для внешнего хранилища.

    Примечания:
        - Индексы нулевые, корень (уровень 0) — min-уровень.
        - Удаление из пустой кучи не ошибка: возвращается один
          поясняющий шаг, куча не меняется.
    """

    def __init__(self, verify_sample_rate: int = 0):
        """
        Инициализирует пустую кучу.

        Args:
            verify_sample_rate: Частота проверок инварианта (0 — без проверок).
        """
        self.data: List[int] = []
        self._recorder = StepRecorder()
        self._mutating = False
        self._ops = 0
        self._verify_sr = max(0, verify_sample_rate)

    # ---------- PUBLIC API ----------

    def insert(self, value: int) -> List[Step]:
        """
        Добавляет значение в конец массива и поднимает его (push-up).

        Args:
            value: Уже провалидированное целое число.

        Returns:
            Шаги операции; первый шаг всегда фиксирует саму вставку.

        Raises:
            TypeError: Если value не int (bool тоже не принимается).
        """
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"MinMaxHeap accepts int values only, got {value!r}")

        with self._mutation("insert"):
            index = len(self.data)
            self.data.append(value)
            self._record([index], f"Inserted {value} at index {index}")
            self._push_up(index)
            self._record(None, f"Insert of {value} complete")
            return self._finish("insert")

    def delete_min(self) -> List[Step]:
        """
        Удаляет минимальный элемент (корень).

        Returns:
            Шаги операции. Для пустой кучи — ровно один шаг
            «nothing to delete».
        """
        with self._mutation("delete_min"):
            n = len(self.data)
            if n == 0:
                self._record(None, "Heap is empty, nothing to delete")
                return self._finish("delete_min")

            if n == 1:
                removed = self.data.pop()
                self._record(None, f"Removed only element {removed}")
                return self._finish("delete_min")

            removed = self.data[0]
            last = self.data.pop()
            self.data[0] = last
            self._record(
                [0],
                f"Removed minimum {removed}; moved last element {last} "
                f"from index {n - 1} to root (index 0)",
            )
            self._push_down(0)
            self._record(None, f"Delete min complete: removed {removed}")
            return self._finish("delete_min")

    def delete_max(self) -> List[Step]:
        """
        Удаляет максимальный элемент.

        Максимум лежит в корне (если элемент один) или в одном из детей
        корня (индексы 1 и 2, max-уровень). При равенстве выбирается индекс 1.

        Returns:
            Шаги операции. Для пустой кучи — ровно один шаг
            «nothing to delete».
        """
        with self._mutation("delete_max"):
            n = len(self.data)
            if n == 0:
                self._record(None, "Heap is empty, nothing to delete")
                return self._finish("delete_max")

            if n == 1:
                removed = self.data.pop()
                self._record(None, f"Removed only element {removed}")
                return self._finish("delete_max")

            max_index = self._root_max_child()
            removed = self.data[max_index]
            self._record([max_index], f"Selected max element {removed} at index {max_index}")

            last = self.data.pop()
            if max_index == n - 1:
                # Максимум сам был последним — перестановки не нужны
                self._record(None, f"Removed element {removed} at index {max_index}")
                return self._finish("delete_max")

            self.data[max_index] = last
            self._record(
                [max_index],
                f"Removed maximum {removed}; moved last element {last} "
                f"from index {n - 1} to index {max_index}",
            )
            # При n <= 3 ниже уровня 1 ничего нет, спуск ничего не сделает
            self._push_down(max_index)
            if n > 3:
                self._record(None, f"Delete max complete: removed {removed}")
            return self._finish("delete_max")

    def clear(self) -> None:
        """Полностью очищает кучу; трасса не создаётся."""
        with self._mutation("clear"):
            cleared = len(self.data)
            self.data = []
        logger.debug("clear: %d elements dropped", cleared)

    def snapshot(self) -> List[int]:
        """Копия текущего массива кучи (для отрисовки без мутаций)."""
        return list(self.data)

    def peek_min(self) -> Optional[int]:
        return self.data[0] if self.data else None

    def peek_max(self) -> Optional[int]:
        if not self.data:
            return None
        if len(self.data) == 1:
            return self.data[0]
        return self.data[self._root_max_child()]

    def serialize(self) -> Dict[str, Any]:
        """
        Возвращает структуру, пригодную для JSON.

        Returns:
            Словарь вида {"values": [...]}. История шагов не сохраняется.
        """
        return {"values": list(self.data)}

    @classmethod
    def restore(cls, record: Dict[str, Any], verify_sample_rate: int = 0) -> "MinMaxHeap":
        """
        Восстанавливает кучу из результата serialize().

        Args:
            record: Словарь с ключом "values".
            verify_sample_rate: Передаётся в конструктор.

        Raises:
            ValueError: Если запись повреждена или массив нарушает инвариант.
        """
        if not isinstance(record, dict) or "values" not in record:
            raise ValueError(f"Malformed heap record: {record!r}")

        values = record["values"]
        if not isinstance(values, list) or any(
            isinstance(v, bool) or not isinstance(v, int) for v in values
        ):
            raise ValueError(f"Heap record 'values' must be a list of ints: {values!r}")

        heap = cls(verify_sample_rate=verify_sample_rate)
        heap.data = list(values)
        if not heap.is_valid_heap():
            raise ValueError(f"Heap record violates the min-max heap invariant: {values!r}")
        return heap

    def is_empty(self) -> bool:
        return not self.data

    def __len__(self) -> int:
        return len(self.data)

    def __iter__(self) -> Iterator[int]:
        """Итерация в порядке хранения (без гарантии сортировки!)."""
        return iter(self.data)

    def __repr__(self) -> str:
        return f"<MinMaxHeap {self.data}>"

    # ---------- INTERNALS ----------

    @contextmanager
    def _mutation(self, opname: str):
        """
        Контекстный менеджер для безопасных мутаций структуры.

        Очищает журнал шагов перед операцией, после неё увеличивает
        счётчик операций и, при необходимости, проверяет инвариант.

        Raises:
            RuntimeError: При реэнтрантном изменении кучи или если
                          выборочная проверка инварианта не прошла.
        """
        if self._mutating:
            raise RuntimeError(f"Re-entrant heap mutation in '{opname}'")

        self._mutating = True
        self._recorder.clear()
        failed = False
        try:
            yield
        except BaseException:
            failed = True
            raise
        finally:
            self._mutating = False
            self._ops += 1
            # Не перебиваем исходное исключение ошибкой верификации
            if not failed:
                self._maybe_verify(opname)

    def _maybe_verify(self, opname: str) -> None:
        """
        Проверяет инвариант на каждой N-й операции (N = verify_sample_rate).

        Raises:
            RuntimeError: Если инвариант нарушен.
        """
        if self._verify_sr and (self._ops % self._verify_sr == 0):
            if not self.is_valid_heap():
                raise RuntimeError(f"Heap verification failed after '{opname}': {self.data}")

    def _finish(self, opname: str) -> List[Step]:
        steps = self._recorder.drain()
        logger.debug("%s: size=%d, %d steps recorded", opname, len(self.data), len(steps))
        return steps

    def _record(self, highlight: Optional[List[int]], description: str) -> None:
        self._recorder.record(self.data, highlight, description)

    def _describe(self, i: int) -> str:
        kind = "min" if is_min_level(i) else "max"
        return f"{self.data[i]} (index {i}, {kind} level)"

    def _swap(self, i: int, j: int) -> None:
        """
        Меняет местами элементы i и j и записывает шаг.

        Args:
            i: Индекс первого элемента.
            j: Индекс второго элемента.
        """
        self.data[i], self.data[j] = self.data[j], self.data[i]
        self._record([i, j], f"Swapped {self.data[j]} (now index {j}) with {self.data[i]} (now index {i})")

    def _root_max_child(self) -> int:
        """Индекс большего из детей корня; при равенстве — 1."""
        if len(self.data) > 2 and self.data[2] > self.data[1]:
            return 2
        return 1

    def _in_order(self, anchor: int, i: int) -> bool:
        """True, если data[i] не нарушает порядок относительно предка anchor."""
        if is_min_level(anchor):
            return self.data[anchor] <= self.data[i]
        return self.data[anchor] >= self.data[i]

    # ---------- PUSH-UP ----------

    def _push_up(self, index: int) -> None:
        """
        Поднимает только что вставленный элемент.

        Сначала элемент сравнивается с родителем (уровень противоположного
        смысла), затем поднимается через деда по уровням своего смысла.

        Args:
            index: Индекс поднимаемого элемента.
        """
        if index <= 0:
            return

        p = parent(index)
        self._record([index, p], f"Comparing {self._describe(index)} with parent {self._describe(p)}")

        if is_min_level(index):
            if self.data[index] > self.data[p]:
                self._swap(index, p)
                self._push_up_grandparents(p, toward_min=False)
            else:
                self._push_up_grandparents(index, toward_min=True)
        else:
            if self.data[index] < self.data[p]:
                self._swap(index, p)
                self._push_up_grandparents(p, toward_min=True)
            else:
                self._push_up_grandparents(index, toward_min=False)

    def _push_up_grandparents(self, index: int, toward_min: bool) -> None:
        """
        pushUpMin / pushUpMax: подъём через деда, пока есть нарушение.

        Args:
            index: Текущий индекс элемента.
            toward_min: True — поднимаем меньшие значения (min-уровни),
                        False — большие (max-уровни).
        """
        while True:
            g = grandparent(index)
            if g < 0:
                return

            self._record(
                [index, g],
                f"Comparing {self._describe(index)} with grandparent {self._describe(g)}",
            )
            a, b = self.data[index], self.data[g]
            if (a < b) if toward_min else (a > b):
                self._swap(index, g)
                index = g
            else:
                self._record([index, g], "No swap needed")
                return

    # ---------- PUSH-DOWN ----------

    def _extreme_descendant(self, index: int) -> int:
        """
        Ищет среди детей и внуков узла наименьший (min-уровень)
        или наибольший (max-уровень) элемент.

        Порядок просмотра: левый ребёнок, правый, затем четыре внука слева
        направо; при равенстве побеждает найденный первым.

        Returns:
            Индекс найденного потомка или сам index, если потомков нет.
        """
        n = len(self.data)
        left, right = left_child(index), right_child(index)
        on_min = is_min_level(index)
        best = index
        for c in (left, right, left_child(left), right_child(left), left_child(right), right_child(right)):
            if c >= n:
                # индексы кандидатов строго возрастают
                break
            if best == index:
                best = c
            elif (self.data[c] < self.data[best]) if on_min else (self.data[c] > self.data[best]):
                best = c
        return best

    def _push_down(self, index: int) -> None:
        """
        Опускает элемент, оставленный на позиции index.

        Args:
            index: Индекс опускаемого элемента.
        """
        while True:
            m = self._extreme_descendant(index)
            if m == index:
                return

            on_min = is_min_level(index)
            is_grandchild = m > right_child(index)
            self._record(
                [index, m],
                f"Comparing {self._describe(index)} with "
                f"{'smallest' if on_min else 'largest'} "
                f"{'grandchild' if is_grandchild else 'child'} {self._describe(m)}",
            )

            a, b = self.data[m], self.data[index]
            if not ((a < b) if on_min else (a > b)):
                self._record([index, m], "No swap needed")
                return

            self._swap(index, m)

            if is_grandchild:
                p = parent(m)
                self._record([m, p], f"Comparing {self._describe(m)} with parent {self._describe(p)}")
                if (self.data[m] > self.data[p]) if on_min else (self.data[m] < self.data[p]):
                    self._swap(m, p)
                else:
                    self._record([m, p], "No swap needed")

            # Продолжаем и после обмена с ребёнком: у m могут быть свои потомки
            index = m

    # ---------- VERIFICATION ----------

    def is_valid_heap(self) -> bool:
        """
        Проверяет инвариант min-max кучи.

        Каждый узел сверяется с родителем и дедом: проверки одного
        родителя недостаточно, чтобы min-уровень был не больше всех
        своих потомков.

        Returns:
            True, если инвариант соблюдён.
        """
        for i in range(1, len(self.data)):
            if not self._in_order(parent(i), i):
                return False
            g = grandparent(i)
            if g >= 0 and not self._in_order(g, i):
                return False
        return True

    # ---------- STATISTICS ----------

    def depth(self) -> int:
        """
        Возвращает количество уровней в дереве.
        """
        if not self.data:
            return 0
        return level(len(self.data) - 1) + 1

    def get_stats(self) -> Dict[str, Any]:
        """
        Возвращает статистику кучи для отладки и панели UI.
        """
        return {
            "size": len(self.data),
            "depth": self.depth(),
            "min": self.peek_min(),
            "max": self.peek_max(),
            "is_valid": self.is_valid_heap(),
            "operations_count": self._ops,
            "verify_rate": self._verify_sr,
        }

    # ---------- VISUALIZATION HELPER ----------

    def to_tree_repr(self, max_depth: int = 4) -> List[str]:
        """
        Текстовое представление дерева по уровням.

        Args:
            max_depth: Максимальная глубина для отображения.

        Returns:
            Список строк вида "min: 1" / "max: 9 7".
        """
        if not self.data:
            return ["[Empty heap]"]

        n = len(self.data)
        shown = min(self.depth(), max_depth)
        result = []
        for lvl in range(shown):
            start = 2 ** lvl - 1
            end = min(2 ** (lvl + 1) - 1, n)
            kind = "min" if lvl % 2 == 0 else "max"
            result.append(f"{kind}: " + " ".join(str(v) for v in self.data[start:end]))

        hidden = n - (2 ** shown - 1)
        if hidden > 0:
            result.append(f"... and {hidden} more items")
        return result
