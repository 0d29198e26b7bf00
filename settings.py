import os

# Размеры окна
WIDTH = 1000
HEIGHT = 700

# Цвета (RGB)
BG_COLOR = (30, 30, 40)
TEXT_COLOR = (255, 255, 255)
EDGE_COLOR = (120, 120, 150)

# Цвета узлов
MIN_LEVEL_COLOR = (59, 130, 246)
MAX_LEVEL_COLOR = (242, 85, 85)
HIGHLIGHT_COLOR = (132, 204, 22)
NODE_BORDER = (31, 41, 55)

# Цвета UI
PANEL_BG = (45, 45, 60)
BTN_BG = (70, 90, 120)
BTN_BG_HOVER = (90, 120, 160)
BTN_BG_DISABLED = (60, 60, 80)
INPUT_BG = (35, 35, 50)
ACCENT_OK = (120, 255, 120)
ACCENT_BAD = (255, 120, 120)
DESCRIPTION_COLOR = (220, 220, 100)

# Геометрия
PANEL_H = 90   # высота верхней панели
NODE_RADIUS = 22
LEVEL_HEIGHT = 80

# Воспроизведение шагов: один шаг в секунду
STEP_INTERVAL_MS = 1000

# Ввод значений
VALUE_LIMIT = 10_000
RANDOM_MIN = 1
RANDOM_MAX = 99

# Файл состояния (пустая строка — не сохранять)
STATE_FILE = os.environ.get(
    "MINMAX_HEAP_STATE_FILE",
    os.path.join(os.path.expanduser("~"), ".minmax_heap_state.json"),
)

# Логирование
LOG_LEVEL = os.environ.get("MINMAX_HEAP_LOG_LEVEL", "INFO").upper()

# Частота кадров
FPS = 60
