import logging
import time
from dataclasses import dataclass

import pygame

from heap import level, is_min_level, left_child, right_child
from settings import *

logger = logging.getLogger(__name__)


@dataclass
class Button:
    rect: pygame.Rect
    label: str
    action: str

    def __getitem__(self, key):
        return getattr(self, key)


def node_position(index: int, width: int, top: int = PANEL_H + 60):
    """
    Координаты центра узла: уровни равномерно делят ширину окна.

    Args:
        index: Нулевой индекс узла.
        width: Ширина области рисования.
        top: Y-координата корня.

    Returns:
        Кортеж (x, y).
    """
    lvl = level(index)
    nodes_in_level = 2 ** lvl
    pos_in_level = index - (nodes_in_level - 1)
    x = width / (nodes_in_level + 1) * (pos_in_level + 1)
    y = top + lvl * LEVEL_HEIGHT
    return int(x), int(y)


class UI:
    def __init__(self, screen, controller):
        self.screen = screen
        self.controller = controller
        self.font = pygame.font.SysFont("consolas", 20)
        self.small = pygame.font.SysFont("consolas", 16)

        # кешируемые слои
        self.toolbar_surface = pygame.Surface((WIDTH, PANEL_H), pygame.SRCALPHA)
        self.toolbar_needs_redraw = True
        self.tree_surface = pygame.Surface((WIDTH, HEIGHT), pygame.SRCALPHA)
        self._last_view = None

        # состояние UI
        self.buttons = []
        self._buttons_animating = None
        self._build_buttons()

        self.input_active = False
        self.input_text = ""
        self.insert_btn_rect = None
        self._hover_btn = None

        self.temp_message = None
        self.message_end_time = 0

    def _labels(self):
        player = self.controller.player
        if player.is_animating:
            return [
                ("Pause" if player.playing else "Play", "toggle_play"),
                ("Previous", "prev_step"),
                ("Next", "next_step"),
                ("Skip to Result", "skip"),
            ]
        return [
            ("Insert Rand", "insert_rand"),
            ("Delete Min", "delete_min"),
            ("Delete Max", "delete_max"),
            ("Go Back", "go_back"),
            ("Reset", "reset"),
        ]

    def _build_buttons(self):
        """Раскладывает кнопки тулбара по строкам; набор зависит от режима плеера."""
        START_X = 20
        START_Y = 12
        PADDING_X = 12
        PADDING_Y = 6
        SPACING = 10

        self.buttons = []
        max_width = max(100, self.toolbar_surface.get_width() - 40)
        _, sample_h = self.font.size("Sample")
        button_height = sample_h + PADDING_Y * 2
        row_height = button_height + 5

        x, y = START_X, START_Y
        for label, action in self._labels():
            text_w, _ = self.font.size(label)
            width = min(max_width, max(40, text_w + PADDING_X * 2))

            # перенос строки
            if x + width > START_X + max_width and x > START_X:
                y += row_height
                x = START_X

            self.buttons.append(Button(pygame.Rect(x, y, width, button_height), label, action))
            x += width + SPACING

        # поле ввода под последней строкой кнопок
        self.input_rect = pygame.Rect(START_X, y + row_height + 4, 160, 28)
        self._buttons_animating = self.controller.player.is_animating
        self.toolbar_needs_redraw = True

    # ---------- EVENTS ----------

    def handle_event(self, event):
        if event.type == pygame.MOUSEMOTION:
            new_hover = None
            for btn in self.buttons:
                if btn.rect.collidepoint(event.pos) and self._is_enabled(btn):
                    new_hover = btn
                    break
            if new_hover is not self._hover_btn:
                self._hover_btn = new_hover
                self.toolbar_needs_redraw = True

        elif event.type == pygame.MOUSEBUTTONDOWN and getattr(event, "button", None) == 1:
            # Кнопка Insert
            if self.insert_btn_rect is not None and self.insert_btn_rect.collidepoint(event.pos):
                if self.input_text and not self.controller.player.is_animating:
                    self._insert_from_input()
                return

            was_active = self.input_active
            self.input_active = bool(self.input_rect.collidepoint(event.pos))
            if self.input_active != was_active:
                self.toolbar_needs_redraw = True

            for btn in self.buttons:
                if btn.rect.collidepoint(event.pos) and self._is_enabled(btn):
                    self._run_action(btn.action)
                    return

        elif event.type == pygame.KEYDOWN:
            if self.input_active:
                self._handle_text_input(event)
            else:
                self._handle_shortcuts(event)

    def _handle_shortcuts(self, event):
        if self.controller.player.is_animating:
            keymap = {
                pygame.K_SPACE: "toggle_play",
                pygame.K_LEFT: "prev_step",
                pygame.K_RIGHT: "next_step",
                pygame.K_s: "skip",
            }
        else:
            keymap = {
                pygame.K_i: "insert_rand",
                pygame.K_n: "delete_min",
                pygame.K_x: "delete_max",
                pygame.K_b: "go_back",
                pygame.K_r: "reset",
            }
        action = keymap.get(event.key)
        if action:
            self._run_action(action)

    def _handle_text_input(self, event):
        if event.key == pygame.K_RETURN:
            if not self.controller.player.is_animating:
                self._insert_from_input()
        elif event.key == pygame.K_BACKSPACE:
            self.input_text = self.input_text[:-1]
        elif event.key == pygame.K_ESCAPE:
            self.input_active = False
        else:
            ch = event.unicode
            if (ch.isdigit() or (ch == "-" and not self.input_text)) and len(self.input_text) < 6:
                self.input_text += ch

        self.toolbar_needs_redraw = True

    def _run_action(self, action: str):
        """Выполняет действие тулбара; ошибка одного действия не роняет UI."""
        try:
            message = self.controller.run_action(action)
        except Exception as e:
            logger.exception("Action '%s' failed", action)
            message = f"Action '{action}' failed: {e}"
        if message:
            self._show_temp_message(message)
        self._build_buttons()

    def _insert_from_input(self):
        message = self.controller.insert_text(self.input_text)
        if message:
            self._show_temp_message(message)
        self.input_text = ""
        self.input_active = False
        self._build_buttons()

    def _is_enabled(self, btn) -> bool:
        return self.controller.is_enabled(btn["action"])

    def _show_temp_message(self, message: str, duration: float = 3.0):
        """Показывает временное сообщение"""
        self.temp_message = message
        self.message_end_time = time.perf_counter() + duration

    # ---------- DRAWING ----------

    def draw(self):
        """Рендер кадра: продвигает плеер, перерисовывает изменившиеся слои."""
        if self.controller.player.tick():
            self.toolbar_needs_redraw = True

        # набор кнопок меняется, когда трасса доиграна или запущена
        if self._buttons_animating != self.controller.player.is_animating:
            self._build_buttons()

        if self.toolbar_needs_redraw:
            try:
                self._redraw_toolbar()
            except pygame.error as tb_err:
                # чтобы не лагало бесконечно, сбросим флаг
                self.toolbar_needs_redraw = False
                self._show_temp_message(f"Toolbar redraw error: {tb_err}")

        self._redraw_tree_if_needed()

        self.screen.blit(self.tree_surface, (0, 0))
        self.screen.blit(self.toolbar_surface, (0, 0))

        for fn in (self._draw_description, self._draw_info_text, self._draw_temp_message):
            try:
                fn()
            except pygame.error as draw_err:
                # не даём одному тексту уронить весь кадр
                logger.debug("%s failed: %s", fn.__name__, draw_err)

    def _redraw_toolbar(self):
        surf = self.toolbar_surface
        surf.fill(PANEL_BG)

        for btn in self.buttons:
            rect = btn.rect
            if not self._is_enabled(btn):
                bg = BTN_BG_DISABLED
            elif self._hover_btn is btn:
                bg = BTN_BG_HOVER
            else:
                bg = BTN_BG

            pygame.draw.rect(surf, bg, rect, border_radius=6)
            label_surf = self.font.render(btn.label, True, TEXT_COLOR)
            text_x = rect.x + (rect.width - label_surf.get_width()) // 2
            text_y = rect.y + (rect.height - label_surf.get_height()) // 2
            surf.blit(label_surf, (text_x, text_y))

        # поле ввода
        pygame.draw.rect(
            surf,
            (160, 160, 160) if self.input_active else INPUT_BG,
            self.input_rect,
            border_radius=6,
        )
        placeholder = self.input_text or "Type number…"
        ph_color = (200, 200, 200) if self.input_text else (130, 130, 150)
        txt = self.small.render(placeholder, True, ph_color)
        surf.blit(txt, (self.input_rect.x + 8, self.input_rect.y + (self.input_rect.height - txt.get_height()) // 2))

        # кнопка Insert рядом с инпутом, на той же высоте
        self.insert_btn_rect = pygame.Rect(
            self.input_rect.right + 8,
            self.input_rect.y,
            90,
            self.input_rect.height,
        )
        can_insert = bool(self.input_text) and not self.controller.player.is_animating
        pygame.draw.rect(surf, BTN_BG if can_insert else BTN_BG_DISABLED, self.insert_btn_rect, border_radius=6)
        label = self.font.render("Insert", True, TEXT_COLOR)
        label_x = self.insert_btn_rect.x + (self.insert_btn_rect.width - label.get_width()) // 2
        label_y = self.insert_btn_rect.y + (self.insert_btn_rect.height - label.get_height()) // 2
        surf.blit(label, (label_x, label_y))

        self.toolbar_needs_redraw = False

    def _redraw_tree_if_needed(self):
        values = self.controller.displayed_values()
        highlight = self.controller.displayed_highlight()
        view = (tuple(values), highlight)
        if view != self._last_view:
            self._draw_tree_surface(values, highlight)
            self._last_view = view

    def _draw_tree_surface(self, values, highlight):
        surf = self.tree_surface
        surf.fill((0, 0, 0, 0))

        if not values:
            msg = self.font.render("Heap is empty. Use Insert or type a number ↑", True, (180, 180, 200))
            surf.blit(msg, (WIDTH // 2 - msg.get_width() // 2, HEIGHT // 2 - msg.get_height() // 2))
            return

        n = len(values)
        # сначала рёбра, чтобы узлы были поверх
        for i in range(n):
            x, y = node_position(i, WIDTH)
            for child in (left_child(i), right_child(i)):
                if child < n:
                    cx, cy = node_position(child, WIDTH)
                    pygame.draw.line(surf, EDGE_COLOR, (x, y + NODE_RADIUS), (cx, cy - NODE_RADIUS), 2)

        for i, val in enumerate(values):
            x, y = node_position(i, WIDTH)
            if i in highlight:
                fill = HIGHLIGHT_COLOR
            elif is_min_level(i):
                fill = MIN_LEVEL_COLOR
            else:
                fill = MAX_LEVEL_COLOR
            pygame.draw.circle(surf, fill, (x, y), NODE_RADIUS)
            pygame.draw.circle(surf, NODE_BORDER, (x, y), NODE_RADIUS, 2)

            label = self.small.render(str(val), True, TEXT_COLOR)
            surf.blit(label, (x - label.get_width() // 2, y - label.get_height() // 2))

            idx = self.small.render(str(i), True, (150, 150, 170))
            surf.blit(idx, (x - idx.get_width() // 2, y + NODE_RADIUS + 2))

    def _draw_description(self):
        player = self.controller.player
        text = self.controller.description()
        if not text:
            return
        if len(player):
            text = f"[{player.index + 1}/{len(player)}] {text}"
        surf = self.font.render(text, True, DESCRIPTION_COLOR)
        self.screen.blit(surf, (20, HEIGHT - 110))

    def _draw_temp_message(self):
        """Рисует временное сообщение"""
        if self.temp_message and time.perf_counter() < self.message_end_time:
            lines = self.temp_message.split('\n')
            y = HEIGHT - 180

            max_width = max(self.font.size(line)[0] for line in lines)
            bg_rect = pygame.Rect(20, y - 5, max_width + 20, len(lines) * 25 + 10)
            pygame.draw.rect(self.screen, (40, 40, 60), bg_rect, border_radius=5)
            pygame.draw.rect(self.screen, (100, 100, 150), bg_rect, 2, border_radius=5)

            for line in lines:
                text = self.font.render(line, True, (220, 220, 100))
                self.screen.blit(text, (30, y))
                y += 25

    def _draw_info_text(self):
        if self.controller.player.is_animating:
            info_lines = ["[Space] Play/Pause  [←] Previous  [→] Next  [S] Skip"]
        else:
            info_lines = ["[I] InsertRand  [N] Delete Min  [X] Delete Max  [B] Go Back  [R] Reset"]

        y_pos = HEIGHT - 70
        for line in info_lines:
            info = self.font.render(line, True, TEXT_COLOR)
            self.screen.blit(info, (20, y_pos))
            y_pos += 25

        heap = self.controller.heap
        size_text = self.font.render(f"size {len(heap)}", True, TEXT_COLOR)
        self.screen.blit(size_text, (WIDTH - 140, HEIGHT - 45))

        status_ok = heap.is_valid_heap()
        status_text = "HEAP OK" if status_ok else "HEAP BROKEN"
        status_color = ACCENT_OK if status_ok else ACCENT_BAD
        status = self.font.render(status_text, True, status_color)
        self.screen.blit(status, (WIDTH - 140, HEIGHT - 70))
