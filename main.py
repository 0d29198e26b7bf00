"""
main.py — точка входа визуализатора min-max кучи.

Модуль настраивает логирование, инициализирует Pygame-окно (с учётом
HiDPI на macOS), создаёт контроллер кучи и UI, восстанавливает
сохранённое состояние и запускает основной цикл отрисовки и событий.
"""

import logging
import os
import sys

import pygame

from settings import *
from controller import HeapController
from ui import UI

logger = logging.getLogger("minmax_heap")


def setup_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main():
    """
    Точка входа приложения.

    Основные задачи:
        1. Настроить логирование и SDL для HiDPI.
        2. Инициализировать Pygame и окно визуализации.
        3. Создать HeapController (куча + проигрыватель шагов) и UI.
        4. Запустить главный цикл: события, отрисовка, стабильный FPS.

    Исключения:
        Непойманные исключения логируются с трассировкой.
    """
    setup_logging()
    try:
        # --- Retina / HiDPI Fix (macOS + SDL2) ---
        os.environ["SDL_VIDEO_ALLOW_HIGHDPI"] = "1"
        os.environ.pop("SDL_VIDEO_HIGHDPI_DISABLED", None)

        pygame.init()
        logger.info("Pygame initialised")

        try:
            screen = pygame.display.set_mode(
                (WIDTH, HEIGHT),
                pygame.HWSURFACE | pygame.DOUBLEBUF,
            )
            pygame.display.set_caption("Min-Max Heap Visualizer")
        except pygame.error as e:
            logger.error("Failed to create window: %s", e)
            sys.exit(1)

        clock = pygame.time.Clock()
        controller = HeapController(state_path=STATE_FILE)
        controller.load()
        ui = UI(screen, controller)

        running = True
        consecutive_errors = 0
        MAX_CONSECUTIVE_ERRORS = 5  # после 5 подряд ошибок — аварийный выход

        try:
            while running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        running = False
                    else:
                        # Ошибка в обработке одного события не убивает цикл
                        try:
                            ui.handle_event(event)
                        except Exception:
                            logger.exception("Event handling failed")

                try:
                    screen.fill(BG_COLOR)
                    ui.draw()
                    pygame.display.flip()
                except pygame.error:
                    # Обычно это уже серьёзно (потеря контекста, проблемное окно)
                    logger.exception("Pygame error while drawing")
                    running = False
                    continue
                except Exception:
                    logger.exception("Frame drawing failed")
                    consecutive_errors += 1
                    if consecutive_errors >= MAX_CONSECUTIVE_ERRORS:
                        logger.critical("Too many consecutive draw errors (%d), exiting", consecutive_errors)
                        running = False
                    continue
                else:
                    consecutive_errors = 0

                clock.tick(FPS)

        except KeyboardInterrupt:
            logger.info("Stopped by Ctrl+C")

        finally:
            controller.save()

    except Exception:
        logger.exception("Fatal error on startup")

    finally:
        pygame.quit()
        logger.info("Application finished")


if __name__ == "__main__":
    main()
