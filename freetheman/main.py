"""
Oyunu başlatmak için giriş noktası.
"""
from __future__ import annotations

import logging

from config.game_config import GameConfig
from controller.game_controller import GameController
from view.game_scene import GameScene
from view.pygame_view import PygameView, ViewConfig

logger = logging.getLogger(__name__)


def main() -> None:
    config = GameConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    view_config = ViewConfig()
    view = PygameView(view_config)
    view.initialize()

    controller = GameController(config)
    controller.start_first_level()
    logger.info(f"{controller.level_count()} level hazır, seed={config.seed}")

    scene = GameScene(controller, config.animation, tile_size=view_config.tile_size)
    try:
        view.render(scene)
    finally:
        view.shutdown()


if __name__ == "__main__":
    main()
