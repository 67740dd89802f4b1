# main.py
import argparse
import logging
import sys

import pygame

from renderer.framebuffer import FrameBuffer
from renderer.raytracer import BACKENDS, MAX_RECURSION_DEPTH, Renderer, RenderConfig
from scene.commands import apply_command, command_for_key
from scene.loader import SceneConfigError, default_scene, load_scene

logger = logging.getLogger("raytracer")

class Application:
    """
    Interactive viewer. Shows the rendered frame in a pygame window and
    re-renders the full frame after every key that changes the scene.

    Keys: W/A/S/D and PageUp/PageDown move the first sphere,
    0-5 set the reflection depth, Escape quits.
    """
    def __init__(self, scene, config: RenderConfig, window_scale: int = 1):
        self.scene = scene
        self.config = config
        self.window_scale = max(1, window_scale)
        self.window_width = config.width * self.window_scale
        self.window_height = config.height * self.window_scale

        self.screen = None

        self.renderer = Renderer(config)
        self.framebuffer = FrameBuffer(config.width, config.height)
        self.framebuffer.add_listener(self.present)

    def present(self, framebuffer: FrameBuffer):
        """Blits a completed frame to the window."""
        surface = pygame.surfarray.make_surface(framebuffer.to_surface_array())
        if self.window_scale != 1:
            surface = pygame.transform.scale(surface, (self.window_width, self.window_height))
        self.screen.blit(surface, (0, 0))
        pygame.display.flip()
        pygame.display.set_caption(f"Ray Tracer | depth {self.config.recursion_depth}")

    def render(self):
        self.renderer.render(self.scene, self.framebuffer)

    def handle_key(self, key_name: str) -> bool:
        """Applies the command bound to a key. Returns True if a new frame is needed."""
        command = command_for_key(key_name)
        if command is None:
            return False
        self.scene, self.config, changed = apply_command(self.scene, self.config, command)
        if changed:
            logger.info("Applied %r", command)
        return changed

    def open_window(self):
        pygame.init()
        self.screen = pygame.display.set_mode((self.window_width, self.window_height))
        pygame.display.set_caption("Ray Tracer")

    def run(self):
        try:
            self.open_window()
            self.render()
            running = True
            while running:
                # Events queue up while a frame renders; they're applied
                # here, between frames.
                event = pygame.event.wait()
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYUP:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif self.handle_key(pygame.key.name(event.key)):
                        self.render()
        finally:
            pygame.quit()

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Recursive sphere ray tracer")
    parser.add_argument("--scene", help="JSON scene file (defaults to the built-in scene)")
    parser.add_argument("--width", type=int, default=600)
    parser.add_argument("--height", type=int, default=600)
    parser.add_argument("--depth", type=int, default=3,
                        help=f"reflection depth, clamped to 0-{MAX_RECURSION_DEPTH}")
    parser.add_argument("--backend", choices=BACKENDS, default="numba")
    parser.add_argument("--scale", type=int, default=1, help="window pixels per rendered pixel")
    parser.add_argument("--output", help="render once, save to this image file and exit")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)

def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        scene = load_scene(args.scene) if args.scene else default_scene()
        config = RenderConfig(args.width, args.height, args.depth, args.backend)
    except (FileNotFoundError, SceneConfigError) as e:
        logger.error("%s", e)
        return 1

    logger.info("Scene: %r", scene)
    logger.info("Config: %r", config)

    if args.output:
        framebuffer = Renderer(config).render(scene)
        try:
            framebuffer.save(args.output)
        except (OSError, ValueError) as e:
            logger.error("Could not save %s: %s", args.output, e)
            return 1
        return 0

    try:
        Application(scene, config, window_scale=args.scale).run()
    except pygame.error as e:
        logger.error("Display error: %s", e)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
