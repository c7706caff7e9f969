#!/usr/bin/env python3
"""
Tilemap Viewer

This script displays a Tiled JSON map, original or optimized, with Pygame.
Use it to check an optimized map still looks like its source.

Controls:
    Arrow keys / mouse drag   Pan
    +/- / mouse wheel         Zoom
    s                         Save a screenshot of the map
    Escape                    Quit

Usage:
    tilemap-view maps/town.json
    tilemap-view build/town/town.json --tile-size 16
"""

import argparse
import logging
import os
import sys

import pygame

from .config import DEFAULT_TILE_SIZE, EMPTY_TILE
from .render import render_map
from .storage import load_map, load_tileset_images
from .utils.logger import setup_logger

# Constants
MIN_ZOOM = 0.1  # Minimum zoom level
MAX_ZOOM = 5.0  # Maximum zoom level
DEFAULT_ZOOM = 1.0
ZOOM_STEP = 0.1  # How much to zoom in/out per key press or scroll
PAN_STEP = 10  # Pixels per arrow key press
BACKGROUND_COLOR = (40, 40, 40)
TEXT_COLOR = (255, 255, 255)

logger = logging.getLogger(__name__)


def screen_to_tile_coords(screen_x, screen_y, offset_x, offset_y, tile_size, zoom_level):
    """Convert screen coordinates to tile coordinates"""
    # Adjust for offset
    map_x = screen_x - offset_x
    map_y = screen_y - offset_y

    tile_x = int(map_x // (tile_size * zoom_level))
    tile_y = int(map_y // (tile_size * zoom_level))
    return tile_x, tile_y


def gid_at(tilemap, tile_x, tile_y):
    """Get the top-most nonzero gid painted at a tile position (0 if none)"""
    if not (0 <= tile_x < tilemap.width and 0 <= tile_y < tilemap.height):
        return EMPTY_TILE

    position = tile_y * tilemap.width + tile_x
    for layer in reversed(tilemap.layers):
        if layer.data and position < len(layer.data) and layer.data[position] != EMPTY_TILE:
            return layer.data[position]
    return EMPTY_TILE


def to_surface(image, zoom_level):
    """Convert a Pillow image to a scaled Pygame surface"""
    surface = pygame.image.frombytes(image.tobytes(), image.size, "RGBA")
    scaled_size = (max(1, int(image.width * zoom_level)), max(1, int(image.height * zoom_level)))
    return pygame.transform.scale(surface, scaled_size)


def zoom_around(mouse_pos, offset, map_size, new_map_size):
    """Keep the map point under the mouse in place while zooming"""
    mouse_x, mouse_y = mouse_pos
    offset_x, offset_y = offset
    map_width, map_height = map_size

    # Calculate the position ratio (where in the map we are)
    ratio_x = (mouse_x - offset_x) / map_width if map_width > 0 else 0.5
    ratio_y = (mouse_y - offset_y) / map_height if map_height > 0 else 0.5

    return mouse_x - ratio_x * new_map_size[0], mouse_y - ratio_y * new_map_size[1]


def main():
    parser = argparse.ArgumentParser(description="Display a Tiled JSON map")
    parser.add_argument("map", help="Path to the Tiled JSON map")
    parser.add_argument("--tile-size", type=int, default=DEFAULT_TILE_SIZE, help="Tile size in pixels")
    args = parser.parse_args()

    setup_logger("tilemap_optimizer")

    tilemap = load_map(args.map)
    tileset_images = load_tileset_images(tilemap, os.path.dirname(os.path.abspath(args.map)))
    logger.info(f"Rendering {args.map}...")
    map_image = render_map(tilemap, tileset_images, args.tile_size)

    # Initialize Pygame
    pygame.init()

    # Set up the display
    screen_info = pygame.display.Info()
    screen_width = min(1024, screen_info.current_w)
    screen_height = min(768, screen_info.current_h)
    screen = pygame.display.set_mode((screen_width, screen_height))
    pygame.display.set_caption(f"Tilemap Viewer - {os.path.basename(args.map)}")

    # Initialize font for displaying coordinates
    font = pygame.font.SysFont(None, 24)

    zoom_level = DEFAULT_ZOOM
    map_surface = to_surface(map_image, zoom_level)

    # Center the map initially
    offset_x = (screen_width - map_surface.get_width()) // 2
    offset_y = (screen_height - map_surface.get_height()) // 2
    dragging = False
    drag_start = None

    running = True
    clock = pygame.time.Clock()

    while running:
        new_zoom = zoom_level

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                # Arrow keys for panning
                elif event.key == pygame.K_LEFT:
                    offset_x += PAN_STEP
                elif event.key == pygame.K_RIGHT:
                    offset_x -= PAN_STEP
                elif event.key == pygame.K_UP:
                    offset_y += PAN_STEP
                elif event.key == pygame.K_DOWN:
                    offset_y -= PAN_STEP
                # Plus and minus keys for zooming
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    new_zoom = min(MAX_ZOOM, zoom_level + ZOOM_STEP)
                elif event.key == pygame.K_MINUS:
                    new_zoom = max(MIN_ZOOM, zoom_level - ZOOM_STEP)
                # Save screenshot
                elif event.key == pygame.K_s:
                    screenshot_path = f"{os.path.splitext(os.path.basename(args.map))[0]}_render.png"
                    map_image.save(screenshot_path)
                    logger.info(f"Screenshot saved to {screenshot_path}")
            elif event.type == pygame.MOUSEWHEEL:
                if event.y > 0:
                    new_zoom = min(MAX_ZOOM, zoom_level + ZOOM_STEP)
                elif event.y < 0:
                    new_zoom = max(MIN_ZOOM, zoom_level - ZOOM_STEP)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                dragging = True
                drag_start = event.pos
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                dragging = False
                drag_start = None
            elif event.type == pygame.MOUSEMOTION and dragging:
                offset_x += event.pos[0] - drag_start[0]
                offset_y += event.pos[1] - drag_start[1]
                drag_start = event.pos

        if new_zoom != zoom_level:
            new_surface = to_surface(map_image, new_zoom)
            offset_x, offset_y = zoom_around(
                pygame.mouse.get_pos(),
                (offset_x, offset_y),
                map_surface.get_size(),
                new_surface.get_size(),
            )
            map_surface = new_surface
            zoom_level = new_zoom

        screen.fill(BACKGROUND_COLOR)
        screen.blit(map_surface, (offset_x, offset_y))

        # Display hovered tile coordinates and gid
        mouse_x, mouse_y = pygame.mouse.get_pos()
        tile_x, tile_y = screen_to_tile_coords(
            mouse_x, mouse_y, offset_x, offset_y, args.tile_size, zoom_level
        )
        gid = gid_at(tilemap, tile_x, tile_y)
        coords_text = font.render(
            f"Tile: ({tile_x}, {tile_y})  gid: {gid}  zoom: {zoom_level:.1f}", True, TEXT_COLOR
        )
        screen.blit(coords_text, (10, 10))

        pygame.display.flip()
        clock.tick(60)

    pygame.quit()


if __name__ == "__main__":
    sys.exit(main())
