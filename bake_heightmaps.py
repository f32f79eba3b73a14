# bake_heightmaps.py

"""
================================================================================
HEIGHTMAP BAKER SCRIPT
================================================================================
This script is a command-line host for the terrain generator. For every
terrain tile listed in the configuration it walks a resolution x resolution
grid, samples one height per cell and, optionally, writes a 16-bit grayscale
PNG preview of the result.

Neighbouring tiles sample their shared edge at identical world coordinates,
so their heightmaps join without seams.

Usage:
    python bake_heightmaps.py --config path/to/terrain_config.json [--preview-dir DIR]
================================================================================
"""
import os
import sys
import json
import logging
import argparse
import time
import numpy as np
from PIL import Image
from tqdm import tqdm

from terrain_generator.generator import BiomeTerrainGenerator
from terrain_generator import config as DEFAULTS

# 16-bit previews use the full unsigned range.
PREVIEW_MAX_VALUE = 65535


def tile_coordinate_grid(generator: BiomeTerrainGenerator, tile: dict) -> tuple:
    """
    Converts a tile's normalized grid coordinates (x / (res - 1)) to world
    coordinates, using the generator's coordinate grid.

    Returns:
        tuple: (x_grid, z_grid), each of shape (resolution, resolution),
        indexed [row (z), column (x)].
    """
    position_x, position_z = tile.get('position', (0.0, 0.0))
    size_x, size_z = tile.get('size', (DEFAULTS.TILE_SIZE, DEFAULTS.TILE_SIZE))
    resolution = int(tile.get('resolution', DEFAULTS.TILE_RESOLUTION))
    if resolution < 2:
        raise ValueError(f"Tile '{tile.get('name', '?')}' needs a resolution of at least 2, got {resolution}")

    return generator.get_coordinate_grid(position_x, position_z, size_x, size_z, resolution, resolution)


def bake_tile(generator: BiomeTerrainGenerator, tile: dict) -> np.ndarray:
    """Samples the full heightmap of one tile, heights[z, x]."""
    x_grid, z_grid = tile_coordinate_grid(generator, tile)
    return generator.sample_height_grid(x_grid, z_grid)


def save_heightmap_preview(heights: np.ndarray, file_path: str, height_range: tuple = None) -> str:
    """
    Saves a heightmap as a 16-bit grayscale PNG.

    Args:
        heights (np.ndarray): The 2D heightmap.
        file_path (str): Destination path.
        height_range (tuple, optional): (low, high) mapped to black and white.
            Defaults to the heightmap's own min/max.
    """
    directory = os.path.dirname(file_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    low, high = height_range if height_range is not None else (np.nanmin(heights), np.nanmax(heights))
    span = high - low
    if span > 0:
        normalized = np.clip((heights - low) / span, 0.0, 1.0)
    else:
        normalized = np.zeros_like(heights)
    normalized = np.nan_to_num(normalized, nan=0.0)

    pixels = np.round(normalized * PREVIEW_MAX_VALUE).astype(np.uint16)
    Image.fromarray(pixels).save(file_path, 'PNG')
    return file_path


def bake_heightmaps(config: dict, logger: logging.Logger, preview_dir: str = None) -> dict:
    """
    Bakes every tile in a loaded configuration.

    Returns:
        dict: Tile name -> heightmap array.
    """
    params = config.get('terrain_generation_parameters', {})
    tiles = config.get('terrain_tiles', [])
    if not tiles:
        logger.warning("Configuration lists no terrain tiles; nothing to bake.")
        return {}

    generator = BiomeTerrainGenerator(config=params, logger=logger)

    logger.info(f"Baking {len(tiles)} terrain tile(s)...")
    start_time = time.perf_counter()

    heightmaps = {}
    for index, tile in enumerate(tqdm(tiles, desc="Baking Tiles")):
        name = tile.get('name', f"tile_{index}")
        heights = bake_tile(generator, tile)
        heightmaps[name] = heights
        logger.info(
            f"Tile '{name}': {heights.shape[1]}x{heights.shape[0]} samples, "
            f"height range [{np.nanmin(heights):.4f}, {np.nanmax(heights):.4f}]"
        )

        if preview_dir:
            preview_path = save_heightmap_preview(heights, os.path.join(preview_dir, f"{name}.png"))
            logger.debug(f"Saved preview for '{name}' to {preview_path}")

    end_time = time.perf_counter()
    logger.info(f"Baking complete! Total time: {end_time - start_time:.2f} seconds.")
    return heightmaps


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Heightmap baker for the biome terrain generator.")
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to the JSON configuration file describing the terrain and its tiles."
    )
    parser.add_argument(
        "--preview-dir",
        type=str,
        default=None,
        help="Optional directory for 16-bit PNG previews of each tile."
    )
    args = parser.parse_args(argv)

    # --- Setup Logging ---
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("HeightmapBaker")

    # --- Load Configuration ---
    logger.info(f"Loading configuration from: {args.config}")
    try:
        with open(args.config, 'r') as f:
            config = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse config file: {e}")
        return 1

    try:
        bake_heightmaps(config, logger, preview_dir=args.preview_dir)
    except (KeyError, ValueError) as e:
        logger.critical(f"Invalid terrain configuration: {e}")
        return 1
    return 0


# --- Command-Line Interface ---
if __name__ == "__main__":
    sys.exit(main())
