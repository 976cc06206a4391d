# main.py
"""
Main entry point for the ball-in-disk phase space viewer.

Usage: python main.py [scene]

This script orchestrates the entire run:
1. Loads configuration from `config.json`, falling back to defaults.
2. Initializes the logging system.
3. Resolves the scene selector and builds the scene.
4. Runs the tick / render / present loop.
5. Handles clean shutdown.
"""
import cProfile
import io
import logging
import pstats
import sys
from typing import Any, Dict, Optional

import numpy as np

from constants import FPS, PIXEL_SIZE
from utils import DEFAULT_CONFIG, load_config, setup_logging


def run(scene, visualizer, run_params: Dict[str, Any]) -> int:
    """
    Drives one scene until the user quits or max_steps is reached.

    Each frame is exactly one tick followed by one render, so the
    simulation speed does not depend on the display frame rate.
    Returns the number of steps taken.
    """
    log_throttle = run_params.get('log_throttle_steps', 100)
    max_steps = run_params.get('max_steps', 0)

    step_num = 0
    running = True
    while running:
        if not visualizer.poll():
            break

        scene.tick()
        scene.render(visualizer.frame)
        visualizer.present()
        step_num += 1

        # Hot loops must throttle logs
        if log_throttle and step_num % log_throttle == 0:
            logging.info(f"Simulation step {step_num}")
            speeds = np.linalg.norm(scene.particles.velocities, axis=1)
            if speeds.size:
                logging.debug(
                    f"Step {step_num} | Average speed: {speeds.mean():.4f} | "
                    f"Reflections this step: {scene.last_reflections}"
                )

        if max_steps and step_num >= max_steps:
            logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
            running = False
    return step_num


def main(argv: Optional[list] = None):
    """
    The main function to run the viewer.
    """
    argv = sys.argv[1:] if argv is None else argv

    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except (OSError, ValueError) as e:
        print(f"WARNING: Could not load config.json ({e}). Using built-in defaults.")
        config = DEFAULT_CONFIG

    setup_logging(config)
    logging.info("--- Phase Space Viewer Starting ---")

    sim_params = config.get('simulation_parameters', {})
    run_params = {**DEFAULT_CONFIG['run_control'], **config.get('run_control', {})}

    # Imported after logging is configured so their setup messages are kept.
    from scene import Scene, SceneConfig, resolve_scene
    from visualization import Visualizer

    preset = resolve_scene(argv[0] if argv else None)
    scene_config = SceneConfig.from_params(preset, sim_params)
    logging.info(f"Running scene: {scene_config.title}")

    scene = Scene(scene_config)
    visualizer = Visualizer(
        scene_config.width,
        scene_config.height,
        pixel_size=int(sim_params.get('pixel_size', PIXEL_SIZE)),
        title=scene_config.title,
        fps=int(run_params.get('fps', FPS)),
    )

    profiler = cProfile.Profile() if run_params.get('profile') else None
    if profiler:
        profiler.enable()
    try:
        steps = run(scene, visualizer, run_params)
    finally:
        if profiler:
            profiler.disable()
        visualizer.close()
    logging.info(f"Simulation loop finished after {steps} steps.")

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Phase Space Viewer Shutting Down ---")


if __name__ == "__main__":
    main()
