# main.py
"""
Main entry point for the Drifting Dots engine.

This script orchestrates a batch run:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Builds the engine and the frame renderer.
4. Ticks the engine, exporting PNG frames and text dumps at a fixed
   interval and optionally previewing frames in a window.
5. Handles clean shutdown.
"""
import logging
import os
from utils import setup_logging, load_config, parse_color
import cProfile
import pstats
import io


def main():
    """
    The main function to run the engine.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Drifting Dots Engine Starting ---")

    engine_params = config.get('engine', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    from constants import BACKGROUND_COLOR, DEFAULT_DOT_RADIUS, DEFAULT_TRAIL_RADIUS
    from engine import Engine
    from errors import ConfigurationError
    from export import write_dump, write_png
    from visualization import FrameRenderer, Visualizer

    # --- Component Initialization ---
    try:
        engine = Engine.from_config(engine_params)
    except ConfigurationError as e:
        logging.critical(f"Engine could not be constructed: {e}")
        return

    renderer = FrameRenderer(
        engine.canvas_width,
        engine.canvas_height,
        dot_radius=vis_params.get('dot_radius', DEFAULT_DOT_RADIUS),
        trail_radius=vis_params.get('trail_radius', DEFAULT_TRAIL_RADIUS),
    )
    clear_background = vis_params.get('clear_background', True)
    background_color = parse_color(vis_params.get('background_color'), BACKGROUND_COLOR)

    log_throttle = run_params.get('log_throttle_steps', 100)
    max_ticks = run_params.get('max_ticks', 600)
    export_every = run_params.get('export_every', 0)
    output_dir = run_params.get('output_dir', 'output')

    if log_throttle < 1 or export_every < 0:
        logging.critical(
            f"Invalid run_control: log_throttle_steps must be >= 1 (got {log_throttle}), "
            f"export_every must be >= 0 (got {export_every})."
        )
        return

    visualizer = None
    if vis_params.get('preview', False):
        visualizer = Visualizer(engine.canvas_width, engine.canvas_height)

    # Ticks due for export are pinned as keyframes and drained below.
    if export_every > 0:
        def _pin_export(event):
            if event.tick % export_every == 0:
                event.engine.mark_keyframe(f"export-{event.tick}")
        engine.add_tick_listener(_pin_export)

    # --- Profiler Setup (Rule 11) ---
    profiler = cProfile.Profile()

    running = True
    profiler.enable()
    while running:
        engine.tick()
        tick = engine.tick_count

        for keyframe in engine.keyframes():
            frame = renderer.render(keyframe.field, clear_background, background_color)
            write_png(frame, os.path.join(output_dir, f"frame_{keyframe.tick:06d}.png"))
            write_dump(keyframe.field, keyframe.tick, os.path.join(output_dir, f"dots_{keyframe.tick:06d}.txt"))
            logging.info(f"Exported {keyframe.label} to {output_dir}.")
        engine.clear_keyframes()

        if visualizer is not None:
            frame = renderer.render(engine.field, clear_background, background_color)
            if not visualizer.show(frame, engine.stats()):
                running = False

        # Rule 2.4: Hot loops must throttle logs
        if tick % log_throttle == 0:
            logging.info(f"Engine tick {tick}/{max_ticks}")
            mean_phase = engine.field.phases().mean()
            logging.debug(f"Tick {tick} | Mean phase: {mean_phase:.6f}")

        if tick >= max_ticks:
            logging.info(f"Reached max_ticks ({max_ticks}). Stopping engine.")
            running = False
    profiler.disable()

    if visualizer is not None:
        visualizer.close()
    logging.info(f"Engine loop finished. Final stats: {engine.stats()}")

    # --- Performance Profile Output (Rule 11 & 2) ---
    logging.info("--- Performance Profile ---")
    s = io.StringIO()
    stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
    stats.print_stats(20)
    logging.info(f"\n{s.getvalue()}")

    logging.info("--- Drifting Dots Engine Shutting Down ---")


if __name__ == "__main__":
    main()
