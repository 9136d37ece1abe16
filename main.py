# main.py
"""
Main entry point for the polygon particle emitter.

This script orchestrates the whole run:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Sets up the window and the emitter.
4. Runs the frame loop.
5. Handles clean shutdown and prints a performance profile.
"""
import cProfile
import io
import logging
import pstats

from utils import load_config, setup_logging


def main():
    """
    The main function to run the emitter.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Particle Emitter Starting ---")

    sim_params = config['simulation_parameters']
    run_params = config['run_control']
    vis_params = config['visualization']

    from simulation import Emitter
    from visualization import Visualizer

    try:
        emitter = Emitter.from_params(sim_params)
    except (KeyError, TypeError, ValueError) as e:
        logging.critical(f"Could not build the emitter from config: {e}")
        return

    visualizer = Visualizer(vis_params)
    emitter.fill()

    profiler = cProfile.Profile()

    log_throttle = run_params['log_throttle_steps']
    max_steps = run_params['max_steps'] # Negative runs until the window is closed

    running = True
    step_num = 0
    reported_unresolved = 0

    profiler.enable()
    while running:
        emitter.tick(visualizer.screen_size)
        step_num += 1

        if not visualizer.draw(emitter):
            running = False

        # Hot loops must throttle logs
        if step_num % log_throttle == 0:
            logging.info(f"Frame {step_num} | Particles: {len(emitter.particles)}")
            logging.debug(f"Frame {step_num} | Average Speed: {emitter.average_speed():.4f}")
            new_unresolved = emitter.unresolved_collisions - reported_unresolved
            if new_unresolved:
                logging.warning(
                    f"{new_unresolved} collision(s) could not be separated "
                    f"in the last {log_throttle} frames."
                )
                reported_unresolved = emitter.unresolved_collisions

        if 0 <= max_steps <= step_num:
            logging.info(f"Reached max_steps ({max_steps}). Stopping emitter.")
            running = False
    profiler.disable()

    visualizer.close()
    logging.info("Frame loop finished.")

    logging.info("--- Performance Profile ---")
    s = io.StringIO()
    # Sort by cumulative time spent in the function
    stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
    stats.print_stats(20)
    logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Emitter Shutting Down ---")


if __name__ == "__main__":
    main()
