# main.py
"""
Main entry point for the DC circuit simulation.

This script orchestrates the entire simulation lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Sets up the simulation and the frame scheduler.
4. Runs the main loop, one scheduled frame per display refresh.
5. Handles clean shutdown.
"""
import logging
import time
from utils import setup_logging, load_config
from constants import WINDOW_TITLE
import cProfile
import pstats
import io

def main():
    """
    The main function to run the simulation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Circuit Simulation Starting ---")

    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    from scheduler import FrameScheduler
    from simulation import Simulation
    from visualization import Visualizer

    # --- Component Initialization ---
    sim = Simulation(sim_params)
    scheduler = FrameScheduler()
    visualizer = Visualizer(
        fps=vis_params.get('fps', 60),
        title=vis_params.get('title', WINDOW_TITLE)
    )

    profile = run_params.get('profile', False)
    profiler = cProfile.Profile() if profile else None

    log_throttle = run_params.get('log_throttle_frames', 300)
    max_frames = run_params.get('max_frames', 0)  # 0 runs until the window is closed

    sim.start(scheduler)
    if profiler:
        profiler.enable()

    running = True
    frame_num = 0
    while running:
        scheduler.run_frame(time.perf_counter() * 1000.0)
        frame_num += 1

        if not visualizer.draw(sim.snapshot(), sim.toggle):
            running = False

        # Hot loops must throttle logs
        if frame_num % log_throttle == 0:
            logging.info(f"Frame {frame_num}")
            logging.debug(
                f"Frame {frame_num} | charge {sim.battery.stored_charge:.0f}% | "
                f"ions {sim.battery.ion_budget:.0f}% | closed {sim.closed} | "
                f"chemistry carriers {len(sim.chemistry)}"
            )

        if max_frames and frame_num >= max_frames:
            logging.info(f"Reached max_frames ({max_frames}). Stopping simulation.")
            running = False

    if profiler:
        profiler.disable()

    sim.stop()
    visualizer.close()
    logging.info("Simulation loop finished.")

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Circuit Simulation Shutting Down ---")


if __name__ == "__main__":
    main()
