# main.py
"""
Main entry point for the Particle Life simulation.

This script orchestrates the entire simulation lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Sets up the particle system and the force integrator.
4. Runs the main loop: input, render, sweep, wait for the next frame.
5. Handles clean shutdown.
"""
import logging
from utils import setup_logging, load_config
from typing import Dict, Any
import cProfile
import pstats
import io
from constants import (
    DEFAULT_DOMAIN_WIDTH, DEFAULT_DOMAIN_HEIGHT, DEFAULT_FRAME_INTERVAL,
    DEFAULT_LOG_THROTTLE_STEPS
)


def run_simulation(config: Dict[str, Any]):
    """
    Builds the simulation from a loaded config and runs it until stopped.

    Returns:
        Simulation: The simulation after its final frame.
    """
    from particle import ParticleSystem
    from simulation import Simulation
    from scheduler import FrameScheduler

    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    # --- Component Initialization ---
    width = float(sim_params.get('domain_width', DEFAULT_DOMAIN_WIDTH))
    height = float(sim_params.get('domain_height', DEFAULT_DOMAIN_HEIGHT))
    particles = ParticleSystem(sim_params, width, height)
    sim = Simulation(particles, sim_params)

    headless = run_params.get('headless', False)
    visualizer = None
    if not headless:
        from visualization import Visualizer
        visualizer = Visualizer(
            width, height,
            particle_types=particles.particle_types,
            colors=vis_params.get('particle_colors'),
            scale=vis_params.get('scale', 1.0)
        )

    log_throttle = max(1, int(run_params.get('log_throttle_steps', DEFAULT_LOG_THROTTLE_STEPS)))
    # 0 means run until the user quits.
    max_steps = run_params.get('max_steps', 0)
    frame_interval = run_params.get('frame_interval', DEFAULT_FRAME_INTERVAL)
    scheduler = FrameScheduler(frame_interval) if frame_interval else None

    try:
        while sim.running:
            if visualizer is not None:
                if not visualizer.poll_events():
                    sim.request_stop()
                    break
                visualizer.draw(particles)

            sim.step()

            if sim.frame % log_throttle == 0:
                logging.info(f"Simulation frame {sim.frame}" + (f"/{max_steps}" if max_steps else ""))

            if max_steps and sim.frame >= max_steps:
                logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
                sim.request_stop()

            if scheduler is not None and sim.running:
                scheduler.wait()
    finally:
        if visualizer is not None:
            visualizer.close()

    if scheduler is not None and scheduler.overruns:
        logging.info(f"{scheduler.overruns} frames overran the {frame_interval * 1000:.1f} ms frame interval.")
    logging.info("Simulation loop finished.")
    return sim


def main():
    """
    The main function to run the simulation.
    """
    # Load configuration from the JSON file first.
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Particle Life Simulation Starting ---")

    profile = config.get('run_control', {}).get('profile', False)
    profiler = cProfile.Profile() if profile else None

    if profiler is not None:
        profiler.enable()
    try:
        run_simulation(config)
    finally:
        if profiler is not None:
            profiler.disable()

    if profiler is not None:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20) # Print top 20 slowest functions
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Life Simulation Shutting Down ---")


if __name__ == "__main__":
    main()
