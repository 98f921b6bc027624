import argparse
import asyncio
import logging
import sys

from gaze_heatmap.configs.app import AppSettings
from gaze_heatmap.core.manager import SessionManager

logger = logging.getLogger("main")


async def run_session(settings: AppSettings, duration_s: float) -> int:
    async with SessionManager(settings) as manager:
        # Calibration is driven by the external estimator; here it completes immediately.
        if settings.calibration.required:
            await manager.begin_calibration()
        if not await manager.start_tracking():
            logger.error("Could not start tracking.")
            return 1

        try:
            await asyncio.sleep(duration_s)
        finally:
            snapshot = await manager.stop_tracking()

        analysis = manager.analyze()
        if analysis is None:
            print("No gaze data collected.")
            return 0

        print(analysis.summary)
        for insight in analysis.insights:
            print(f"- [{insight.type}] {insight.title}: {insight.description}")

        path = await manager.export(analysis)
        if path:
            print(f"Snapshot of {len(snapshot):,} samples saved to {path}")
    return 0


def main():
    """
    The main entry point for a headless heatmap session.
    """
    # 1. Setup Command-Line Argument Parsing
    parser = argparse.ArgumentParser(description="Gaze Heatmap session")
    parser.add_argument(
        "--duration",
        type=float,
        default=10.0,
        help="Seconds to track before stopping and analyzing."
    )
    parser.add_argument(
        "--dummy",
        action="store_true",
        help="Run with a simulated gaze source regardless of configuration."
    )
    args = parser.parse_args()

    # 2. Load Configuration
    try:
        settings = AppSettings()
    except Exception as e:
        print(f"Configuration Error: {e}")
        sys.exit(1)
    if args.dummy:
        settings.use_dummy_mode = True

    # 3. Setup Logging
    logging.basicConfig(
        level=settings.logging.level,
        format=settings.logging.format,
        stream=sys.stdout
    )
    logger.info(f"Starting Gaze Heatmap v{settings.__version__}")
    if settings.use_dummy_mode:
        logger.warning("RUNNING WITH DUMMY GAZE SOURCE.")
    else:
        logger.warning("No estimator is attached in headless mode; the session will stay empty.")

    # 4. Run
    exit_code = 1
    try:
        exit_code = asyncio.run(run_session(settings, args.duration))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
        exit_code = 130
    except Exception:
        logger.exception("Fatal Application Error")
    finally:
        logger.info("Gaze Heatmap has shut down.")
    sys.exit(exit_code)

if __name__ == "__main__":
    main()
