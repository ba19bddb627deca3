"""
Command-line entry point: boot the engine and settle a deep link.

    yearline --year "1066 AD" --zoom 50 --width 1200

Logging is configured first, a TimelineController is built on a Qt
frame scheduler, and the optional deep link is stored as a pending
navigation request. The landing animation runs on a local event loop and
the settled view is printed.
"""
import argparse
import logging

from PyQt6.QtCore import QCoreApplication, QEventLoop, QTimer

from config_manager import ConfigManager, config
from controllers import TimelineController
from logging_config import setup_logging
from year_coordinates import parse_year

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 1200


def bootstrap(cfg: ConfigManager = config, debug: bool = False) -> TimelineController:
    """Configure logging from `cfg` and build a controller on its settings."""
    setup_logging(cfg, debug=debug)
    controller = TimelineController(cfg=cfg)
    _, px_per_year, center_year = controller.position()
    logger.info("Timeline ready at %s, %.2f px/yr", controller.format_year(center_year), px_per_year)
    return controller


def run_until_settled(controller: TimelineController) -> None:
    """Spin a local event loop until the engine has no frame scheduled."""
    if not controller.engine.is_animating:
        return
    loop = QEventLoop()
    poll = QTimer()
    poll.setInterval(controller.scheduler.interval_ms)

    def check():
        if not controller.engine.is_animating:
            poll.stop()
            loop.quit()

    poll.timeout.connect(check)
    poll.start()
    loop.exec()


def describe(controller: TimelineController) -> str:
    _, px_per_year, center_year = controller.position()
    visible = controller.visible_range()
    return (f"{controller.format_year(center_year)} at {px_per_year:.2f} px/yr, "
            f"showing {controller.format_year(visible.start_year)} "
            f"to {controller.format_year(visible.end_year)}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Year-axis timeline engine')
    parser.add_argument('--year', '-y',
                        help='Deep-link year, e.g. "1066 AD", "500 BC" or "1445 AH"')
    parser.add_argument('--zoom', '-z', type=float,
                        help='Deep-link scale in px/yr (default: keep the initial scale)')
    parser.add_argument('--width', '-w', type=float, default=DEFAULT_WIDTH,
                        help=f'Viewport width in pixels (default: {DEFAULT_WIDTH})')
    parser.add_argument('--config', '-c',
                        help='Path to a config.json (default: the shipped one)')
    parser.add_argument('--debug', '-d', action='store_true',
                        help='Enable debug logging')
    args = parser.parse_args(argv)

    year = None
    if args.year is not None:
        year = parse_year(args.year)
        if year is None:
            parser.error(f"unrecognised year: {args.year!r}")

    cfg = ConfigManager(cfg_path=args.config) if args.config else config
    # QTimer needs an application instance
    app = QCoreApplication.instance() or QCoreApplication([])

    controller = bootstrap(cfg, debug=args.debug)
    try:
        controller.handle_raw_input({"kind": "resize", "width": args.width})
        if year is not None:
            controller.jump_to(year, args.zoom)
        run_until_settled(controller)
        print(describe(controller))
    finally:
        controller.shutdown()
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
