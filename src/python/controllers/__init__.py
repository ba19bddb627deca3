"""Controllers package for the timeline engine.

Main Components:
    TimelineController: Owns the viewport state, zoom engine and frame
        scheduler, dispatches input events and publishes view changes

Usage:
    from controllers import TimelineController

    controller = TimelineController()
    controller.handle_raw_input({"kind": "resize", "width": 1200})
    controller.jump_to(1065, 50)
"""

from controllers.timeline_controller import TimelineController

__all__ = ['TimelineController']
