"""
FingerCursor - Hand-Tracked Pointer Control

Entry point for the application.
"""
import argparse
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

logger = logging.getLogger(__name__)


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="FingerCursor - control the pointer with your index finger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--camera",
        type=int,
        default=None,
        help="Camera device index (overrides config)",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Show camera feed with landmarks and gestures, without moving the pointer",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args()


def run_debug(config):
    """
    Run tracking in debug mode - shows camera feed with landmarks.
    Events are printed, the pointer is not touched.
    """
    import time
    import cv2
    from gestures import TrackingPipeline, Rect
    from webcam import HandTracker

    tracker = HandTracker(config)
    screen = Rect(0, 0, config.camera.width, config.camera.height)
    pipeline = TrackingPipeline(config, screen)

    print("Starting webcam debug mode...")
    print("Press 'q' to quit")
    print("-" * 40)

    if not tracker.start():
        print("ERROR: Could not open camera")
        return 1

    try:
        while True:
            frame_read, sample = tracker.get_sample()
            if not frame_read:
                continue

            result = pipeline.process(sample, time.monotonic())

            for event in result.events:
                print(f"[{tracker.frame_count:5d}] {event}")

            frame = tracker.get_frame_with_landmarks()
            if frame is not None:
                debug = result.debug
                info_lines = [
                    f"Status: {result.status.name}",
                    f"Pinky raised: {debug.pinky_raised}",
                    f"Two finger: {debug.two_finger_active}",
                    f"Palm open: {debug.palm_open}",
                    f"Fist: {debug.fist_closed}",
                ]
                if sample is not None:
                    info_lines.append(f"Visibility: {sample.visibility:.2f}")
                for i, line in enumerate(info_lines):
                    cv2.putText(
                        frame, line, (10, 30 + i * 25),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1
                    )

                if result.cursor is not None:
                    # Cursor is computed against the camera-sized screen here
                    cx, cy = int(result.cursor[0]), int(result.cursor[1])
                    cv2.circle(frame, (cx, cy), 8, (0, 0, 255), 2)

                cv2.imshow("FingerCursor Debug", frame)

            if cv2.waitKey(1) & 0xFF == ord('q'):
                break

    finally:
        tracker.stop()
        cv2.destroyAllWindows()

    return 0


def run_tracking_mode(config):
    """Run FingerCursor with the background worker driving the pointer."""
    import signal
    import atexit
    from PyQt5.QtWidgets import QApplication
    from PyQt5.QtCore import QThread, Qt
    from gestures import EventKind, TrackingStatus
    from pointer import PointerInjector, virtual_screen_bounds
    from webcam import TrackingWorker

    app = QApplication(sys.argv)
    app.setQuitOnLastWindowClosed(False)

    bounds = virtual_screen_bounds()
    if bounds is None:
        print("ERROR: No screens available")
        return 1

    injector = PointerInjector()

    thread = QThread()
    worker = TrackingWorker(config, bounds)
    worker.moveToThread(thread)

    def cleanup():
        """Ensure camera is released on exit."""
        print("\nCleaning up camera resources...")
        injector.set_paused(True)
        worker.stop_process()
        thread.quit()
        thread.wait(2000)
        print("Cleanup complete.")

    atexit.register(cleanup)

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        print(f"\nReceived signal {signum}, shutting down...")
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    def handle_event(event):
        if event.kind == EventKind.DICTATION_START:
            print("Action: Dictation start requested")
        elif event.kind == EventKind.DICTATION_STOP:
            print("Action: Dictation stop requested")
        else:
            print(f"Action: {event}")
            injector.handle_event(event)

    def handle_status(status):
        print(f"Status: {status.name}")
        # Moves queued before a stop must not reach the pointer
        injector.set_paused(status not in (TrackingStatus.SEARCHING_HAND, TrackingStatus.TRACKING))

    def handle_debug_state(state):
        logger.debug(
            "Pinky %s, two finger %s, palm %s, fist %s",
            state.pinky_raised, state.two_finger_active, state.palm_open, state.fist_closed,
        )

    def handle_screens_changed(*_):
        updated = virtual_screen_bounds()
        if updated is not None:
            worker.set_screen_bounds(updated)

    app.screenAdded.connect(handle_screens_changed)
    app.screenRemoved.connect(handle_screens_changed)

    # Queued connections: pointer injection runs on the main thread
    thread.started.connect(worker.start_process)
    worker.cursor_moved.connect(injector.move_to, Qt.QueuedConnection)
    worker.gesture_event.connect(handle_event, Qt.QueuedConnection)
    worker.status_changed.connect(handle_status, Qt.QueuedConnection)
    worker.debug_state.connect(handle_debug_state, Qt.QueuedConnection)
    worker.error.connect(lambda msg: print(f"WORKER ERROR: {msg}"), Qt.QueuedConnection)

    thread.start()

    try:
        result = app.exec_()
    finally:
        cleanup()
        atexit.unregister(cleanup)  # Avoid double cleanup

    return result


def main():
    """Main entry point."""
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from gestures import load_config
    config = load_config(args.config)

    # Apply CLI overrides
    if args.camera is not None:
        config.camera.device_id = args.camera
    if args.debug:
        config.ui.debug_overlay = True

    print("FingerCursor starting...")
    print(f"  Camera: {config.camera.device_id}")
    print(f"  Debug: {config.ui.debug_overlay}")
    print()

    if config.ui.debug_overlay:
        return run_debug(config)
    return run_tracking_mode(config)


if __name__ == "__main__":
    sys.exit(main())
