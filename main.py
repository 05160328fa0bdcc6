"""
MouseGest - Mouse gesture recognition

Entry point for the application.
"""
import argparse
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))


BUTTONS = {"left": 1, "right": 2, "middle": 4}


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="MouseGest - Mouse gesture recognition",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "--replay",
        type=Path,
        default=None,
        help="Replay a recorded trace (YAML) without opening a window",
    )

    parser.add_argument(
        "--button",
        choices=sorted(BUTTONS),
        default=None,
        help="Gesture mouse button (overrides config)",
    )

    parser.add_argument(
        "--algorithm",
        choices=["Strict", "ShapeIndependent", "Combined"],
        default=None,
        help="Matching algorithm (overrides config)",
    )

    parser.add_argument(
        "--dump-config",
        type=Path,
        default=None,
        help="Write the effective configuration to this file and exit",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args()


class _PrintListener:
    """Console output for replay mode."""

    def on_gesture_start(self):
        print("Gesture started")

    def on_gesture_change(self, pattern, result):
        print(f"  pattern {len(pattern)} vector(s) -> {result.record or '-'}")

    def on_gesture_end(self, pattern, result):
        vectors = ", ".join(f"({dx:.0f}, {dy:.0f})" for dx, dy in pattern)
        print(f"Pattern: [{vectors}]")
        if result:
            print(f"Action: {result.identifier} (score {result.score:.4f})")
        else:
            print("Action: none (no matching gesture)")

    def on_gesture_abort(self):
        print("Gesture aborted")

    def on_rocker(self, command):
        print(f"Action: {command} (rocker)")

    def on_wheel(self, command):
        print(f"Action: {command} (wheel)")


def run_replay(config, trace_path: Path):
    """Feed a recorded trace through the pipeline and print the outcome."""
    from gestures import GesturePipeline
    from gestures.replay import load_samples

    pipeline = GesturePipeline(config, _PrintListener())

    samples = load_samples(trace_path, config.gesture.mouse_button)
    print(f"Replaying {len(samples)} samples from {trace_path}")
    for sample in samples:
        pipeline.feed(sample)

    if samples:
        # let a trailing timeout expire
        pipeline.poll(samples[-1].timestamp + config.gesture.timeout.duration)
    return 0


def run_capture_mode(config):
    """Run MouseGest with a capture window."""
    import signal
    import atexit
    from PyQt5.QtWidgets import QApplication
    from gestures import GestureWorker
    from ui import CaptureWindow

    app = QApplication(sys.argv)

    # The worker lives on the GUI thread: samples and timeout polling share it
    worker = GestureWorker(config)
    window = CaptureWindow(worker)
    window.show()

    def cleanup():
        """Stop the timeout timer on exit."""
        worker.stop_process()

    atexit.register(cleanup)

    def signal_handler(signum, frame):
        """Handle Ctrl+C and kill signals gracefully."""
        print(f"\nReceived signal {signum}, shutting down...")
        app.quit()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    def handle_match(event):
        """Hand the recognized gesture to command dispatch."""
        if event.result:
            print(f"Action: {event.result.identifier}")
        else:
            print("Action: none (no matching gesture)")

    worker.gesture_matched.connect(handle_match)
    worker.gesture_aborted.connect(lambda: print("Action: gesture aborted"))
    worker.rocker_event.connect(lambda command: print(f"Action: {command} (rocker)"))
    worker.wheel_event.connect(lambda command: print(f"Action: {command} (wheel)"))
    worker.error.connect(lambda msg: print(f"WORKER ERROR: {msg}"))

    worker.start_process()

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
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    # Load config
    from gestures import load_config, ConfigError, MatchingAlgorithm, MouseButton
    from gestures.config import save_config
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"ERROR: Invalid configuration: {e}")
        return 2

    # Apply CLI overrides
    if args.button:
        config.gesture.mouse_button = MouseButton(BUTTONS[args.button])
    if args.algorithm:
        config.gesture.matching_algorithm = MatchingAlgorithm(args.algorithm)

    if args.dump_config:
        save_config(config, args.dump_config)
        print(f"Configuration written to {args.dump_config}")
        return 0

    print(f"MouseGest starting...")
    print(f"  Button: {int(config.gesture.mouse_button)}")
    print(f"  Algorithm: {config.gesture.matching_algorithm.value}")
    print(f"  Gestures: {len(config.gestures)}")
    print()

    if args.replay:
        try:
            return run_replay(config, args.replay)
        except ConfigError as e:
            print(f"ERROR: {e}")
            return 2
    return run_capture_mode(config)


if __name__ == "__main__":
    sys.exit(main())
