"""CLI for handsense: ``handsense run`` and ``handsense labels``."""

import argparse
import logging
import sys

logger = logging.getLogger(__name__)

_ESC = 27


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="handsense",
        description="Rule-based hand gesture recognition on a camera or video",
    )
    sub = parser.add_subparsers(dest="command")

    # handsense run
    run_p = sub.add_parser("run", help="Recognize gestures from a source")
    run_p.add_argument(
        "--input", "-i",
        default="0",
        help="Input source: file path or camera index (default: 0)",
    )
    run_p.add_argument(
        "--method", "-m",
        choices=["manual", "frame-diff", "object-detection"],
        default=None,
        help="Secondary classifier (default: manual, or the config file value)",
    )
    run_p.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Motion threshold for frame-diff, 10-100 (default: 50)",
    )
    run_p.add_argument(
        "--learning",
        action="store_true",
        help="Record novel high-confidence gestures as custom gestures",
    )
    run_p.add_argument(
        "--config", "-c",
        default=None,
        help="YAML settings file",
    )
    run_p.add_argument(
        "--max-frames",
        type=int,
        default=None,
        help="Stop after N frames",
    )
    run_p.add_argument(
        "--display",
        action="store_true",
        help="Show a live window with the gesture overlay (ESC to quit)",
    )
    run_p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )

    # handsense labels
    sub.add_parser("labels", help="List known gesture labels")

    return parser


def _resolve_input(input_str: str):
    """Resolve --input to a camera index or a path."""
    try:
        return int(input_str)
    except ValueError:
        return input_str


def _resolve_settings(args: argparse.Namespace):
    """Config file values, overridden by explicit command-line flags."""
    from handsense.config import BackendSettings, GestureSettings, load_settings

    if args.config:
        settings, backend_settings = load_settings(args.config)
    else:
        settings, backend_settings = GestureSettings(), BackendSettings()

    changes = {}
    if args.method is not None:
        changes["detection_method"] = args.method
    if args.threshold is not None:
        changes["motion_threshold"] = args.threshold
    if args.learning:
        changes["learning_mode"] = True
    if changes:
        settings = settings.replace(**changes)
    return settings, backend_settings


def _text_outcome_callback(outcome) -> None:
    """Print one line per accepted gesture."""
    learned = "  [learned]" if outcome.newly_learned else ""
    print(
        f"  {outcome.label:<12s} {outcome.confidence:5.1f}%  "
        f"via {outcome.source.value:<8s} total={outcome.gestures_detected}{learned}"
    )


def _print_summary(recognizer) -> None:
    stats = recognizer.arbiter.state.stats
    custom = recognizer.arbiter.state.custom_gestures
    print(
        f"\nDone: {stats.gestures_detected} gestures, "
        f"accuracy {stats.accuracy}%, session time {stats.session_time}"
    )
    if custom:
        print(f"Custom gestures: {', '.join(custom)}")


def _cmd_labels(args: argparse.Namespace) -> None:
    """Handle ``handsense labels``."""
    from handsense.types import GestureLabel

    for label in GestureLabel:
        print(f"  {label.value}")


def _cmd_run(args: argparse.Namespace) -> None:
    """Handle ``handsense run``."""
    from handsense.clock import VideoClock
    from handsense.errors import SettingsError
    from handsense.recognizer import GestureRecognizer

    try:
        settings, backend_settings = _resolve_settings(args)
    except SettingsError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    recognizer = GestureRecognizer(settings=settings, backend_settings=backend_settings)
    clock = VideoClock(_resolve_input(args.input))

    with recognizer:
        if recognizer.degraded:
            print(
                f"Warning: hand detector unavailable ({recognizer.degraded_reason}); "
                "no gestures will be recognized.",
                file=sys.stderr,
            )
        recognizer.add_listener(_text_outcome_callback)
        recognizer.attach(clock)
        if args.display:
            _attach_display(clock, recognizer)

        recognizer.start()
        try:
            clock.run(max_frames=args.max_frames)
        except IOError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        except KeyboardInterrupt:
            pass
        finally:
            if args.display:
                import cv2

                cv2.destroyAllWindows()

        _print_summary(recognizer)


def _attach_display(clock, recognizer) -> None:
    """Show each frame with the gesture overlay; ESC stops the clock."""
    import cv2

    from handsense.overlay import GestureOverlay

    overlay = GestureOverlay()

    def on_frame(frame):
        image = frame.data.copy()
        overlay.draw(
            image,
            recognizer.last_outcome,
            recording=recognizer.arbiter.is_active,
            degraded=recognizer.degraded,
        )
        cv2.imshow("handsense", image)
        if cv2.waitKey(1) & 0xFF == _ESC:
            clock.stop()

    clock.on_frame(on_frame)


def main():
    """Entry point for ``handsense`` CLI."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if getattr(args, "verbose", False):
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    if args.command == "labels":
        _cmd_labels(args)
    elif args.command == "run":
        _cmd_run(args)


if __name__ == "__main__":
    main()
