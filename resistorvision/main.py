"""Command line entry point for resistorvision."""
import argparse
import logging
import sys
from typing import Optional, Sequence

from .backends import create_backend
from .backends.yolo_backend import export_to_onnx
from .config.settings import Config, load_config
from .core.colors import COLOR_CODES, parse_color
from .core.entities import ScanSuccess
from .core.exceptions import ApplicationError, ImageLoadError
from .core.logging_config import configure_logging
from .core.messages import supported_languages, translate
from .services.band_classifier import CentroidColorClassifier
from .services.history import DetectionHistory
from .services.resistance_decoder import decode_resistance
from .services.scan_pipeline import PipelineSettings, ResistorScanPipeline
from .services.swatch_analyzer import SwatchAnalyzer, auto_calibrate, default_body_region
from .utils.image_utils import load_photo

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _parse_rgb(text: str):
    parts = text.replace(" ", "").split(",")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError(f"expected R,G,B, got '{text}'")
    try:
        values = tuple(int(p) for p in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected integers in '{text}'")
    if any(not 0 <= v <= 255 for v in values):
        raise argparse.ArgumentTypeError(f"channels must be 0-255 in '{text}'")
    return values


def _describe(colors, mode) -> str:
    reading = decode_resistance(colors, mode)
    names = " ".join(c.value for c in colors)
    return f"{names} -> {reading.display()}"


def cmd_decode(args, config: Config) -> int:
    colors = [parse_color(name) for name in args.colors]
    mode = args.bands or len(colors)
    print(_describe(colors, mode))
    return EXIT_OK


def cmd_classify(args, config: Config) -> int:
    label = CentroidColorClassifier().classify((args.r, args.g, args.b))
    if label is None:
        print(translate("unrecognized_color", config.language, r=args.r, g=args.g, b=args.b))
        return EXIT_FAILURE
    print(f"{label.value} {COLOR_CODES[label].hex}")
    return EXIT_OK


def cmd_swatch(args, config: Config) -> int:
    analyzer = SwatchAnalyzer()
    if args.image:
        buffer = load_photo(args.image, crop_fraction=config.capture_crop_fraction,
                            side=config.input_size)
        if args.auto_calibrate:
            analyzer.calibration = auto_calibrate(buffer)
        result = analyzer.analyze(buffer, default_body_region(buffer.side), args.bands or 4)
    elif args.samples:
        result = analyzer.classify_swatches(args.samples)
    else:
        print("swatch: give R,G,B samples or --image", file=sys.stderr)
        return EXIT_USAGE

    if not result.success:
        r, g, b = result.unrecognized
        print(translate("unrecognized_color", config.language, r=r, g=g, b=b))
        return EXIT_FAILURE

    mode = args.bands or len(result.colors)
    print(_describe(result.colors, mode))
    return EXIT_OK


def build_pipeline(config: Config, detector_path: Optional[str] = None,
                   classifier_path: Optional[str] = None) -> ResistorScanPipeline:
    backend_config = {"input_size": config.input_size, "boxes_in_pixels": config.boxes_in_pixels}
    detector = create_backend(detector_path or config.detector_model_path, backend_config)
    classifier = create_backend(classifier_path or config.classifier_model_path, backend_config)
    return ResistorScanPipeline(detector, classifier, PipelineSettings.from_config(config))


def cmd_scan(args, config: Config) -> int:
    pipeline = build_pipeline(config, args.detector, args.classifier)
    history = DetectionHistory(config.history_size)
    exit_code = EXIT_OK

    for photo in args.photos:
        try:
            buffer = load_photo(photo, crop_fraction=config.capture_crop_fraction, side=config.input_size)
        except ImageLoadError as e:
            logger.warning(f"Skipping {photo}: {e}")
            print(f"{photo}: {e}")
            exit_code = EXIT_FAILURE
            continue
        result = pipeline.scan(buffer)

        if isinstance(result, ScanSuccess):
            reading = decode_resistance(result.colors, result.band_count_mode)
            history.add(result, reading)
            colors = ", ".join(c.value for c in result.colors)
            print(f"{photo}: {translate('detected_bands', config.language, count=len(result.colors), colors=colors)}")
            print(f"{photo}: {translate('resistance', config.language)}: {reading.display()}")
        else:
            exit_code = EXIT_FAILURE
            message = translate(result.message_key, config.language,
                                count=result.detection_count, error=result.error or "")
            print(f"{photo}: {message}")

    if len(args.photos) > 1:
        print(f"{len(history)}/{len(args.photos)} photos decoded")
    return exit_code


def cmd_export(args, config: Config) -> int:
    path = export_to_onnx(args.weights, args.imgsz or config.input_size)
    print(path)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resistorvision",
        description="Read resistor color bands from names, RGB swatches or photos."
    )
    parser.add_argument("--config", default="config.json", help="Path to JSON config file")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Override configured log level")
    parser.add_argument("--language", choices=supported_languages(), help="Message language")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("decode", help="Decode a band color sequence")
    p.add_argument("colors", nargs="+", help="Band colors, left to right")
    p.add_argument("--bands", type=int, choices=[3, 4, 5, 6],
                   help="Band count mode (default: number of colors)")
    p.set_defaults(func=cmd_decode)

    p = sub.add_parser("classify", help="Name the band color of one RGB sample")
    p.add_argument("r", type=int)
    p.add_argument("g", type=int)
    p.add_argument("b", type=int)
    p.set_defaults(func=cmd_classify)

    p = sub.add_parser("swatch", help="Decode from RGB swatches or a centred photo")
    p.add_argument("samples", nargs="*", type=_parse_rgb, help="R,G,B samples, left to right")
    p.add_argument("--image", help="Photo with the resistor body across the centre strip")
    p.add_argument("--bands", type=int, choices=[3, 4, 5, 6])
    p.add_argument("--auto-calibrate", action="store_true", help="Correct photo brightness first")
    p.set_defaults(func=cmd_swatch)

    p = sub.add_parser("scan", help="Read a resistor photo with the detection models")
    p.add_argument("photos", nargs="+")
    p.add_argument("--detector", help="Resistor localization model (.onnx or .pt)")
    p.add_argument("--classifier", help="Band color model (.onnx or .pt)")
    p.set_defaults(func=cmd_scan)

    p = sub.add_parser("export", help="Export Ultralytics .pt weights to ONNX")
    p.add_argument("weights")
    p.add_argument("--imgsz", type=int)
    p.set_defaults(func=cmd_export)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ApplicationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE

    if args.language:
        config.language = args.language
    configure_logging(
        log_level=args.log_level or config.log_level,
        log_dir=config.log_dir,
        enable_file_logging=config.log_to_file,
        structured_logging=config.structured_logging,
    )

    try:
        return args.func(args, config)
    except ApplicationError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
