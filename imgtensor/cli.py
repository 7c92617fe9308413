from __future__ import annotations

import argparse
import logging
import sys

from imgtensor.config.convert import ConvertConfig, parse_crop
from imgtensor.config.io import load_config
from imgtensor.inputs.sources import resolve_input_paths
from imgtensor.pipeline import run_conversion
from imgtensor.preprocessing.channel import PreprocessStep, parse_preprocess_steps

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    steps = ", ".join(step.value for step in PreprocessStep)
    parser = argparse.ArgumentParser(
        prog="imgtensor-convert",
        description="Convert a batch of images into one NCHW float tensor file.",
    )
    parser.add_argument("--input-images", default=None, help="Comma separated image paths")
    parser.add_argument(
        "--input-image-file",
        default=None,
        help="File with one image per line; with comma separated fields the last one is the path",
    )
    parser.add_argument("--output-tensor", required=True, help="Output tensor file (NCHW)")
    parser.add_argument(
        "--config",
        default=None,
        help="Optional JSON/YAML config file; explicit flags override its values",
    )
    parser.add_argument(
        "--preprocess",
        default=None,
        help=f"Comma separated preprocess steps applied in sequence. Available: {steps}",
    )
    parser.add_argument(
        "--crop",
        default=None,
        help="Center crop 'height,width' (use --crop=-1,-1 form for negatives). "
        "A value <= 0 disables cropping. Default: -1,-1",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=None,
        help="Scale the shorter edge to this value; <= 0 disables. Default: 256",
    )
    parser.add_argument(
        "--color",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Load images in color (3 channels) or grayscale. Default: color",
    )
    parser.add_argument(
        "--text-output",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Write the tensor as JSON text instead of binary .npy",
    )
    parser.add_argument(
        "--report-time",
        default=None,
        help="Report stage timings to stdout as '<type>|<identifier>'; the only type is 'json'",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity. Default: WARNING",
    )
    return parser


def build_config(args: argparse.Namespace) -> ConvertConfig:
    """Merge an optional config file with explicit CLI flags (flags win)."""

    config = ConvertConfig()
    if args.config is not None:
        config = ConvertConfig.from_mapping(load_config(args.config))

    return config.replace(
        preprocess=(parse_preprocess_steps(args.preprocess) if args.preprocess is not None else None),
        crop=(parse_crop(args.crop) if args.crop is not None else None),
        scale=args.scale,
        color=args.color,
        text_output=args.text_output,
        report_time=args.report_time,
    )


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level)),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
        paths = resolve_input_paths(args.input_images, args.input_image_file)
        tensor = run_conversion(config, paths, args.output_tensor)
        logger.info("Converted %d image(s) into %s", tensor.dims[0], args.output_tensor)
        return 0
    except Exception as exc:  # noqa: BLE001 - CLI surface error
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
