#!/usr/bin/env python3
"""Predict emotion from a single grayscale face image.

This script runs the FER+ model on one image and prints the computation time
followed by the most likely emotions.

Usage:
    python scripts/predict_file.py --input images/avatar64.png
    python scripts/predict_file.py --model model/model.onnx --input face.png
    cat face.png | python scripts/predict_file.py --input -

Example output:
    Computation time: 4.21ms
    happiness / 87.65%
    neutral / 10.02%
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from faceio import load_gray_image, load_gray_image_stream
from faceio.errors import FaceIOError
from model import NUM_CLASSES, format_result, predict_image, top_k
from model.errors import ModelError


def top_k_arg(value: str) -> int:
    """Parse --top-k, which must be between 1 and the number of labels."""
    try:
        k = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if not 1 <= k <= NUM_CLASSES:
        raise argparse.ArgumentTypeError(f"must be between 1 and {NUM_CLASSES}, got {k}")
    return k


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description="Predict emotion from a grayscale face image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s --input images/avatar64.png
    %(prog)s --model model/model.onnx --input face.png --top-k 3
    %(prog)s --input - < face.png
        """,
    )
    parser.add_argument(
        "--model", "-m",
        type=str,
        default="model/model.onnx",
        help="Path to the model file (default: model/model.onnx)",
    )
    parser.add_argument(
        "--input", "-i",
        type=str,
        default="images/avatar64.png",
        help="Path to the input image, or - to read stdin (default: images/avatar64.png)",
    )
    parser.add_argument(
        "--top-k", "-k",
        type=top_k_arg,
        default=2,
        help=f"Number of emotions to print, 1 to {NUM_CLASSES} (default: 2)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full prediction as JSON instead of text",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the script.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)

    model_path = Path(args.model)
    if not model_path.exists():
        print(f"{model_path} does not exist", file=sys.stderr)
        return 1

    if args.input != "-" and not Path(args.input).exists():
        print(f"{args.input} does not exist", file=sys.stderr)
        return 1

    try:
        if args.input == "-":
            image = load_gray_image_stream(sys.stdin.buffer)
        else:
            image = load_gray_image(args.input)

        result = predict_image(image, model_path=model_path)

    except FaceIOError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    except ModelError as e:
        print(f"error: {e}", file=sys.stderr)
        return 3

    except Exception as e:
        print(f"error: {e}", file=sys.stderr)
        return 4

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
        return 0

    print(f"Computation time: {result.inference_ms:.2f}ms")
    for entry in top_k(result.ranking, args.top_k):
        print(format_result(entry))

    return 0


if __name__ == "__main__":
    sys.exit(main())
