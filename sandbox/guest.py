"""
Guest program: real inference inside the isolated process.

Usage:
    python -m sandbox.guest --model model.onnx --input "0.1,0.2,0.3"

Contract with the host:
- success: exactly one CSV line of float32 values on stdout, exit 0
- failure: diagnostic on stderr, non-zero exit
Logs go to stderr; stdout carries only the result.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from inference import codec
from inference.errors import ExecutionError, InputError
from inference.formats import FORMATS, get_format
from inference.guest import PLUGIN_PATH_ENV

from .runner import create_backend, run_inference

logger = logging.getLogger("sandbox.guest")

DEFAULT_INPUT = "0.1,0.2,0.3,0.4"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sandbox-guest",
        description="Guest for real inference inside an isolated process",
    )
    parser.add_argument("-m", "--model", required=True, help="Path to the model file")
    parser.add_argument("-i", "--input", default=DEFAULT_INPUT, help="Comma-separated float inputs")
    parser.add_argument(
        "--format",
        choices=sorted(FORMATS),
        default=os.getenv("INFERENCE_MODEL_FORMAT", "onnx").lower(),
        help="Model format",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    args = build_parser().parse_args(argv)
    model_format = get_format(args.format)

    plugin_dir = os.getenv(PLUGIN_PATH_ENV)
    if plugin_dir:
        logger.debug(f"plugin search path: {plugin_dir}")

    try:
        inputs = codec.decode(args.input)
        logger.info(f"guest inputs: {len(inputs)} values")

        backend = create_backend(model_format)
        outputs = run_inference(args.model, inputs, backend, model_format)

    except InputError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    except ExecutionError as e:
        print(f"error [{e.kind}]: {e}", file=sys.stderr)
        return 1

    print(codec.encode(outputs))
    return 0


if __name__ == "__main__":
    sys.exit(main())
