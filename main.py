"""
Host CLI entry point.

Runs one inference request through the dispatcher and prints which path
ran:

    path=<Mock|Real|RealFallbackToMock> result=[...]

Run: python main.py --model model.onnx --input "0.1,0.2,0.3,0.4"
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from inference import (
    FORMATS,
    InferenceRequest,
    InputError,
    OutcomeReport,
    decode,
    render_outcome,
)
from inference.guest import model_is_file
from infra import ConfigError, InferenceConfig

logger = logging.getLogger(__name__)

DEFAULT_INPUT = "0.1,0.2,0.3,0.4"


def build_parser(config: InferenceConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sandbox-infer",
        description="Run a mock or real (sandboxed) inference flow",
    )
    parser.add_argument("-m", "--model", default=config.model_path, help="Path to a model file (optional)")
    parser.add_argument(
        "-i", "--input",
        default=DEFAULT_INPUT,
        help='Comma-separated list of float inputs, e.g. "0.1,0.2,0.3"',
    )
    parser.add_argument(
        "--plugin-dir",
        default=config.plugin_dir,
        help="Additional plugin directory for the sandbox runtime (env: WASMEDGE_PLUGIN_PATH)",
    )
    parser.add_argument(
        "--force-mock",
        action="store_true",
        help="Use mock inference even if the real backend is available",
    )
    parser.add_argument("--format", choices=sorted(FORMATS), default=config.model_format, help="Model format")
    parser.add_argument("--timeout", type=float, default=config.guest_timeout_s, help="Guest timeout in seconds")
    parser.add_argument("--json", action="store_true", help="Print the outcome as JSON")
    parser.add_argument("--log-level", default=config.log_level, help="Logging level")
    return parser


def _log_model(model: Optional[str]) -> None:
    if not model:
        logger.warning("no model provided; mock path will be used")
        return
    if model_is_file(model):
        logger.info(f"using model: {model} ({Path(model).stat().st_size} B)")
    else:
        logger.warning(f"model not found: {model}; real inference will fall back to mock")


def _log_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ConfigError(f"unknown log level '{name}'")
    return level


def main(argv: Optional[List[str]] = None) -> int:
    try:
        config = InferenceConfig.from_env()
        args = build_parser(config).parse_args(argv)
        level = _log_level(args.log_level)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    logger.info(f"args: {vars(args)}")

    config.model_format = args.format
    config.guest_timeout_s = args.timeout

    try:
        tensor = decode(args.input)
    except InputError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    _log_model(args.model)

    request = InferenceRequest(
        tensor=tensor,
        model_path=args.model,
        plugin_dir=args.plugin_dir,
        force_mock=args.force_mock,
    )
    outcome = config.create_dispatcher().dispatch(request)

    if args.json:
        print(OutcomeReport.from_outcome(outcome).model_dump_json())
    else:
        print(render_outcome(outcome))
    return 0


if __name__ == "__main__":
    sys.exit(main())
