import argparse
import json
import sys
import time
import logging
from typing import List, Optional

from ..core import ImageIOError, InvalidParameter
from ..config_loader import load_config, apply_overrides
from ..applicator import GridApplicator
from ..noise import NOISE_CLASS_MAP, try_create_noise
from ..utils import read_grid, write_grid, setup_logging
from .. import __version__

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_USAGE_ERROR = 2 # argparse's own exit code
EXIT_IO_ERROR = 3


def create_parser() -> argparse.ArgumentParser:
    """Creates the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="noisegen",
        description=f"Image noise generator v{__version__}. Adds synthetic noise to 8-bit images and image stacks.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter # Shows defaults in help
    )

    parser.add_argument(
        "-i", "--input-image",
        type=str,
        help="Input image: a file (png, bmp, jpg, multi-page tif, gif) or a directory of slices.",
        default=None
    )

    parser.add_argument(
        "-o", "--output-image",
        type=str,
        help="Output image. A '%%' placeholder (e.g. out_%%03d.png) writes one file per slice.",
        default=None
    )

    parser.add_argument(
        "-n", "--noise-type",
        type=str.lower,
        help=f"Noise type, one of: {', '.join(sorted(NOISE_CLASS_MAP))}. "
             "Overrides 'noise_type' in the config file.",
        default=None
    )

    parser.add_argument(
        "-m", "--mean",
        type=float,
        help="Mean value of the generated noise (model default: 0 additive, 1 multiplicative).",
        default=None
    )

    parser.add_argument(
        "-s", "--stddev",
        type=float,
        help="Standard deviation of the generated noise (gaussian noise types).",
        default=None
    )

    parser.add_argument(
        "-a", "--amplitude",
        type=float,
        help="Amplitude of the generated noise (uniform noise types).",
        default=None
    )

    parser.add_argument(
        "-p", "--probability",
        type=float,
        help="Probability for a pixel to be affected (impulse and sparse noise types).",
        default=None
    )

    parser.add_argument(
        "--output-min",
        type=int,
        help="Lowest output value (also the 'pepper' value of impulse noise).",
        default=None
    )

    parser.add_argument(
        "--output-max",
        type=int,
        help="Highest output value (also the 'salt' value of impulse noise).",
        default=None
    )

    parser.add_argument(
        "--seed",
        type=int,
        help="Master random seed for reproducible noise. Overrides 'seed' in the config file.",
        default=None
    )

    parser.add_argument(
        "-j", "--workers",
        type=int,
        help="Number of worker threads (default: number of CPUs).",
        default=None
    )

    parser.add_argument(
        "-c", "--config",
        type=str,
        help="Path to a JSON configuration file. If not provided, default settings are used.",
        default=None
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log debug messages.")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors.")

    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show the final configuration (after loading and overrides) and exit."
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def run_cli(argv: Optional[List[str]] = None) -> int:
    """Parses arguments, adds the noise and writes the result. Returns the exit code."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        setup_logging(logging.DEBUG)
    elif args.quiet:
        setup_logging(logging.WARNING)
    else:
        setup_logging(logging.INFO)

    # --- Load Configuration ---
    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        logger.critical(str(e))
        return EXIT_CONFIG_ERROR
    except json.JSONDecodeError as e:
        logger.critical(f"Error reading config file: {e}")
        return EXIT_CONFIG_ERROR
    except ValueError as e:
        logger.critical(f"Configuration Error: {e}")
        return EXIT_CONFIG_ERROR

    # --- Apply CLI Overrides ---
    config = apply_overrides(config, {
        'noise_type': args.noise_type,
        'mean': args.mean,
        'stddev': args.stddev,
        'amplitude': args.amplitude,
        'probability': args.probability,
        'output_min': args.output_min,
        'output_max': args.output_max,
        'seed': args.seed,
        'workers': args.workers,
    })
    if not (args.verbose or args.quiet) and config.get('log_level'):
        try:
            setup_logging(config['log_level'])
        except ValueError as e:
            logger.critical(f"Configuration Error: {e}")
            return EXIT_CONFIG_ERROR

    if args.show_config:
        print(json.dumps(config, indent=4, default=str))
        return EXIT_OK

    if not args.input_image or not args.output_image:
        parser.error("the following arguments are required: -i/--input-image, -o/--output-image")

    # --- Build the Model ---
    result = try_create_noise(config)
    if not result.ok:
        logger.critical(str(result.error))
        return EXIT_CONFIG_ERROR
    model = result.model
    logger.info(f"Noise model: {model.to_dict()}")

    try:
        applicator = GridApplicator(config.get('workers'))
    except InvalidParameter as e:
        logger.critical(str(e))
        return EXIT_CONFIG_ERROR

    # --- Read, Transform, Write ---
    total_start_time = time.time()
    try:
        start_time = time.time()
        grid = read_grid(args.input_image)
        logger.debug(f"Image read in {time.time() - start_time:.3f} seconds")

        start_time = time.time()
        noisy = applicator.apply(model, grid)
        logger.debug(f"Noise generated in {time.time() - start_time:.3f} seconds")

        start_time = time.time()
        write_grid(noisy, args.output_image)
        logger.debug(f"Image written in {time.time() - start_time:.3f} seconds")
    except ImageIOError as e:
        logger.critical(str(e))
        return EXIT_IO_ERROR

    logger.info(f"Done in {time.time() - total_start_time:.2f} seconds.")
    return EXIT_OK


def main():
    sys.exit(run_cli())
