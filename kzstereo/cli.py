"""Command line entry point: kzstereo [options] im1 im2 dMin dMax [dispMap.tif]

Without an output path the normalized occlusion cost and lambda are printed
on standard output. Any error prints one diagnostic line on standard error
and exits with status 1.
"""

import argparse
import logging
import re
import sys
from pathlib import Path
from typing import NoReturn

from kzstereo.errors import InvalidArgument, KZStereoError
from kzstereo.parameters.cost_parameters import CostParameters, DataCostKind
from kzstereo.pipelines.stereo_pipeline import (
    FractionTokens,
    MatchConfig,
    SolverFactory,
    StereoMatchPipeline,
)

logger = logging.getLogger(__name__)

PROG = "kzstereo"

USAGE = (
    "Usage: {prog} [options] im1.png im2.png dMin dMax [dispMap.tif]\n"
    "General options:\n"
    " -i,--max_iter iter: max number of iterations\n"
    " -o,--output disp.png: scaled disparity map\n"
    " -r,--random: random alpha order at each iteration\n"
    " --seed n: seed of the random alpha order\n"
    " -v,--verbose: log progress on standard error\n"
    "Options for cost:\n"
    " -c,--data_cost dist: L1 or L2\n"
    " -l,--lambda lambda: value of lambda (smoothness)\n"
    " --lambda1 l1: smoothness cost not across edge\n"
    " --lambda2 l2: smoothness cost across edge\n"
    " -t,--threshold thres: intensity diff for 'edge'\n"
    " -k k: cost for occlusion"
)

_INTEGER_PATTERN = re.compile(r"\s*[+-]?\d+")


class _ArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise InvalidArgument(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog=PROG, usage=USAGE.format(prog=PROG), add_help=False)
    parser.add_argument("-i", "--max_iter", type=int, default=None)
    parser.add_argument("-o", "--output", default=None)
    parser.add_argument("-r", "--random", action="store_true")
    parser.add_argument("-c", "--data_cost", default=None)
    parser.add_argument("-l", "--lambda", dest="lambda_token", default=None)
    parser.add_argument("--lambda1", dest="lambda1_token", default=None)
    parser.add_argument("--lambda2", dest="lambda2_token", default=None)
    parser.add_argument("-t", "--threshold", type=int, default=None)
    parser.add_argument("-k", dest="k_token", default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("positional", nargs="*")
    return parser


def parse_data_cost(value: str) -> DataCostKind:
    try:
        return DataCostKind(value)
    except ValueError:
        raise InvalidArgument("The cost parameter must be 'L1' or 'L2'") from None


def parse_disparity(token: str) -> int:
    """Parse a whole-token integer, rejecting trailing characters."""
    if _INTEGER_PATTERN.fullmatch(token) is None:
        raise InvalidArgument("Error reading dMin or dMax")
    return int(token)


def build_config(args: argparse.Namespace) -> MatchConfig:
    """Translate parsed arguments into a MatchConfig.

    Raises:
        InvalidArgument: On a bad data cost, disparity bound or seed
        InvalidFraction: On a malformed cost token, checked before the disparity bounds
    """
    params = CostParameters()
    if args.max_iter is not None:
        params.max_iterations = args.max_iter
    if args.threshold is not None:
        params.edge_threshold = args.threshold
    if args.random:
        params.randomize_order = True
    if args.data_cost is not None:
        params.data_cost = parse_data_cost(args.data_cost)

    tokens = FractionTokens(
        lambda_token=args.lambda_token,
        lambda1_token=args.lambda1_token,
        lambda2_token=args.lambda2_token,
        k_token=args.k_token,
    )
    tokens.decoded()

    positional = args.positional
    d_min = parse_disparity(positional[2])
    d_max = parse_disparity(positional[3])

    config_kwargs = {}
    if args.seed is not None:
        if args.seed < 0:
            raise InvalidArgument(f"The seed must be >= 0, got {args.seed}")
        config_kwargs["seed"] = args.seed

    return MatchConfig(
        left_path=Path(positional[0]),
        right_path=Path(positional[1]),
        d_min=d_min,
        d_max=d_max,
        disparity_output=Path(positional[4]) if len(positional) > 4 else None,
        scaled_output=Path(args.output) if args.output else None,
        params=params,
        tokens=tokens,
        **config_kwargs
    )


def configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s | %(message)s")
    logging.getLogger("kzstereo").setLevel(logging.INFO if verbose else logging.WARNING)


def main(argv: list[str] | None = None, *, solver_factory: SolverFactory | None = None) -> int:
    """Run the matcher from command line arguments.

    Args:
        argv: Arguments without the program name (None = sys.argv[1:])
        solver_factory: Replaces the default Match solver

    Returns:
        Process exit status
    """
    configure_logging(verbose=False)
    parser = build_parser()
    try:
        args = parser.parse_intermixed_args(argv)
    except InvalidArgument as error:
        logger.error(str(error))
        return 1
    configure_logging(verbose=args.verbose)

    if len(args.positional) not in (4, 5):
        print(USAGE.format(prog=PROG), file=sys.stderr)
        return 1

    try:
        config = build_config(args)
        pipeline_kwargs = {}
        if solver_factory is not None:
            pipeline_kwargs["solver_factory"] = solver_factory
        pipeline = StereoMatchPipeline(config=config, **pipeline_kwargs)
        result = pipeline.run()
    except KZStereoError as error:
        logger.error(str(error))
        return 1

    if not config.runs_solver:
        print(result.k_report())
        print(result.lambda_report())
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
