# android2views/main.py
import argparse
import logging
import sys

from .log import get_logger, setup_logging
from .translator.generator import STRATEGIES, ConvertConfig, convert_project

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m android2views.main",
        description=(
            "Convert Android layout XML (every layout-<qualifier> variant) into web and Flutter views.\n"
            "Each logical layout yields markup plus a typed binding wrapper per target."
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--res", required=True, help="Path to the res directory holding layout*/ folders")
    parser.add_argument("--out", required=True, help="Output directory; one subfolder per target")
    parser.add_argument("--values", help="Path to res/values for style and resource resolution (default: <res>/values)")
    parser.add_argument("--target", dest="targets", action="append", choices=sorted(STRATEGIES),
                        help="Target platform, repeatable (default: web)")
    parser.add_argument("--layout", dest="layouts", action="append",
                        help="Only convert this logical layout, repeatable (default: all)")
    parser.add_argument("--jobs", type=int, default=1, help="Layouts converted in parallel")
    parser.add_argument("--verbose", action="store_true", help="Log rule fallbacks and dropped attributes")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    config = ConvertConfig(
        res_dir=args.res,
        out_dir=args.out,
        values_dir=args.values,
        targets=tuple(args.targets or ("web",)),
        jobs=max(1, args.jobs),
        layouts=tuple(args.layouts or ()),
    )
    logger.info("config res= %s", config.res_dir)
    logger.info("config values= %s", config.values_dir or "<res>/values")
    logger.info("config out= %s", config.out_dir)
    logger.info("config targets= %s", ", ".join(config.targets))

    try:
        report = convert_project(config)
    except (OSError, ValueError) as e:
        logger.error("Cannot start conversion: %s", e)
        return 1

    for failure in report.failures:
        logger.error("FAILED %s: %s", failure.name, failure.error)
    logger.info("Done: %d converted, %d failed", len(report.converted), len(report.failures))
    return 0 if report.ok else 2


if __name__ == "__main__":
    sys.exit(main())
