import argparse
import sys
import string
from typing import Dict, List, Optional, Tuple
from .commands import *
from ..utils import setup_logger


class Formatter(
    argparse.ArgumentDefaultsHelpFormatter,
    argparse.RawDescriptionHelpFormatter,
):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=50, width=None)


class FormatterMetavar(Formatter, argparse.MetavarTypeHelpFormatter):
    pass


def build_parser_phantom() -> argparse.ArgumentParser:
    _parser = argparse.ArgumentParser(add_help=False)
    _parser.add_argument(
        "type",
        type=str,
        choices=["shepp-logan", "torso", "tubes"],
        help="Type of the phantom.",
    )
    parser = _parser.add_argument_group("grid")
    parser.add_argument(
        "--size",
        type=str,
        required=True,
        help="Grid size, NX,NY for a slice or NX,NY,NZ for a volume, e.g. 128,128,64",
    )
    parser.add_argument(
        "--plane",
        type=str,
        choices=["axial", "coronal", "sagittal"],
        help="Orientation of a 2D slice (default: axial).",
    )
    parser.add_argument(
        "--slice-position",
        type=float,
        default=0.0,
        help="Position of a 2D slice along the through-plane axis in cm.",
    )
    parser = _parser.add_argument_group("phantom")
    parser.add_argument(
        "--intensity",
        type=str,
        help="Intensities as JSON (string or file path). The Shepp-Logan phantom also accepts the presets ct, mri and default.",
    )
    parser.add_argument(
        "--mask",
        type=str,
        help="Structures to include in a boolean mask as JSON (string or file path).",
    )
    parser.add_argument(
        "--geometry",
        type=str,
        help="Geometry of the tubes phantom as JSON (string or file path).",
    )
    parser.add_argument(
        "--stack",
        type=str,
        help="JSON array of tubes intensities, rendered along a trailing axis.",
    )
    parser.add_argument(
        "--resp-signal",
        type=str,
        help="Lung volume in L per frame for the torso phantom (CSV/JSON/NPY).",
    )
    parser.add_argument(
        "--cardiac-signal",
        type=str,
        help="Chamber volumes in mL per frame for the torso phantom (CSV/JSON).",
    )
    parser.add_argument(
        "--num-workers",
        type=int,
        help="Number of threads rendering torso frames.",
    )
    return _parser


def build_parser_outputs(formats: List[str]) -> argparse.ArgumentParser:
    _parser = argparse.ArgumentParser(add_help=False)
    parser = _parser.add_argument_group("output")
    parser.add_argument(
        "--out", type=str, required=True, help="Path to the output file."
    )
    parser.add_argument(
        "--format",
        type=str,
        help="Output format: %s. Inferred from the extension of <out> if not provided."
        % ", ".join(formats),
    )
    return _parser


def build_parser_metadata() -> argparse.ArgumentParser:
    _parser = argparse.ArgumentParser(add_help=False)
    parser = _parser.add_argument_group("metadata")
    parser.add_argument(
        "--meta", type=str, help="Path to the metadata JSON (default: <out>.json)."
    )
    parser.add_argument(
        "--no-meta", action="store_true", help="Disable the metadata JSON."
    )
    return _parser


def build_parser_signals() -> argparse.ArgumentParser:
    _parser = argparse.ArgumentParser(add_help=False)
    _parser.add_argument(
        "type",
        type=str,
        choices=["respiratory", "cardiac"],
        help="Type of the signal.",
    )
    parser = _parser.add_argument_group("signal")
    parser.add_argument(
        "--duration", type=float, default=10.0, help="Duration in seconds."
    )
    parser.add_argument("--fs", type=float, default=24.0, help="Sampling rate in Hz.")
    parser.add_argument(
        "--rate",
        type=float,
        help="Breaths per minute or beats per minute (default: 15 or 70).",
    )
    parser.add_argument(
        "--physiology",
        type=str,
        help="Physiology parameters as JSON (string or file path).",
    )
    return _parser


def build_parser_common() -> argparse.ArgumentParser:
    _parser = argparse.ArgumentParser(add_help=False)
    parser = _parser.add_argument_group("common")
    parser.add_argument(
        "--verbose",
        type=int,
        default=1,
        choices=[0, 1, 2],
        help="level of verbosity: (0: warning/error, 1: info, 2: debug)",
    )
    parser.add_argument("--output-log", type=str, help="Path to the output log file")
    return _parser


def build_parser() -> Tuple[
    argparse.ArgumentParser, Dict[str, argparse.ArgumentParser]
]:
    parser = argparse.ArgumentParser(
        prog="geomphantoms",
        description="geomphantoms: geometric phantoms for medical imaging",
        epilog="Run 'geomphantoms COMMAND --help' for more information on a command.",
        formatter_class=Formatter,
        add_help=False,
    )
    parser.add_argument("-h", "--help", action="help", help=argparse.SUPPRESS)
    subparsers = parser.add_subparsers(title="commands", metavar=None, dest="command")
    parser_common = build_parser_common()
    # phantom
    parser_phantom = subparsers.add_parser(
        "phantom",
        help="generate a Shepp-Logan, torso or tubes phantom",
        description="generate a Shepp-Logan, torso or tubes phantom",
        parents=[
            build_parser_phantom(),
            build_parser_outputs(["npy", "nifti", "mat", "cfl", "png", "tiff"]),
            build_parser_metadata(),
            parser_common,
        ],
        formatter_class=FormatterMetavar,
        add_help=False,
    )
    parser_phantom.add_argument("-h", "--help", action="help", help=argparse.SUPPRESS)
    # signals
    parser_signals = subparsers.add_parser(
        "signals",
        help="generate respiratory or cardiac signals",
        description="generate respiratory or cardiac signals",
        parents=[
            build_parser_signals(),
            build_parser_outputs(["csv", "json", "npy"]),
            parser_common,
        ],
        formatter_class=FormatterMetavar,
        add_help=False,
    )
    parser_signals.add_argument("-h", "--help", action="help", help=argparse.SUPPRESS)
    # info
    parser_info = subparsers.add_parser(
        "info",
        help="show version information",
        description="show version information",
        parents=[parser_common],
        formatter_class=FormatterMetavar,
        add_help=False,
    )
    parser_info.add_argument("-h", "--help", action="help", help=argparse.SUPPRESS)
    return parser, {
        "phantom": parser_phantom,
        "signals": parser_signals,
        "info": parser_info,
    }


def main(argv: Optional[List[str]] = None) -> None:
    if argv is None:
        argv = sys.argv[1:]
    parser, subparsers = build_parser()
    if len(argv) == 0:
        parser.print_help(sys.stdout)
        return
    if len(argv) == 1 and argv[0] in subparsers and argv[0] != "info":
        subparsers[argv[0]].print_help(sys.stdout)
        return
    args = parser.parse_args(argv)
    setup_logger(args.output_log, args.verbose)
    command_class = "".join(string.capwords(w) for w in args.command.split("-"))
    globals()[command_class](args).main()


if __name__ == "__main__":
    main()
