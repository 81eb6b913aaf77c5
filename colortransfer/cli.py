"""Command line entry point for colour transfer."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

import numpy as np

from colortransfer.colorspace import DEFAULT_COLORSPACE, Colorspace, supported_colorspaces
from colortransfer.errors import InvalidInputError
from colortransfer.gui import run_interactive
from colortransfer.image_io import load_image, save_image
from colortransfer.log import error, log, metric, warn
from colortransfer.session import TransferSession
from colortransfer.transfer import DEFAULT_RATIOS, TransferEngine
from evaluation.metrics import compute_psnr, compute_ssim, statistics_distance


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="colortransfer",
        description="Restyle a target image with the colour statistics of a reference image.",
    )
    parser.add_argument("reference", help="Reference image providing the colour statistics")
    parser.add_argument("target", help="Target image to restyle")
    parser.add_argument("output", nargs="?", default=None, help="Optional path for the transferred image")
    parser.add_argument(
        "--colorspace",
        choices=[c.value for c in supported_colorspaces()],
        default=DEFAULT_COLORSPACE.value,
        type=str.lower,
        help=f"Working colorspace (default: {DEFAULT_COLORSPACE.value})",
    )
    parser.add_argument(
        "--ratios",
        nargs=3,
        type=float,
        default=DEFAULT_RATIOS,
        metavar=("C1", "C2", "C3"),
        help="Per-channel blend ratios in [0, 1]; out-of-range values are clamped (default: 1 1 1)",
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Open the interactive window; ESC saves the current result and exits",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Print PSNR/SSIM against the target and the statistics distance to the reference",
    )
    return parser


def report_metrics(result: np.ndarray, engine: TransferEngine, colorspace: Colorspace):
    try:
        psnr = compute_psnr(engine.target, result)
        ssim = compute_ssim(engine.target, result)
    except ValueError as exc:
        warn(f"PSNR/SSIM unavailable: {exc}")
    else:
        metric(f"PSNR vs target: {psnr:.2f} dB | SSIM vs target: {ssim:.4f}")

    distance = statistics_distance(result, engine.reference, colorspace)
    metric(
        "Statistics distance to reference | "
        f"mean: {np.array2string(distance.mean, precision=4)} | "
        f"std: {np.array2string(distance.std, precision=4)}"
    )


def run(args: argparse.Namespace) -> np.ndarray:
    log("Loading images...")
    reference = load_image(args.reference, "reference")
    target = load_image(args.target, "target")
    engine = TransferEngine(reference, target)

    session = TransferSession()
    session.select(args.colorspace)
    for channel, ratio in enumerate(args.ratios):
        session.set_ratio(channel, ratio)

    if args.interactive:
        log("Starting interactive transfer...")
        result = run_interactive(engine.reference, engine.target, session)
    else:
        params = session.params
        labels = ", ".join(f"{label}={ratio:.2f}" for label, ratio in zip(session.labels, params.ratios))
        log(f"Transferring in {params.colorspace.name} ({labels})...")
        result = engine.transfer(params.colorspace, params.ratios)

    if args.metrics:
        report_metrics(result, engine, session.params.colorspace)

    if args.output:
        save_image(args.output, result)
        log(f"Output saved to: {args.output}")

    return result


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        run(args)
    except InvalidInputError as exc:
        error(str(exc))
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
