import csv
from pathlib import Path

import numpy as np

from colortransfer.colorspace import Colorspace
from colortransfer.errors import InvalidInputError
from colortransfer.image_io import load_image, save_image
from colortransfer.log import log, metric, warn
from colortransfer.transfer import transfer
from evaluation.metrics import compute_psnr, compute_ssim, statistics_distance

# -----------------------------------------------------------------------------
# Configurable paths
# -----------------------------------------------------------------------------
REFERENCE_PATH = Path("data/reference.png")
TARGET_DIR = Path("data/targets")
OUTPUT_DIR = Path("results/transferred")
METRICS_CSV_PATH = Path("results/metrics_transfer.csv")

# -----------------------------------------------------------------------------
# Transfer config
# -----------------------------------------------------------------------------
COLORSPACE = Colorspace.LAB
RATIOS = (1.0, 1.0, 1.0)

SUPPORTED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".tif", ".tiff", ".webp"}


def find_targets(directory: Path):
    return sorted(p for p in directory.iterdir() if p.suffix.lower() in SUPPORTED_EXTENSIONS)


def main():
    if not TARGET_DIR.is_dir():
        raise FileNotFoundError(f"Target directory not found: {TARGET_DIR}")

    target_files = find_targets(TARGET_DIR)
    if not target_files:
        raise RuntimeError(f"No images found in {TARGET_DIR}")

    log("Loading reference...")
    reference = load_image(REFERENCE_PATH, "reference")

    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    METRICS_CSV_PATH.parent.mkdir(parents=True, exist_ok=True)
    log(f"Found {len(target_files)} target images.")
    log(f"Colorspace: {COLORSPACE.name} | Ratios: {RATIOS}")

    metrics_rows = []

    for target_path in target_files:
        log(f"Processing {target_path.name}...")

        try:
            target = load_image(target_path, "target")
            result = transfer(reference, target, COLORSPACE, RATIOS)
        except InvalidInputError as exc:
            warn(f"{exc}. Skipping.")
            continue

        output_path = OUTPUT_DIR / target_path.name
        save_image(output_path, result)

        target = target[:, :, :3]
        try:
            psnr_value = compute_psnr(target, result)
            ssim_value = compute_ssim(target, result)
        except ValueError as exc:
            warn(f"Metrics unavailable for {target_path.name}: {exc}")
            psnr_value = ssim_value = float("nan")

        distance = statistics_distance(result, reference, COLORSPACE)
        mean_distance = float(distance.mean.mean())
        std_distance = float(distance.std.mean())

        metrics_rows.append((target_path.name, psnr_value, ssim_value, mean_distance, std_distance))
        metric(
            f"{target_path.name} | PSNR: {psnr_value:.4f} | SSIM: {ssim_value:.4f} | "
            f"mean dist: {mean_distance:.4f} | std dist: {std_distance:.4f}"
        )
        log(f"Output saved to: {output_path}")

    if metrics_rows:
        averages = np.nanmean(np.array([row[1:] for row in metrics_rows], dtype=np.float64), axis=0)
    else:
        averages = np.full(4, np.nan)
        warn("No target could be transferred. Average metrics are NaN.")

    with METRICS_CSV_PATH.open("w", newline="", encoding="utf-8") as csv_file:
        writer = csv.writer(csv_file)
        writer.writerow(["image_name", "psnr", "ssim", "mean_distance", "std_distance"])
        for name, *values in metrics_rows:
            writer.writerow([name] + [f"{v:.6f}" for v in values])
        writer.writerow(["AVERAGE"] + [f"{v:.6f}" for v in averages])

    log("Batch transfer complete.")
    log(f"Average PSNR vs target: {averages[0]:.4f}")
    log(f"Average SSIM vs target: {averages[1]:.4f}")
    log(f"Metrics CSV saved to: {METRICS_CSV_PATH}")


if __name__ == "__main__":
    main()
