"""Filtro de mediana 3x3/5x5 em imagens RGB.

Exemplos:
  python -m median_filter -i entrada.png -o saida.png -m seq -k 3 -n 0.1
  python -m median_filter -i entrada.png -o saida.png -m par -w 8 --metrics
  mpirun -n 4 python -m median_filter -i entrada.png -o saida.png -m dist
"""
import argparse
import csv
import logging
import sys
import time
from datetime import datetime
from pathlib import Path

from median_filter import parallel, sequential
from median_filter.config import METHODS, FilterConfig
from median_filter.errors import ConfigurationError, ImageIOError
from median_filter.grid import PixelGrid, add_noise, load_image, save_image
from median_filter.metrics import psnr, ssim

logger = logging.getLogger(__name__)

CSV_FIELDS = [
    "timestamp", "image", "kernel_size", "noise_level",
    "processing_time_ms", "method", "rank", "world_size",
]


def build_parser():
    parser = argparse.ArgumentParser(
        prog="median-filter",
        description="Apply median filter to images with various methods",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("-i", "--input", type=Path, required=True, help="Input image path")
    parser.add_argument("-o", "--output", type=Path, required=True, help="Output image path")
    parser.add_argument("-n", "--noise", type=float, default=0.0, help="Noise level (0.0 to 1.0)")
    parser.add_argument("-m", "--method", default="seq", help=f"Method: {', '.join(METHODS)}")
    parser.add_argument("-k", "--kernel", type=int, default=3, help="Kernel size (3 or 5)")
    parser.add_argument("-w", "--workers", type=int, default=None,
                        help="Thread count for the 'par' method (default: CPU count)")
    parser.add_argument("--metrics", action="store_true",
                        help="Print PSNR/SSIM against the pre-filter image")
    parser.add_argument("--results-dir", type=Path, default=Path("results"),
                        help="Directory for the CSV measurements")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def save_measurement(results_dir, config, input_path, processing_time_ms, rank=0, world_size=1):
    results_dir.mkdir(parents=True, exist_ok=True)
    csv_path = results_dir / f"{config.method}.csv"
    new_file = not csv_path.exists()

    with open(csv_path, "a", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        if new_file:
            writer.writeheader()
        writer.writerow({
            "timestamp": datetime.now().astimezone().isoformat(),
            "image": str(input_path),
            "kernel_size": config.kernel_size,
            "noise_level": config.noise_level,
            "processing_time_ms": f"{processing_time_ms:.3f}",
            "method": config.method,
            "rank": rank,
            "world_size": world_size,
        })
    return csv_path


def load_input(args, config):
    print(f"Loading image: {args.input}")
    img = load_image(args.input)
    if config.noise_level > 0.0:
        print(f"Adding {config.noise_level * 100:.1f}% noise...")
        add_noise(img, config.noise_level)
    return img


def finish(args, config, original, filtered, processing_time_ms, rank=0, world_size=1):
    print(f"Processing time: {processing_time_ms:.2f} ms")
    print(f"Saving output: {args.output}")
    save_image(filtered, args.output)

    if args.metrics:
        print(f"PSNR: {psnr(original, filtered):.2f} dB")
        print(f"SSIM: {ssim(original, filtered):.4f}")

    csv_path = save_measurement(
        args.results_dir, config, args.input, processing_time_ms, rank, world_size
    )
    print(f"Measurement saved to: {csv_path}")
    print("Done!")


def run_local(args, config):
    try:
        img = load_input(args, config)
    except ImageIOError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    original = PixelGrid(img.pixels.copy())

    print(f"Applying median filter (method: {config.method}, "
          f"kernel: {config.kernel_size}x{config.kernel_size})...")
    start = time.perf_counter()
    if config.method == "par":
        filtered = parallel.apply_median_filter(img, config.kernel_size, config.workers)
    else:
        filtered = sequential.apply_median_filter(img, config.kernel_size)
    processing_time_ms = (time.perf_counter() - start) * 1000.0

    try:
        finish(args, config, original, filtered, processing_time_ms)
    except ImageIOError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


def run_distributed(args, config):
    from median_filter import mpi
    from median_filter.distributed import apply_median_filter_mpi
    from median_filter.transport import WorldContext

    ctx = WorldContext.from_mpi()
    logger.debug("[rank %d/%d] started", ctx.rank, ctx.size)

    img = original = None
    if ctx.rank == 0:
        print(f"[rank 0] MPI processes: {ctx.size}")
        try:
            img = load_input(args, config)
        except ImageIOError as e:
            # os workers estão bloqueados esperando as dimensões
            print(f"[rank 0] Error: {e}", file=sys.stderr)
            mpi.abort(1)
            return 1
        original = PixelGrid(img.pixels.copy())
        print(f"Applying median filter (method: dist, "
              f"kernel: {config.kernel_size}x{config.kernel_size})...")

    t0 = mpi.wtime()
    result = apply_median_filter_mpi(ctx, img, config.kernel_size)
    processing_time_ms = (mpi.wtime() - t0) * 1000.0

    if ctx.rank != 0:
        return 0
    try:
        finish(args, config, original, result.image, processing_time_ms, result.rank, result.size)
    except ImageIOError as e:
        print(f"[rank 0] Error: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = FilterConfig(
        kernel_size=args.kernel, noise_level=args.noise,
        method=args.method, workers=args.workers,
    )
    try:
        config.validate()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if config.method == "dist":
        return run_distributed(args, config)
    return run_local(args, config)


if __name__ == "__main__":
    sys.exit(main())
