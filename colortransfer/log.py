import sys


def log(message: str) -> None:
    print(f"[INFO] {message}")


def warn(message: str) -> None:
    print(f"[WARN] {message}")


def metric(message: str) -> None:
    print(f"[METRIC] {message}")


def error(message: str) -> None:
    print(f"[ERROR] {message}", file=sys.stderr)
