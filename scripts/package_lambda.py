#!/usr/bin/env python3
"""
Build the deployment zip for the chrono-tools Lambda.

Usage:
    python scripts/package_lambda.py [--python python3.12] [--output dist]
"""

from __future__ import annotations

import argparse
import shutil
import subprocess
import sys
import tempfile
import zipfile
from pathlib import Path
from typing import List

ROOT = Path(__file__).resolve().parent.parent
ZIP_NAME = "chrono_tools_lambda.zip"
HANDLER_FILE = "lambda_function.py"
PACKAGE_DIR = "chrono_tools"
REQUIREMENTS = ["python-dateutil", "dateparser", "tzdata"]


def stage_sources(build_path: Path) -> None:
    shutil.copy(ROOT / HANDLER_FILE, build_path / HANDLER_FILE)
    shutil.copytree(
        ROOT / PACKAGE_DIR,
        build_path / PACKAGE_DIR,
        ignore=shutil.ignore_patterns("__pycache__", "*.pyc"),
    )


def pip_install_command(python_bin: str, build_path: Path) -> List[str]:
    return [python_bin, "-m", "pip", "install", *REQUIREMENTS, "-t", str(build_path)]


def create_zip(python_bin: str, dist_dir: Path) -> Path:
    dist_dir.mkdir(parents=True, exist_ok=True)
    zip_path = dist_dir / ZIP_NAME
    if zip_path.exists():
        zip_path.unlink()

    with tempfile.TemporaryDirectory() as build_dir:
        build_path = Path(build_dir)
        stage_sources(build_path)
        subprocess.check_call(pip_install_command(python_bin, build_path))

        with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_DEFLATED) as zf:
            for path in sorted(build_path.rglob("*")):
                if path.is_dir() or "__pycache__" in path.parts:
                    continue
                zf.write(path, path.relative_to(build_path))

    return zip_path


def main() -> None:
    parser = argparse.ArgumentParser(description="Package the chrono-tools Lambda.")
    parser.add_argument("--python", default=sys.executable, help="Python binary to use for pip installs.")
    parser.add_argument("--output", default=str(ROOT / "dist"), help="Directory receiving the zip.")
    args = parser.parse_args()

    zip_path = create_zip(args.python, Path(args.output))
    print(f"Created {zip_path}")


if __name__ == "__main__":
    main()
