# region_detection/cli/detect_runner.py
"""Run region detection on a synthetic scene and print the resulting poses.

Hardware-free; useful to check an installation or a YAML configuration.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from region_detection.config import RegionDetectionConfig, get_config, load_config
from region_detection.core.geometry.angles import poses_to_xyz_euler
from region_detection.detector import RegionDetector
from region_detection.synthetic import SceneConfig, SceneGenerator
from region_detection.utils.format import format_poses
from region_detection.utils.io import dump_yaml
from region_detection.utils.logger import configure, get_logger, log_file

SCENES = ("square", "split-square")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--config", type=Path, help="YAML configuration file")
    parser.add_argument("--scene", choices=SCENES, default="square")
    parser.add_argument("--noise", type=float, default=0.0, help="depth noise sigma in metres")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--log-level", default=None)
    parser.add_argument("--log-dir", type=Path, default=None, help="also write logs to this directory")
    parser.add_argument(
        "--translation",
        type=float,
        nargs=3,
        default=(0.0, 0.0, 0.0),
        metavar=("X", "Y", "Z"),
        help="frame transform translation in metres",
    )
    parser.add_argument("--show-poses", action="store_true", help="print every pose")
    parser.add_argument(
        "--dump-config", action="store_true", help="print the effective configuration and exit"
    )
    return parser


def resolve_config(path: Optional[Path]) -> RegionDetectionConfig:
    base = load_config(path) if path is not None else None
    return get_config(base)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.log_level or args.log_dir:
        configure(level=args.log_level, log_dir=args.log_dir)
    log = get_logger("region_detection.cli")
    if log_file() is not None:
        log.info("Writing log to {}", log_file())

    config = resolve_config(args.config)
    if args.dump_config:
        sys.stdout.write(dump_yaml(config.to_dict()))
        return 0

    scene = SceneConfig(noise_sigma=args.noise, seed=args.seed, translation=tuple(args.translation))
    generator = SceneGenerator(scene)
    bundles = generator.square_scene() if args.scene == "square" else generator.split_square_scene()
    log.tag("SCENE", "{} with {} frame(s)", args.scene, len(bundles))

    results = RegionDetector(config, logger=log).compute(bundles)
    print(results.summary())
    for label, regions in (("closed", results.closed_region_poses), ("open", results.open_region_poses)):
        for i, poses in enumerate(regions):
            print(f"{label}[{i}]: {len(poses)} poses")
            if args.show_poses:
                print(format_poses(poses_to_xyz_euler(poses)))

    if not results.ok:
        log.warning("Detection failed: {}", results.status.message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())


__all__ = ["build_parser", "main", "resolve_config"]
