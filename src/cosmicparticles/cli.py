"""
CLI entry point: run a headless particle session.

Usage:
    cosmicparticles [--mode MODE] [--shape SHAPE] [options]
    python -m cosmicparticles [options]

Builds the selected target, animates the live cloud for a number of frames
(optionally reacting to an audio file) and reports timing and how close the
cloud got to its target. The final buffers can be saved as .npz.
"""

import argparse
import json
import sys
import time
from pathlib import Path

import numpy as np

from cosmicparticles.config import ControlScheme, Mode, ParticleConfig
from cosmicparticles.core.analyzer import FileSpectrumSource
from cosmicparticles.generators.registry import CURVE_GENERATORS, Selection
from cosmicparticles.io.ai_molecule import MoleculeValidationError, validate_molecule
from cosmicparticles.logging_config import LEVEL_NAMES, setup_logging
from cosmicparticles.pipeline import ParticleSession


def _progress_bar(current: int, total: int, width: int = 35):
    """Print a progress bar to stdout."""
    pct = current / max(total, 1) * 100
    filled = int(width * current / max(total, 1))
    bar = "#" * filled + "-" * (width - filled)
    if sys.stdout.isatty():
        sys.stdout.write(f"\r[{bar}] {pct:5.1f}%  frame {current}/{total}")
        sys.stdout.flush()
        if current >= total:
            sys.stdout.write("\n")
    else:
        if current % max(1, total // 20) == 0 or current >= total:
            print(f"{pct:5.1f}%  frame {current}/{total}", flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cosmicparticles",
        description="Headless morphing particle-field session",
    )

    # Selection
    parser.add_argument(
        "-m", "--mode", type=str, default="math",
        help=f"Mode ({', '.join(m.value for m in Mode)}; default: math)",
    )
    parser.add_argument(
        "-s", "--shape", type=str, default="koch",
        help=f"Math curve ({', '.join(CURVE_GENERATORS)}) or artifact (pyramid, column, vase)",
    )
    parser.add_argument("--molecule", type=str, default="H2O", help="Catalogue molecule id or 'custom'")
    parser.add_argument(
        "--custom-json", type=Path, default=None,
        help="JSON file with a custom molecule (implies --molecule custom)",
    )
    parser.add_argument("--time", type=float, default=0.0, help="Elapsed seconds for the solar system")
    parser.add_argument(
        "--switch-to", type=str, default=None,
        help="Switch to this mode halfway through the run",
    )

    # Session
    parser.add_argument("-n", "--particles", type=int, default=30000, help="Particle count (default: 30000)")
    parser.add_argument("--frames", type=int, default=180, help="Frames to simulate (default: 180)")
    parser.add_argument("-f", "--fps", type=int, default=60, help="Frames per second (default: 60)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--audio", type=Path, default=None, help="Audio file driving audio mode")

    # Output
    parser.add_argument("-o", "--output", type=Path, default=None, help="Save final buffers to .npz")
    parser.add_argument(
        "--log-level", type=str.upper, default="WARNING", choices=LEVEL_NAMES,
        help="Log level (default: WARNING)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging (same as --log-level debug)")
    parser.add_argument("--log-file", type=str, default=None, help="Also write logs to this file")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else args.log_level, args.log_file)

    if args.particles < 0 or args.frames < 0 or args.fps <= 0:
        print("Error: --particles and --frames must be >= 0, --fps > 0", file=sys.stderr)
        return 1

    custom = None
    molecule_id = args.molecule
    if args.custom_json is not None:
        try:
            custom = validate_molecule(json.loads(args.custom_json.read_text(encoding="utf-8")))
        except (OSError, ValueError) as exc:
            # MoleculeValidationError and JSONDecodeError are both ValueErrors
            kind = "Invalid molecule" if isinstance(exc, MoleculeValidationError) else "Cannot read"
            print(f"Error: {kind} {args.custom_json}: {exc}", file=sys.stderr)
            return 1
        molecule_id = "custom"

    spectrum_source = None
    if args.audio is not None:
        if not args.audio.exists():
            print(f"Error: Audio file not found: {args.audio}", file=sys.stderr)
            return 1
        print(f"Analyzing audio: {args.audio}")
        t0 = time.time()
        spectrum_source = FileSpectrumSource(args.audio, fps=args.fps)
        print(f"  Frames: {len(spectrum_source)}")
        print(f"  Analysis took {time.time() - t0:.1f}s")

    config = ParticleConfig(num_particles=args.particles, seed=args.seed)
    selection = Selection.create(
        mode=args.mode,
        shape=args.shape,
        molecule_id=molecule_id,
        custom_molecule=custom,
        control_scheme=ControlScheme.ORBIT,
        elapsed_time=args.time,
    )

    t1 = time.time()
    session = ParticleSession(config, selection, spectrum_source=spectrum_source)
    build_time = time.time() - t1
    print(f"\nTarget: {selection.mode.value}/{selection.shape} "
          f"({session.target.filled}/{args.particles} points, {build_time * 1000:.1f} ms)")

    dt = 1.0 / args.fps
    switch_at = args.frames // 2 if args.switch_to else None

    print(f"Simulating {args.frames} frames @ {args.fps}fps")
    t2 = time.time()
    for frame in range(args.frames):
        if frame == switch_at:
            session.update(mode=args.switch_to)
        session.tick(dt)
        session.animator.mark_rendered()
        _progress_bar(frame + 1, args.frames)
    elapsed = time.time() - t2

    print(f"\nDone! {session.rebuild_count} target build(s)")
    print(f"  Simulation took {elapsed:.2f}s ({args.frames / max(elapsed, 1e-6):.1f} fps)")
    if session.selection.mode is Mode.AUDIO:
        feats = session.animator.last_features
        print(f"  Last audio frame: volume {feats.volume:.2f}, pitch {feats.pitch:.2f}")
    else:
        print(f"  Mean distance to target: {session.convergence_error():.4f}")

    if args.output is not None:
        np.savez(
            args.output,
            positions=session.animator.positions,
            colors=session.animator.colors,
            target_positions=session.target.positions,
            target_colors=session.target.colors,
        )
        print(f"  Output: {args.output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
