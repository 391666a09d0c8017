"""Command line front end: generate a tessellation and write it as JSON."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import structlog
from pydantic import BaseModel, Field

from .config import settings
from .core import VoronoiCell, generate_voronoi_cells, layout_seed
from .logging_config import configure_logging

logger = structlog.get_logger()


# Response models
class PointModel(BaseModel):
    """A point in image coordinates."""

    x: float
    y: float


class CellModel(BaseModel):
    """One stained-glass cell."""

    id: int = Field(..., description="Site index, stable for a given seed")
    seed: PointModel
    vertices: List[PointModel]

    @classmethod
    def from_cell(cls, cell: VoronoiCell) -> "CellModel":
        return cls(
            id=cell.id,
            seed=PointModel(x=cell.seed.x, y=cell.seed.y),
            vertices=[PointModel(x=v.x, y=v.y) for v in cell.vertices],
        )


class TessellationModel(BaseModel):
    """A full tessellation plus the request that produced it."""

    width: float
    height: float
    cells_requested: int
    seed: Optional[str] = Field(None, description="Seed used, absent for random layouts")
    cells: List[CellModel]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stained-glass",
        description="Generate a Voronoi stained-glass tessellation as JSON",
    )
    parser.add_argument("--width", type=float, default=settings.default_width, help="Rectangle width")
    parser.add_argument("--height", type=float, default=settings.default_height, help="Rectangle height")
    parser.add_argument("--cells", type=int, default=settings.default_cell_count, help="Target cell count")
    parser.add_argument("--seed", help="Seed string (random layout if omitted)")
    parser.add_argument(
        "--shuffle-key", type=int, default=None,
        help="Derive the seed as '<seed>__<key>', as the viewer does when reshuffling",
    )
    parser.add_argument("--output", type=Path, help="Write JSON here instead of stdout")
    parser.add_argument("--indent", type=int, default=None, help="JSON indentation")
    parser.add_argument("--log-level", default=None, help="Override STAINED_GLASS_LOG_LEVEL")
    parser.add_argument("--log-format", choices=["json", "plain"], default=None,
                        help="Override STAINED_GLASS_LOG_FORMAT")
    return parser


def run(args: argparse.Namespace) -> TessellationModel:
    """Generate the tessellation described by parsed arguments."""
    seed = args.seed
    if args.shuffle_key is not None:
        if seed is None:
            raise ValueError("--shuffle-key needs --seed")
        seed = layout_seed(seed, args.shuffle_key)

    if args.cells > settings.max_cell_count:
        raise ValueError(f"--cells must be <= {settings.max_cell_count}, got {args.cells}")

    cells = generate_voronoi_cells(args.width, args.height, args.cells, seed=seed)
    return TessellationModel(
        width=args.width,
        height=args.height,
        cells_requested=args.cells,
        seed=seed,
        cells=[CellModel.from_cell(c) for c in cells],
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        configure_logging(args.log_level, args.log_format)
        result = run(args)
    except ValueError as e:
        parser.error(str(e))

    payload = result.model_dump_json(indent=args.indent)
    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(payload, encoding="utf-8")
        logger.info("Tessellation written", path=str(args.output), cells=len(result.cells))
    else:
        sys.stdout.write(payload + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
