#!/usr/bin/env python3
"""
Query TomTom traffic cameras inside a bounding box and print them closest-first.

Examples:
  # Downtown Seattle, 10 closest cameras
  python scripts/fetch_cameras.py --top 47.63 --bottom 47.58 --left -122.36 --right -122.30 --max 10

  # Same, and save the current snapshot of each camera
  python scripts/fetch_cameras.py --top 47.63 --bottom 47.58 --left -122.36 --right -122.30 \
      --max 10 --images-dir data/camera_images
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Optional

# Add the project root to the path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from common.logging_setup import setup_logging
from common.types import BoundingBox
from tomtom.client import TomTomApi
from tomtom.config import DEFAULT_CONFIG_PATH, load_config


async def run(api: TomTomApi, box: BoundingBox, max_results: int, images_dir: Optional[Path]) -> int:
    status = await api.get_cameras(box, max_results=max_results)
    if not status.is_success_status_code:
        print(f"  Query failed: {status.status_code} {status.message}")
        return 1

    center_lat, center_lon = box.center
    print(f"  {len(api.cameras)} cameras around ({center_lat:.5f}, {center_lon:.5f})")
    if api.camera_list_truncated:
        print(f"  (limited to the {max_results} closest; more cameras are in view)")

    for cam in api.cameras:
        print(
            f"  [{cam.label:>3}] {cam.camera_id:>7}  {cam.distance_from_center / 1000.0:7.2f} km  "
            f"{cam.name}  {cam.orientation}"
        )

    if images_dir is not None:
        images_dir.mkdir(parents=True, exist_ok=True)
        index = []
        for cam in api.cameras:
            await api.get_camera_image(cam)
            path = images_dir / f"camera_{cam.camera_id}.png"
            cam.image.convert("RGB").save(path, format="PNG")
            index.append({**cam.to_dict(), "path": str(path)})
        with open(images_dir / "index.jsonl", "w") as f:
            for entry in index:
                f.write(json.dumps(entry) + "\n")
        print(f"  Images saved to: {images_dir}")
    return 0


def main() -> None:
    ap = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    ap.add_argument("--top", type=float, required=True, help="Northern latitude (deg)")
    ap.add_argument("--bottom", type=float, required=True, help="Southern latitude (deg)")
    ap.add_argument("--left", type=float, required=True, help="Western longitude (deg)")
    ap.add_argument("--right", type=float, required=True, help="Eastern longitude (deg)")
    ap.add_argument("--max", type=int, default=0, help="Keep at most N closest cameras (0 = all)")
    ap.add_argument("--images-dir", default=None, help="Directory to write camera snapshots (PNG)")
    ap.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="YAML config file")
    ap.add_argument("--api-key", default=None, help="Overrides config/env TOMTOM_API_KEY")
    ap.add_argument("--log-level", default=None, help="DEBUG/INFO/WARNING/ERROR")
    args = ap.parse_args()

    setup_logging(args.log_level)

    try:
        api = TomTomApi(load_config(args.config, api_key=args.api_key))
    except ValueError as e:
        print(f"  Error: {e}")
        sys.exit(2)

    box = BoundingBox(top=args.top, bottom=args.bottom, left=args.left, right=args.right)
    images_dir = Path(args.images_dir) if args.images_dir else None
    sys.exit(asyncio.run(run(api, box, args.max, images_dir)))


if __name__ == "__main__":
    main()
