"""
Creator Canvas - Command-line entry point.

Inspects and edits the persisted canvas state (boards, assets, active
category) without starting an editor.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from creator_canvas.config import load_config
from creator_canvas.core.models import BoardCategory
from creator_canvas.core.persistence import PersistenceGateway
from creator_canvas.core.store import CanvasStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="creator-canvas",
        description="Inspect and edit persisted canvas boards and assets",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to config.json")
    parser.add_argument("--storage-dir", type=Path, default=None, help="Override storage directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("boards", help="List boards")

    create = sub.add_parser("create-board", help="Create an empty board")
    create.add_argument("name")
    create.add_argument(
        "--category",
        choices=[c.value for c in BoardCategory],
        default=BoardCategory.FASHION.value,
    )

    delete = sub.add_parser("delete-board", help="Delete a board by id")
    delete.add_argument("board_id")

    sub.add_parser("assets", help="List assets")
    sub.add_parser("show-config", help="Print the effective configuration")
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.storage_dir:
        config.storage_dir = args.storage_dir

    if args.command == "show-config":
        print(json.dumps(config.to_dict(), indent=2))
        return 0

    store = CanvasStore(PersistenceGateway(config.storage_dir))

    if args.command == "boards":
        for board in store.boards:
            print(
                f"{board.id}  {board.category.value:<8}  {board.name}  "
                f"({len(board.nodes)} nodes, {len(board.edges)} edges)"
            )
        return 0

    if args.command == "create-board":
        board = store.create_board(args.name, args.category)
        print(board.id)
        return 0

    if args.command == "delete-board":
        if store.delete_board(args.board_id) is None:
            print(f"Error: no board with id {args.board_id}", file=sys.stderr)
            return 1
        return 0

    if args.command == "assets":
        for asset in store.assets:
            tags = ", ".join(asset.tags)
            print(f"{asset.id}  {asset.type.value:<9}  {asset.name}  [{tags}]")
        return 0

    return 1


if __name__ == "__main__":
    sys.exit(main())
