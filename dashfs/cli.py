"""
dashfs CLI — Storage bootstrap and tree inspection commands.

Commands:
- dashfs init         — Create all tables
- dashfs home <root>  — Provision the Home/Trash folders of a user or namespace root
- dashfs tree <path>  — Print the subtree at a canonical or display path
- dashfs check        — Verify the addressing of every node
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from dashfs.engine.config import load_config
from dashfs.engine.errors import DashFSError
from dashfs.engine.runtime import DashboardRuntime
from dashfs.fs.service import FolderService
from dashfs.fs.views import FolderView

logger = logging.getLogger("dashfs.cli")


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="dashfs",
        description="dashfs — dashboard folder tree and content store",
    )
    parser.add_argument(
        "--config", default=None, help="Path to dashfs.yaml (default: search upwards from CWD)"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # dashfs init
    subparsers.add_parser("init", help="Create database tables")

    # dashfs home
    home_parser = subparsers.add_parser("home", help="Provision a Home folder")
    home_parser.add_argument("root", help="Root path (e.g., /namespace/ops or /user/alice)")
    home_parser.add_argument("--principal", default="system", help="Recorded as creator (default: system)")

    # dashfs tree
    tree_parser = subparsers.add_parser("tree", help="Print a subtree")
    tree_parser.add_argument("path", help="Canonical (/user/alice/reports) or display (/42/reports) path")

    # dashfs check
    subparsers.add_parser("check", help="Verify path hashes and parent links")

    args = parser.parse_args(argv)

    if args.command == "init":
        return cmd_init(args)
    elif args.command == "home":
        return cmd_home(args)
    elif args.command == "tree":
        return cmd_tree(args)
    elif args.command == "check":
        return cmd_check(args)
    else:
        parser.print_help()
        return 0


def _runtime(args: argparse.Namespace) -> DashboardRuntime:
    config = load_config(args.config)
    return DashboardRuntime(config)


def cmd_init(args: argparse.Namespace) -> int:
    """Create every table on the configured database."""
    try:
        with _runtime(args) as runtime:
            runtime.database.create_all()
            print(f"[OK] Tables created on {runtime.database.url}")
    except Exception as e:
        print(f"[ERROR] Failed to create tables: {e}")
        return 1
    return 0


def cmd_home(args: argparse.Namespace) -> int:
    try:
        with _runtime(args) as runtime:
            home = runtime.folders.create_home_folder(args.root, args.principal)
            print(f"[OK] Home ready: {home.full_path} (id {home.id})")
    except DashFSError as e:
        print(f"[ERROR] {e.message}")
        return 1
    return 0


def cmd_tree(args: argparse.Namespace) -> int:
    """Print the subtree at a path, folders first, two-space indent per level."""
    try:
        with _runtime(args) as runtime:
            folders = runtime.folders
            top = folders.get_by_path(args.path)
            for line in render_tree(folders, top):
                print(line)
    except DashFSError as e:
        print(f"[ERROR] {e.message}")
        return 1
    return 0


def render_tree(folders: FolderService, top: FolderView) -> list:
    lines = []
    stack = [(top, 0)]
    while stack:
        view, depth = stack.pop()
        marker = "/" if view.kind.value == "FOLDER" else ""
        lines.append(f"{'  ' * depth}{view.name}{marker}  [{view.id}] {view.full_path}")
        if view.kind.value != "FOLDER":
            continue
        if view.subfolders is None:
            view = folders.get_folder_by_id(view.id)
        children = list(view.subfolders or []) + list(view.files or [])
        for child in reversed(children):
            stack.append((child, depth + 1))
    return lines


def cmd_check(args: argparse.Namespace) -> int:
    """Verify that every node's path_hash and parent link are consistent."""
    try:
        with _runtime(args) as runtime:
            problems = runtime.folders.verify_tree()
    except DashFSError as e:
        print(f"[ERROR] {e.message}")
        return 1

    for problem in problems:
        print(f"  [ERROR] {problem}")
    if problems:
        print(f"\n{len(problems)} problem(s) found")
        return 1
    print("[OK] Tree is consistent")
    return 0


if __name__ == "__main__":
    sys.exit(main())
