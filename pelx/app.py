import argparse
import logging
from pathlib import Path
from typing import List, Optional

from pelx.config import CodecConfig
from pelx.controllers.app_controller import AppController


class PelxApp:
    def __init__(self) -> None:
        self.parser = argparse.ArgumentParser(prog="pelx", description="Palette-aware PELX image tool")
        self.parser.add_argument("-v", "--verbose", action="store_true", help="log progress at INFO level")
        commands = self.parser.add_subparsers(dest="command", required=True)

        info = commands.add_parser("info", help="print header fields")
        info.add_argument("file", type=Path)

        validate = commands.add_parser("validate", help="check header invariants")
        validate.add_argument("file", type=Path)

        render = commands.add_parser("render", help="expand to PNG, one file per palette")
        render.add_argument("file", type=Path)
        render.add_argument("--palettes", type=Path, required=True, help="JSON file of named palettes")
        render.add_argument("--name", action="append", dest="names", help="palette to render (repeatable)")
        render.add_argument("--channels", type=int, choices=(3, 4))
        render.add_argument("--out", type=Path, help="output directory (default: next to FILE)")
        render.add_argument("--strict-palette-count", action="store_true")
        render.add_argument("--legacy-body-size", action="store_true")

    def run(self, argv: Optional[List[str]] = None) -> int:
        args = self.parser.parse_args(argv)
        logging.basicConfig(
            level=logging.INFO if args.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )

        config = CodecConfig(
            strict_palette_count=getattr(args, "strict_palette_count", False),
            legacy_body_size=getattr(args, "legacy_body_size", False),
        )
        controller = AppController(config=config)

        if args.command == "info":
            return controller.handle_info(args.file)
        if args.command == "validate":
            return controller.handle_validate(args.file)
        return controller.handle_render(
            args.file,
            args.palettes,
            names=args.names,
            channels=args.channels,
            out_dir=args.out,
        )
