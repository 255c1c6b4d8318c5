import argparse
import logging
import sys
from pathlib import Path

from .constants import ARCHIVE_EXTENSION, DEFAULT_IGNORE_FILE
from .errors import PackagingError
from .file_utils import build_tree
from .models import EntryOutcome, PackagingOptions
from .packager import ArchivePackager
from .version import __version__


log = logging.getLogger(__name__)

KNOWN_COMMANDS = {"bundle", "list", "help"}


def _build_common_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "folder",
        nargs="?",
        default=".",
        help="Folder to bundle (default: .) / 要打包的目录（默认当前目录）",
    )
    common.add_argument(
        "-i",
        "--ignore",
        default=None,
        metavar="FILE",
        help=(
            f"Ignore file, relative paths are looked up inside FOLDER "
            f"(default: {DEFAULT_IGNORE_FILE}) / 忽略规则文件"
        ),
    )
    common.add_argument(
        "--log-level",
        default="INFO",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Logging level (default: INFO) / 日志级别",
    )
    return common


def build_parser() -> tuple[argparse.ArgumentParser, dict[str, argparse.ArgumentParser]]:
    parser = argparse.ArgumentParser(
        prog="zipbundle",
        description=(
            "Bundle a project folder into a single zip archive, skipping paths "
            f"listed in {DEFAULT_IGNORE_FILE} / 将项目目录打包为单个 zip 归档"
        ),
        formatter_class=argparse.RawTextHelpFormatter,
        epilog=f"""
Examples:
  zipbundle .                               # same as: zipbundle bundle .
  zipbundle bundle ./plugin -n my-plugin -o ./dist
  zipbundle bundle ./plugin -i deploy.ignore --report ./dist/bundle.pdf
  zipbundle list ./plugin --show-ignored
  zipbundle help bundle

{DEFAULT_IGNORE_FILE} format: one literal path prefix per line, '#' starts a comment.
        """,
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"zipbundle {__version__}"
    )

    common = _build_common_parser()
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    bundle_parser = subparsers.add_parser(
        "bundle",
        parents=[common],
        help=f"Write FOLDER into <name>.{ARCHIVE_EXTENSION} / 生成 zip 归档",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    bundle_parser.add_argument(
        "-n", "--name", default=None,
        help="Archive base name (default: folder name) / 归档文件名（不含扩展名）",
    )
    bundle_parser.add_argument(
        "-o", "--output-dir", default=None,
        help="Directory for the archive (default: FOLDER) / 输出目录",
    )
    bundle_parser.add_argument(
        "--report", default=None, metavar="PDF",
        help="Also write a PDF report of the run / 额外生成 PDF 报告",
    )

    list_parser = subparsers.add_parser(
        "list",
        parents=[common],
        help="Show what would be bundled, write nothing / 预览将被打包的文件",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    list_parser.add_argument(
        "--show-ignored",
        action="store_true",
        help=(
            "Show ignored paths in the tree, folding fully ignored directories "
            "/ 在目录树中标出被忽略的路径"
        ),
    )

    help_parser = subparsers.add_parser(
        "help",
        help="Show help for commands / 查看命令帮助",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    help_parser.add_argument(
        "topic",
        nargs="?",
        choices=["bundle", "list"],
        help="Command name / 命令名",
    )

    commands = {
        "bundle": bundle_parser,
        "list": list_parser,
        "help": help_parser,
    }
    return parser, commands


def _normalize_legacy_args(argv: list[str]) -> list[str]:
    if not argv:
        return ["bundle"]
    first = argv[0]
    if first in KNOWN_COMMANDS or first in {"-h", "--help", "-V", "--version"}:
        return argv
    return ["bundle", *argv]


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        stream=sys.stdout,
    )
    # Keep reportlab quiet unless explicitly debugging.
    logging.getLogger("reportlab").setLevel(logging.WARNING)


def _run_bundle(args: argparse.Namespace) -> int:
    packager = ArchivePackager()
    result = packager.run(PackagingOptions(
        source_folder=args.folder,
        ignore_file=args.ignore,
        output_name=args.name,
        output_dir=args.output_dir,
    ))

    if args.report and result.decisions:
        from .report import write_bundle_report

        write_bundle_report(result, args.report, source_name=Path(args.folder).resolve().name)

    if not result.ok:
        log.error("Bundle failed: %s", result.message)
        return 1
    log.info("Archive: %s", result.archive_path)
    return 0


def _run_list(args: argparse.Namespace) -> int:
    folder = Path(args.folder).resolve()
    try:
        decisions = ArchivePackager().plan(PackagingOptions(
            source_folder=args.folder,
            ignore_file=args.ignore,
        ))
    except PackagingError as exc:
        log.error("Error: %s", exc)
        return 1

    entries = [
        (d.relative_path, "" if d.included else EntryOutcome.IGNORED.value)
        for d in decisions
        if d.included or args.show_ignored
    ]
    ignored = sum(1 for d in decisions if not d.included)

    log.info("")
    log.info("%s", build_tree(entries, folder.name, style="unicode"))
    log.info("")
    log.info("%d file(s) to bundle, %d ignored", len(decisions) - ignored, ignored)
    return 0


def _run_help(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
    commands: dict[str, argparse.ArgumentParser],
) -> int:
    if args.topic:
        commands[args.topic].print_help()
    else:
        parser.print_help()
    return 0


def main(argv: list[str] | None = None) -> int:
    raw_args = sys.argv[1:] if argv is None else argv
    parser, commands = build_parser()

    if raw_args:
        first = raw_args[0]
        if first not in KNOWN_COMMANDS and not first.startswith("-") and not Path(first).exists():
            sys.stderr.write(f"Error: unknown command or path '{first}'.\n\n")
            parser.print_help()
            return 2

    args = parser.parse_args(_normalize_legacy_args(raw_args))
    _configure_logging(getattr(args, "log_level", "INFO"))

    if args.command == "list":
        return _run_list(args)
    if args.command == "help":
        return _run_help(args, parser, commands)
    return _run_bundle(args)


if __name__ == "__main__":
    sys.exit(main())
