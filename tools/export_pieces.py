"""
批量导出组合件：分页PDF或SVG归档，输出到目录。
"""

import argparse
import sys
from pathlib import Path


def _add_repo_to_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


def _print_progress(done, total, page, pages, doc, docs) -> None:
    pages_part = f" page {page}/{pages}" if page is not None else ""
    print(f"\r{done}/{total}{pages_part} file {doc}/{docs}", end="", flush=True)


def main() -> int:
    parser = argparse.ArgumentParser(description="Export shim pieces as PDF documents or SVG archives.")
    parser.add_argument("-x", type=int, required=True, help="每单元楔片数")
    parser.add_argument("-y", type=int, required=True, help="每件槽位数")
    parser.add_argument("--seed", type=int, default=None, help="种子（默认：随机）")
    parser.add_argument("--count", type=int, default=0, help="件数（默认：整个空间）")
    parser.add_argument("--format", choices=["pdf", "svg"], default="pdf", help="输出格式")
    parser.add_argument("--paper", default="a4", help="纸张（默认：a4）")
    parser.add_argument("--landscape", action="store_true", help="横向")
    parser.add_argument("--double-sided", action="store_true", help="双面打印（偶数页镜像边距）")
    parser.add_argument("--cols", type=int, default=1, help="每页最少列数")
    parser.add_argument("--rows", type=int, default=1, help="每页最少行数")
    parser.add_argument("--cropped", action="store_true", help="裁剪到内高")
    parser.add_argument("--trapezoidal", action="store_true", help="梯形楔片")
    parser.add_argument(
        "--labels",
        choices=["none", "top", "bottom"],
        default="bottom",
        help="序列号标签位置",
    )
    parser.add_argument("--out-dir", default="", help="输出目录（默认：配置 output_dir）")
    args = parser.parse_args()

    _add_repo_to_path()
    from shimgen import api
    from shimgen.config import configure_logging, get_config, load_print_spec
    from shimgen.core import random_seed
    from shimgen.interfaces import ShimGenError
    from shimgen.models import PieceOptions, PrintOptions
    from shimgen.pipeline import DirectoryOutputSink

    config = get_config()
    configure_logging(config)

    seed = args.seed if args.seed is not None else random_seed(config.generator.max_seed)
    out_dir = Path(args.out_dir) if args.out_dir else config.output_dir
    sink = DirectoryOutputSink(out_dir)

    try:
        session = api.create_session(
            args.x,
            args.y,
            seed,
            piece_count=args.count,
            piece_options=PieceOptions(cropped=args.cropped, trapezoidal=args.trapezoidal),
        )
        if args.format == "pdf":
            options = PrintOptions.from_spec(
                load_print_spec(config.print_spec_path),
                format=args.paper,
                orientation="landscape" if args.landscape else "portrait",
                sides="double" if args.double_sided else "single",
                cols=args.cols,
                rows=args.rows,
                seed_position="header",
                page_number_position="footer",
                label_position=args.labels,
            )
            result = api.export_documents(session, options, on_progress=_print_progress, sink=sink)
        else:
            result = api.export_archives(session, on_progress=_print_progress, sink=sink)
    except ShimGenError as exc:
        print(f"ERROR {exc}")
        return 1

    print()
    for path in result.outputs:
        print(path)
    for flag in result.flags:
        print(f"WARN {flag}")
    return 0 if result.status.value == "succeeded" else 1


if __name__ == "__main__":
    raise SystemExit(main())
