"""
排列唯一性检查：穷举 [0, 2·x^y) 验证序列号无重复（仅适用于小空间）。
"""

import argparse
import sys
from pathlib import Path


def _add_repo_to_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


def main() -> int:
    parser = argparse.ArgumentParser(description="Check LCG serial number unicity.")
    parser.add_argument("-x", type=int, required=True, help="每单元楔片数")
    parser.add_argument("-y", type=int, required=True, help="每件槽位数")
    parser.add_argument(
        "--seeds",
        default="0",
        help="逗号分隔的种子列表（默认：0）",
    )
    parser.add_argument(
        "--max-size",
        type=int,
        default=1_000_000,
        help="允许穷举的最大空间（默认：1000000）",
    )
    args = parser.parse_args()

    _add_repo_to_path()
    from shimgen.config import configure_logging
    from shimgen.core import check_unicity, validate_space

    configure_logging()

    failed = 0
    for seed in (int(s) for s in args.seeds.split(",") if s.strip()):
        space = validate_space(args.x, args.y, seed, max_size=args.max_size)
        report = check_unicity(space.x, space.y, space.seed)
        status = "OK" if report.ok else "DUPLICATES"
        print(f"{space.label}: c={space.increment} size={report.size} unique={report.total} {status}")
        if not report.ok:
            failed += 1
            for key, indices in list(report.duplicates.items())[:10]:
                print(f"  r={key} <- {indices}")

    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
