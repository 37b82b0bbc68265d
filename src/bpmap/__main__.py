import argparse
import logging
import random
import sys

from .tree import BpTreeMap

logger = logging.getLogger("bpmap.demo")


def banner(title: str, out):
    print(f"\n{'=' * 20} {title} {'=' * 20}", file=out)


def setup_logging(verbose: bool):
    root = logging.getLogger()
    root.setLevel(logging.INFO)

    logging.getLogger("bpmap").setLevel(logging.DEBUG if verbose else logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    handler.setFormatter(formatter)
    root.addHandler(handler)


def parse_keys(value: str):
    if not value:
        return []
    return [int(k) for k in value.split(",")]


def run(args, out=sys.stdout) -> BpTreeMap:
    tree = BpTreeMap(args.order, check_invariants=args.check)

    if args.random:
        rng = random.Random(args.seed)
        keys = [rng.randrange(10 * args.random) for _ in range(args.random)]
        banner("Insert Random Integer Keys", out)
    else:
        keys = list(range(1, args.keys, 2))
        banner("Insert Increasing Integer Keys", out)

    for key in keys:
        tree.put(key, key * key)
        if args.verbose:
            logger.info("put (%d, %d)", key, key * key)
            tree.dump(out)

    tree.reset_stats()
    lookups = range(max(keys, default=0) + 1)
    banner("Find Keys", out)
    for key in lookups:
        value, found = tree.get(key)
        print(f"key = {key}, value = {value if found else None}", file=out)
    accessed = tree.accessed

    banner("Iterate Through the B+Tree", out)
    for entry in tree.iterate():
        print(entry, file=out)

    banner("Print Statistics", out)
    print(f"size = {tree.size()}", file=out)
    print(f"height = {tree.height()}", file=out)
    if lookups:
        print(
            f"Average number of nodes accessed = {accessed / len(lookups):.2f}",
            file=out,
        )

    if args.remove:
        banner("Delete Keys", out)
        tree.dump(out)
        for key in args.remove:
            _, found = tree.remove(key)
            logger.info("remove (%d): %s", key, "removed" if found else "absent")
            tree.dump(out)
        print(f"size = {tree.size()}", file=out)

    return tree


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser("bpmap", description="B+Tree map demo")
    parser.add_argument("--order", type=int, default=5)
    parser.add_argument(
        "--keys", type=int, default=36, help="insert the odd keys below this bound"
    )
    parser.add_argument(
        "--random", type=int, default=0, help="insert this many random keys instead"
    )
    parser.add_argument("--seed", type=int, default=1)
    parser.add_argument(
        "--remove",
        type=parse_keys,
        default=[29, 31, 33, 35, 27, 25],
        help="comma separated keys to remove afterwards",
    )
    parser.add_argument(
        "--check", action="store_true", help="verify invariants after every change"
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    run(args)


if __name__ == "__main__":
    main()
