"""wdrift.commands — sub-komendy CLI (każda: add_parser(subparsers) + run(args))."""
