"""Entry point for `python -m dicevoice`."""

import sys


def _parse_cmd(text, players):
    """Resolve a single input and print the result in test_cases.txt format."""
    from dicevoice.commands import score

    p = score.parse(text, players)

    print(f"@players {' | '.join(players)}")
    print(f"> {text}")

    if p is None:
        print("result: none")
        return

    for key, val in p.args.items():
        print(f"{key}: {val}")


if __name__ == "__main__" or not sys.argv[0]:
    args = sys.argv[1:]
    if args and args[0] == "-parse":
        players = []
        args = args[1:]
        if len(args) >= 2 and args[0] == "-players":
            players = [n.strip() for n in args[1].split(",") if n.strip()]
            args = args[2:]
        _parse_cmd(" ".join(args), players)
    else:
        from dicevoice.main import main
        main(args)
