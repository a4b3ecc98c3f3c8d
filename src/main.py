import logging
import sys
from typing import Dict, List, Optional, TextIO

from engine import PaymentsEngine
from errors import LedgerError
from models import AccountSnapshot, ClientId

HEADER = "client,available,held,total,locked"


def format_row(account: AccountSnapshot) -> str:
    return (
        f"{account.client_id},"
        f"{account.available},"
        f"{account.held},"
        f"{account.total},"
        f"{str(account.locked).lower()}"
    )


def write_snapshot(accounts: Dict[ClientId, AccountSnapshot], out: TextIO) -> None:
    """Write one row per client, ordered by client id."""
    lines = [HEADER]
    for client_id in sorted(accounts.keys()):
        lines.append(format_row(accounts[client_id]))
    out.write("\n".join(lines) + "\n")


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(args[0])
    except (LedgerError, OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    write_snapshot(accounts, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
