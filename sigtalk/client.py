"""Send a message to a server process as a stream of signals."""

from __future__ import annotations

import signal
import sys
from typing import Sequence

from .protocol import SigtalkError, send_message


class _Acknowledged(Exception):
    pass


class _Rejected(Exception):
    pass


def is_only_number(param: str) -> bool:
    """Return True if ``param`` holds only the digits 0-9."""
    return all(ch in "0123456789" for ch in param)


def parse_args(argv: Sequence[str]) -> tuple[int, str]:
    """Return the target process id and the message from two arguments."""
    if len(argv) != 2:
        raise SigtalkError("The parameter must be two")
    pid_text, message = argv
    if not pid_text or not is_only_number(pid_text):
        raise SigtalkError("PID must be number")
    return int(pid_text), message


def _report(mark: str) -> None:
    sys.stdout.write(mark)
    sys.stdout.flush()


def _on_ack(sig, frame):
    """Report the server's acknowledgement and stop sending."""
    _report("1")
    raise _Acknowledged(sig)


def _on_reject(sig, frame):
    """Report the server's refusal and stop sending."""
    _report("0")
    raise _Rejected(sig)


def _send_acknowledged(pid: int, message: str) -> int:
    handlers = {
        signal.SIGUSR1: _on_ack,
        signal.SIGUSR2: _on_reject,
        signal.SIGINT: signal.SIG_IGN,
    }
    previous = {sig: signal.signal(sig, handler) for sig, handler in handlers.items()}
    try:
        send_message(pid, message)
    except _Acknowledged:
        pass
    except _Rejected:
        raise SigtalkError("Failed to send") from None
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Send ``<pid> <message>``; a leading ``--bonus`` waits for the server's answer."""
    args = list(sys.argv[1:] if argv is None else argv)
    bonus = bool(args) and args[0] in ("-b", "--bonus")
    if bonus:
        args = args[1:]
    try:
        pid, message = parse_args(args)
        if bonus:
            return _send_acknowledged(pid, message)
        send_message(pid, message)
    except SigtalkError as exc:
        sys.stderr.write(f"Error\n{exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())