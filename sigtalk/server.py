"""Receive messages sent bit by bit as SIGUSR1/SIGUSR2 signals."""

from __future__ import annotations

import argparse
import logging
import os
import signal
import sys
from typing import Callable, TextIO

from .fmt import format_string
from .protocol import SigtalkError, Session

log = logging.getLogger(__name__)

_SIGNALS = frozenset({signal.SIGUSR1, signal.SIGUSR2, signal.SIGINT})


class Server:
    """Collects bits from any number of senders, one session per process id."""

    def __init__(self, out: TextIO | None = None) -> None:
        self.out = out if out is not None else sys.stdout
        self.sessions: dict[int, Session] = {}

    def _emit(self, message: str) -> None:
        self.out.write(format_string("%s\n", message))
        self.out.flush()

    def handle(self, sig: int, pid: int) -> str | None:
        """Process one signal from ``pid``; return a message once it is complete."""
        if sig == signal.SIGINT:
            self.reset()
            return None
        if sig not in (signal.SIGUSR1, signal.SIGUSR2):
            return None
        session = self.sessions.get(pid)
        if session is None:
            session = self.sessions[pid] = Session(pid)
        message = session.push_bit(1 if sig == signal.SIGUSR1 else 0)
        if message is None:
            return None
        del self.sessions[pid]
        self._emit(message)
        return message

    def reset(self) -> None:
        """Drop every partly received message."""
        self.sessions.clear()


class BonusServer(Server):
    """Serves one sender at a time and acknowledges each complete message.

    A sender that arrives while another is being served is refused with
    SIGUSR2; the served sender gets SIGUSR1 once its message is complete.
    SIGINT stops the server.
    """

    def __init__(
        self,
        out: TextIO | None = None,
        notify: Callable[[int, int], None] = os.kill,
    ) -> None:
        super().__init__(out)
        self.notify = notify
        self.session: Session | None = None

    def _send(self, pid: int, sig: int) -> None:
        try:
            self.notify(pid, sig)
        except OSError as exc:
            log.warning("cannot signal process %d: %s", pid, exc)

    def handle(self, sig: int, pid: int) -> str | None:
        """Process one signal from ``pid``; return a message once it is complete."""
        if sig == signal.SIGINT:
            self.reset()
            raise SystemExit(0)
        if sig not in (signal.SIGUSR1, signal.SIGUSR2):
            return None
        if self.session is None:
            self.session = Session(pid)
        elif self.session.pid != pid:
            self._send(pid, signal.SIGUSR2)
            return None
        bit = 1 if sig == signal.SIGUSR1 else 0
        log.debug("bit %d from pid %d", bit, pid)
        message = self.session.push_bit(bit)
        if message is None:
            return None
        self.session = None
        self._emit(message)
        self._send(pid, signal.SIGUSR1)
        return message

    def reset(self) -> None:
        """Drop the message being received."""
        super().reset()
        self.session = None


def serve(server: Server) -> None:
    """Print this process id, then feed incoming signals to ``server`` forever."""
    server.out.write(format_string("pid:%d\n", os.getpid()))
    server.out.flush()
    try:
        previous = signal.pthread_sigmask(signal.SIG_BLOCK, _SIGNALS)
    except (OSError, ValueError) as exc:
        raise SigtalkError(f"Failed in sigaction: {exc}") from exc
    try:
        while True:
            info = signal.sigwaitinfo(_SIGNALS)
            server.handle(info.si_signo, info.si_pid)
    finally:
        signal.pthread_sigmask(signal.SIG_SETMASK, previous)


def main(argv: list[str] | None = None) -> int:
    """Run the server until it is stopped."""
    parser = argparse.ArgumentParser(description="Receive messages sent as signals.")
    parser.add_argument(
        "-b",
        "--bonus",
        action="store_true",
        help="serve one sender at a time and acknowledge each message",
    )
    args = parser.parse_args(argv)
    server = BonusServer() if args.bonus else Server()
    try:
        serve(server)
    except SigtalkError as exc:
        sys.stderr.write(f"Error\n{exc}\n")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())