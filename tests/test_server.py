import io
import os
import signal

import pytest

from sigtalk.protocol import EOT, to_binary
from sigtalk.server import BonusServer, Server, serve


def _signals(text):
    sigs = []
    for byte in list(text.encode("utf-8")) + [EOT]:
        sigs.extend(signal.SIGUSR1 if bit else signal.SIGUSR2 for bit in to_binary(byte))
    return sigs


def _feed(server, pid, text):
    results = [server.handle(sig, pid) for sig in _signals(text)]
    return results


def test_server_delivers_message_on_eot():
    out = io.StringIO()
    server = Server(out)
    results = _feed(server, 100, "hi")
    assert results[-1] == "hi"
    assert all(r is None for r in results[:-1])
    assert out.getvalue() == "hi\n"


def test_server_forgets_session_after_message():
    server = Server(io.StringIO())
    _feed(server, 7, "abc")
    assert server.sessions == {}


def test_server_consecutive_messages_are_separate():
    out = io.StringIO()
    server = Server(out)
    _feed(server, 5, "one")
    results = _feed(server, 5, "two")
    assert results[-1] == "two"
    assert out.getvalue() == "one\ntwo\n"


def test_server_interleaved_senders():
    out = io.StringIO()
    server = Server(out)
    first = _signals("ab")
    second = _signals("xy")
    results = []
    for sig_a, sig_b in zip(first, second):
        for pid, sig in ((1, sig_a), (2, sig_b)):
            results.append((pid, server.handle(sig, pid)))
    delivered = [(pid, message) for pid, message in results if message is not None]
    assert delivered == [(1, "ab"), (2, "xy")]
    assert len(results) == 2 * len(first)
    assert out.getvalue() == "ab\nxy\n"


def test_server_sigint_drops_partial_data():
    out = io.StringIO()
    server = Server(out)
    partial = _signals("q")[:5]
    for sig in partial:
        server.handle(sig, 3)
    assert 3 in server.sessions
    assert server.handle(signal.SIGINT, 3) is None
    assert server.sessions == {}
    results = _feed(server, 3, "ok")
    assert results[-1] == "ok"


def test_server_unicode_round_trip():
    server = Server(io.StringIO())
    results = _feed(server, 9, "héllo")
    assert results[-1] == "héllo"


def test_bonus_acknowledges_sender():
    calls = []
    out = io.StringIO()
    server = BonusServer(out, notify=lambda pid, sig: calls.append((pid, sig)))
    results = _feed(server, 42, "yo")
    assert results[-1] == "yo"
    assert calls == [(42, signal.SIGUSR1)]
    assert out.getvalue() == "yo\n"
    assert server.session is None


def test_bonus_refuses_second_sender():
    calls = []
    server = BonusServer(io.StringIO(), notify=lambda pid, sig: calls.append((pid, sig)))
    server.handle(signal.SIGUSR2, 10)
    assert server.handle(signal.SIGUSR1, 11) is None
    assert calls == [(11, signal.SIGUSR2)]
    assert server.session.pid == 10
    assert server.session.bits == [0]


def test_bonus_ignores_notify_failure():
    def failing(pid, sig):
        raise ProcessLookupError("gone")

    server = BonusServer(io.StringIO(), notify=failing)
    results = _feed(server, 8, "z")
    assert results[-1] == "z"


def test_bonus_sigint_exits():
    server = BonusServer(io.StringIO(), notify=lambda pid, sig: None)
    server.handle(signal.SIGUSR1, 4)
    with pytest.raises(SystemExit) as info:
        server.handle(signal.SIGINT, 4)
    assert info.value.code == 0
    assert server.session is None


def test_serve_prints_pid_and_stops_on_sigint():
    out = io.StringIO()
    server = BonusServer(out, notify=lambda pid, sig: None)
    previous = signal.pthread_sigmask(signal.SIG_BLOCK, {signal.SIGINT})
    try:
        os.kill(os.getpid(), signal.SIGINT)
        with pytest.raises(SystemExit):
            serve(server)
    finally:
        signal.pthread_sigmask(signal.SIG_SETMASK, previous)
    assert out.getvalue() == f"pid:{os.getpid()}\n"