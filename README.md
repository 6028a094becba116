# sigtalk

sigtalk passes text from one process to another using nothing but POSIX
signals. Every byte is sent as eight signals, most significant bit first:
`SIGUSR1` carries a 1 and `SIGUSR2` carries a 0. A pause of 0.1 seconds
follows each bit, and the message ends with the EOT byte (`0x04`), at which
point the server prints what it has collected, followed by a newline.

Text is sent as UTF-8 and decoded as UTF-8 on arrival, with undecodable
bytes replaced.

The server waits for signals with `signal.sigwaitinfo`, which needs a POSIX
system that provides it, such as Linux.

## Installing

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## Running

Start the server in one terminal. It prints `pid:<number>` and then waits
for signals:

```
sigtalk-server
```

In another terminal, send it a message by giving that process id and the
text:

```
sigtalk-client 12345 "hello there"
```

The client takes exactly two arguments, and the process id must be a
non-empty run of digits; otherwise it writes `Error` and the reason to
standard error and exits with status 1.

### One sender at a time, with acknowledgement

```
sigtalk-server --bonus
sigtalk-client --bonus 12345 "hello there"
```

With `-b`/`--bonus` the server serves one sender at a time. A different
process that signals it while a message is in progress is answered with
`SIGUSR2`; once a message is complete the server prints it and answers the
sender with `SIGUSR1`. `SIGINT` stops this server.

With `-b`/`--bonus` as its first argument, the client listens for those
answers while it sends: on `SIGUSR1` it prints `1` and stops; on `SIGUSR2`
it prints `0`, reports `Failed to send` and exits with status 1. It ignores
`SIGINT` while sending.

Without `--bonus`, the server keeps a separate message for every sending
process, so several clients may send at once, and `SIGINT` discards every
partly received message without stopping the server.

## Using it as a library

### `sigtalk.protocol`

```python
from sigtalk.protocol import Session, to_binary, to_char

bits = to_binary("A")          # (0, 1, 0, 0, 0, 0, 0, 1)
assert to_char(bits) == ord("A")

session = Session(pid=4242)
for bit in bits:
    session.push_bit(bit)
for bit in to_binary(0x04):    # end of transmission
    result = session.push_bit(bit)
assert result == "A" and session.received
```

- `to_binary(c)` takes a one-byte character, a one-byte `bytes` value or an
  integer (masked to a byte) and returns eight bits. A string that is not a
  single character fitting in one byte raises `ValueError`.
- `to_char(bits)` turns exactly eight bits back into an integer; any other
  length raises `ValueError`.
- `Session(pid)` gathers bits from one sender. `push_bit(bit)` returns the
  collected text when the EOT byte arrives and `None` otherwise; `message`
  and `length` give the text and byte count so far; `reset()` forgets
  everything.
- `send_char(pid, c, delay=0.1)` signals one byte to a process;
  `send_message(pid, message, delay=0.1)` sends every byte of a string or
  bytes value and then EOT. A failed `os.kill` is raised as `SigtalkError`.

### `sigtalk.server`

- `Server(out=None)` keeps one session per process id.
  `handle(sig, pid)` feeds it one signal and returns the message when one is
  complete, after writing it to `out` (standard output by default).
  `reset()` drops all partial messages.
- `BonusServer(out=None, notify=os.kill)` serves one sender at a time as
  described above; `notify(pid, sig)` is used to answer senders, and its
  `handle` raises `SystemExit(0)` on `SIGINT`.
- `serve(server)` prints the process id, blocks `SIGUSR1`, `SIGUSR2` and
  `SIGINT`, and passes each one received to `server.handle` forever.
- `main(argv=None)` is the `sigtalk-server` command.

### `sigtalk.client`

- `is_only_number(param)` is true when the string holds only the digits
  0-9.
- `parse_args(argv)` returns `(pid, message)` from two arguments or raises
  `SigtalkError`.
- `main(argv=None)` is the `sigtalk-client` command.

### `sigtalk.fmt`

A small printf-style formatter supporting `%c`, `%s`, `%p`, `%d`, `%i`,
`%u`, `%x`, `%X` and `%%`; other conversions produce nothing. Integers are
treated as 32-bit, `%s` of `None` gives `(null)` and `%p` of a null value
gives `(nil)`. `format_string(fmt, *args)` returns the text and
`ft_printf(fmt, *args)` writes it to standard output and returns its length.
`format_int`, `format_unsigned`, `format_hex(value, upper=False)` and
`format_pointer` render single values.

## What it does not do

The protocol has no error detection and no retransmission: a lost or
reordered signal corrupts the rest of that message. The client does not
retry after the server refuses it, and nothing is stored; messages exist
only on the server's standard output.