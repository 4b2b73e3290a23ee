# xyutools

Small building blocks for services that run in the field and report to a
monitoring platform:

- `xyutools.errorlog` – levelled log files grouped per day and per mode,
  with removal of expired day folders.
- `xyutools.filebase` – file helpers: read, write, append, chunked reads,
  listings, copies.
- `xyutools.modbus` – Modbus CRC16 and byte/number conversions.
- `xyutools.randdata` – a bounded random integer.
- `xyutools.mbserver` – a Modbus slave: TCP and RTU frames, the standard
  read/write functions, and a `Server` that listens on TCP or a serial port.
- `xyutools.amf` – an AMF3 `Encoder` and `Decoder`.
- `xyutools.hikbase` – snapshot capture from network cameras using HTTP
  digest authentication.
- `xyutools.p2p` – the JSON messages of the platform agent protocol
  (`protocol`), a TCP `Client` (`client`) and text/path helpers
  (`transform`).
- `xyutools.sysprocess` – starting, stopping and restarting system services,
  and listing processes by name.
- `xyutools.compress` – zip, tar.gz and tar.bz2 handling through the
  system's archive tools.

Requires Python 3.10 or later. Install the test tools with the `test` extra.

## Modbus CRC

```python
from xyutools.modbus import check_sum, check_crc

frame = bytes([0x01, 0x06, 0x00, 0x0A, 0x01, 0x10, 0xA9, 0x94])
crc = check_sum(frame[:6])       # two CRC bytes, low byte first
ok = check_crc(frame, 6)         # True when the two bytes after frame[:6] hold its CRC
```

## A Modbus slave

```python
from xyutools.mbserver.server import Server
from xyutools.mbserver.frametcp import parse_tcp_frame

server = Server()
server.holding_registers[100] = 1

# Read three holding registers starting at 100.
request = parse_tcp_frame(bytes.fromhex("000100000006ff0300640003"))
response = server.handle(request)
print(response.to_bytes().hex())

host, port = server.listen_tcp("127.0.0.1:1502")
# ... serve clients ...
server.close()
```

`Server` is also a context manager. `listen_rtu(port_name, baudrate)` serves
RTU frames on a serial device or any URL pyserial accepts. A handler for a
function code is replaced with `server.register_function_handler(code,
handler)`; the handler takes the server and the request frame and returns
`(data, ExceptionCode)`.

## Logging

```python
from xyutools.errorlog import init_errorlog, error_log_info, error_log_error

init_errorlog("INFO", 3, "/var/lib/myservice")
error_log_info("collector", "startup", "service started")
error_log_error("collector", "db", "connection refused")
```

Records go to `Log/<YYYYMMDD>/<mode>.log` under the configured root (beside
the running program when no root is given) and are echoed to standard
output. `remove_expired_logs` deletes the day folder that is exactly the
keep period old; `run_log_cleanup(interval, stop_event)` does so
repeatedly until the event is set.

## AMF3

```python
import io
from xyutools.amf.encoder import Encoder
from xyutools.amf.decoder import Decoder

buffer = io.BytesIO()
Encoder(buffer, False).encode({"name": "pump", "speed": 1200})
buffer.seek(0)
value = Decoder(buffer).decode(dict)
```

The encoder takes `None`, `bool`, `int`, `float`, `str`, mappings with
string keys, sequences and dataclass instances. The decoder can shape its
result by a target type: `bool`, `int`, `float`, `str`, `list[...]`,
`dict[str, ...]`, a dataclass, or any of these made optional.

## Platform agent messages

```python
from xyutools.p2p.protocol import ReplyInfo, ServiceInfo

print(ReplyInfo(type="heartbeat", message="receive").to_json())
print(ServiceInfo(type="heartbeat", service_code="S01").to_json())
```

`xyutools.p2p.client.Client(address, user_id, sec_key)` connects with
`handshake()`, sends with `send_message(text)`, reads with `read_packet()`
and disconnects with `logout()`.

## Service control and archives

```python
from xyutools.sysprocess import LinuxServiceControl, get_process_info
from xyutools.compress import compressor_for_platform

LinuxServiceControl().restart("myservice")
print(get_process_info("myservice"))

compressor = compressor_for_platform()      # "linux" or "windows"
compressor.compress_zip("/tmp/out.zip", "/tmp/data.txt")
```

Failing tools raise `subprocess.CalledProcessError`; missing tools raise
`FileNotFoundError`.

## What is not included

- No INI settings file handling: the package does not read or write the
  agent's settings file, and has no agent start-up routine.
- No running agent: `xyutools.p2p` provides the messages and the TCP client,
  but no loop that reconnects, registers, sends heartbeats or carries out
  commands from the platform.
- No command-line program; everything is used as a library.