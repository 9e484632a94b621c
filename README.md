# gonggo

gonggo is the core of a request broker. Clients send JSON requests over a
websocket. A request either calls a built-in service or names a proxy
service. gonggo keeps track of a proxied request until it is answered, until
it times out or until the client goes away. Answers can be stored in a small
SQLite database, so a client can fetch them again later.

The package has no dependencies outside the standard library.

## Modules

- `gonggo.confvar` reads `key = value` configuration files. Text after `#`
  is ignored, and so are spaces and tabs. Lines with no `=` or with an empty
  value are skipped, and when a key appears more than once the first entry
  wins. `parse_config(lines)` and `load_config(path)` return a `Config`.
  `Config` has `value`, `long`, `float`, `uint` and `absent`.
  `validate_config(path)` also checks the required keys and the numeric
  settings, and raises `ConfigError` when something is wrong.
- `gonggo.log` provides `DailyLog(name, path, pid)`, which writes lines of the
  form `timestamp [pid] LEVEL: message` to `<path>/<name>-<Weekday>.log`. A
  file whose creation date is not today is truncated before it is written.
  `configure(name, path, pid)` sets up the log for the whole process,
  `log(level, message)` writes to it and `reset()` turns it off. While no log
  is configured, `log` does nothing.
- `gonggo.uuidgen` provides `generate_uuid()`, which returns a random
  lower-case UUID string.
- `gonggo.constants` holds the JSON keys and the status enums
  `ServiceStatus`, `TestStatus`, `ResponseDumpStatus`, `ProxyServiceStatus`
  and `ExitCode`.
- Thread-safe tables:
  - `gonggo.requesttable.ClientRequestTable` maps a request id to its
    connection, its timestamp and its timeout. `expired()` lists the ids
    whose timeout has passed. A timeout of 0 never expires.
  - `gonggo.connectiontable.ClientConnectionTable` maps a connection to its
    request ids.
  - `gonggo.servicetable.ClientServiceTable` maps a request id to the JSON
    text `{"service": ..., "payload": ...}`.
  - `gonggo.proxynametable.ClientProxynameTable` maps a proxy name to its
    request ids. Each id carries a sent flag, set by `mark_sent` and cleared
    by `mark_unsent`.
- `gonggo.db.ResponseStore(name, path)` keeps numbered responses for each
  request id in `<path>/<name>.db`. It has `ensure`, `insert`, `purge` and
  `query`, and `query` returns a `RespondQueryResult` with `responses`,
  `stop` and `more`.
- `gonggo.responddrain.RespondDrain` is a background thread that purges
  overdue responses every `period` seconds.
- `gonggo.clienttimeout.ClientTimeout` is a background thread. Every
  `period` seconds it sends an expired reply for each request that has timed
  out, then removes that request from every table. `sweep()` does one pass
  of this by itself.
- `gonggo.clientreply` builds the reply messages and sends them with
  `conn.send(text)`. Its functions are `parsing_status_reply`,
  `service_reply`, `expired_reply` and `proxy_alive_notification`.
- `gonggo.clientservice.ClientService` handles incoming messages.
  - `route(remote_addr, uri, data, conn)` checks a message and answers with a
    parsing status. It then either runs a built-in service or records the
    request for its proxy and wakes that proxy's channel context.
  - The built-in services are `test`, which lists the built-in services and
    the proxies in the alive table, and `responseDump`, which pages through
    stored responses.
  - `drop_conn(conn)` forgets every request of a closed connection and queues
    a `gonggorequestdrop` request for each proxy that held one.
- `gonggo.threadtables.ProxyThreadTable` maps a proxy name to a
  `ThreadEntry(thread, ctx)`. It can call a destroy callback whenever an
  entry is replaced or removed.
- `gonggo.proxy` holds the proxy state enums and two classes:
  - `ProxyChannelContext` is a wake-up point with `wake`, `wait` and `stop`.
  - `ProxyThreadKiller` stops, joins and forgets the subscribe, channel and
    alive workers of a proxy. It also tracks which proxies are being torn
    down.
- `gonggo.terminateset.ProxyTerminateSet` is a thread-safe ordered set of
  proxy names.
- `gonggo.terminator.ProxyTerminator` is a background thread that tears down
  each proxy passed to `awake(proxy_name)`. First it marks that proxy's
  requests unsent, so they are delivered again if the proxy comes back.
- `gonggo.wshandler.WebSocketHandlers` connects a websocket server's events
  to a `ClientService` through `on_connect`, `on_ready`, `on_data` and
  `on_close`. Only text frames (opcode 1) are routed.

## Configuration

The required keys are:

- `pidfile`
- `logpath`
- `port`
- `gonggo`
- `dbpath`
- `responddrainoverdue`
- `responddrainperiod`
- `respondquerysize`
- `clienttimeoutperiod`
- `pingms`

`validate_config` requires the first four numeric keys to be integers
greater than 0, and `pingms` to be an integer of at least 0. The keys
`sslcert`, `sslcertchain` and `threads` are also recognised, but they are
optional and are not checked.

```python
from gonggo.confvar import ConfigError, validate_config

try:
    config = validate_config("/etc/gonggo/gonggo.conf")
except ConfigError as exc:
    print(exc)
else:
    print(config.value("gonggo"), config.long("clienttimeoutperiod"))
```

## Storing and reading responses

```python
from gonggo.db import ResponseStore

store = ResponseStore("gonggo", "/var/lib/gonggo")
store.ensure()
store.insert("0f8e3c2a-1111-4222-8333-944455556666", '{"headers":{}}')
result = store.query("0f8e3c2a-1111-4222-8333-944455556666", 1, 10)
print(result.responses, result.stop, result.more)
```

## Handling client messages

A connection is any object that has `remote_addr` and `request_uri`
attributes and a `send(text)` method.

```python
from gonggo.clientservice import ClientService
from gonggo.connectiontable import ClientConnectionTable
from gonggo.proxynametable import ClientProxynameTable
from gonggo.requesttable import ClientRequestTable
from gonggo.servicetable import ClientServiceTable
from gonggo.threadtables import ProxyThreadTable
from gonggo.wshandler import WebSocketHandlers


class Connection:
    remote_addr = "127.0.0.1"
    request_uri = "/gonggo"

    def send(self, text):
        print(text)


service = ClientService(
    "/gonggo",
    ClientRequestTable(),
    ClientConnectionTable(),
    ClientServiceTable(),
    ClientProxynameTable(),
    ProxyThreadTable(),
    ProxyThreadTable(),
    None,  # or a ResponseStore to keep the answers
)
handlers = WebSocketHandlers(service)
handlers.on_data(Connection(), 1, '{"headers":{"rid":"r1","service":"test"}}')
```

## Message format

Every client message is a JSON object with a `headers` object. The headers
hold:

- `rid`: at most 36 bytes in UTF-8.
- `service`: the name of the service to call.
- `proxy` and `timeout`: only for proxied requests. The timeout is in
  seconds and must be at least 1.

An optional `payload` is stored with the request unchanged. Every reply
carries `headers.requestStatus`, which holds one of the values of
`gonggo.constants.ServiceStatus`.

## What the package does not do

- It has no command-line program and no background launcher. It does not
  write or read a pid file.
- It does not run a websocket server. `WebSocketHandlers` has to be wired to
  a server that you supply.
- It does not talk to proxy processes. It has no activation handshake and no
  shared-memory channel. It also has no subscribe, channel or alive workers.
  The thread tables, `ProxyThreadKiller` and `ProxyTerminator` work with any
  context that has a `stop()` method and any thread that has a `join()`
  method. `ClientService` only wakes the `ProxyChannelContext` it finds in
  the channel table.
- It does not build a running server from a configuration file. You create
  the tables, the store and the background workers yourself.