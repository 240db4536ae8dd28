# blockytui

A terminal dashboard for a Blocky DNS server. It checks whether the server is
healthy and lets you run common admin actions from the keyboard.

## Installation

```
pip install .
```

## Usage

Start the dashboard:

```
blocky-tui
```

The dashboard talks to a Blocky instance at `http://localhost`. It uses the API on
TCP port 4000 and DNS on UDP port 1234. The screen is redrawn three times a second.

### Tiles

1. **DNS Status**: press `Enter` to probe the server. Three checks run in the
   background:
   - a TCP connection to the API port;
   - a DNS `A` question sent over UDP to the DNS port. The port counts as not
     answering if no reply arrives within 5 seconds;
   - an `A` query for `www.wikipedia.org` sent through the API. It is healthy
     when the return code is `NOERROR`.

   The summary reads **Healthy** when all three succeed and **No Response** when
   all three fail. It reads **Not yet requested** before the first probe and
   **Unhealthy** in every other case.
2. **Blocking Status**: shows whether blocking is enabled.
3. **Refresh Blocking Lists**: press `Enter` to ask Blocky to reload its blocking
   lists (`POST api/lists/refresh`).
4. **Delete DNS Cache**: press `Enter` to flush Blocky's DNS response cache
   (`POST api/cache/flush`).
5. **Query DNS**: shows a label only.

### Keys

| Key                  | Action                                                   |
|----------------------|----------------------------------------------------------|
| `Tab` / `Shift+Tab`  | Move focus to the next or previous tile, wrapping around |
| `1` to `5`           | Jump to a tile (any other digit jumps to tile 1)         |
| `Enter`              | Run the focused tile's action                            |
| `q`, `Esc`, `Ctrl+C` | Quit                                                     |

## Logging

`blocky-tui` writes its log to `blocky-tui.log` in the data directory and starts a
fresh file on each run. The data directory is `./.data` by default. Set the
`BLOCKY_TUI_DATA` environment variable to use another one.

`BLOCKY_TUI_LOGLEVEL` sets the log level. It takes either a bare level or
`target=level`, where the level is one of `trace`, `debug`, `info`, `warn`,
`error` or `off`. The default is `info`.

## Using the pieces as a library

- `blockytui.api.ApiClient(base_url, api_port, dns_port)` is an async HTTP client.
  It keeps only the scheme, host and API port of `base_url`, and the scheme must
  be `http` or `https`. Its methods are `post_refresh_list_cmd()`,
  `post_clear_dns_cache()`, `post_dnsquery(DNSQuery(...))`, which returns a
  `DNSResponse`, and `aclose()`.
- `blockytui.port_check.check_tcp_port(url, port)` and
  `check_dns(url, port, query)` are coroutines. Each returns a `PortState`.
- `blockytui.ui.render(app)` builds the whole screen as a `rich` layout from an
  `App`'s state.

## Limitations

- The server address and ports are fixed and cannot be set from the command line.
- Nothing reads Blocky's blocking status yet, so the Blocking Status tile always
  shows "Not queried". Blocking cannot be enabled or disabled from the dashboard.
- The Query DNS tile has no input field, and you cannot send your own queries.
- There is no setup screen and no exit confirmation.

## Development

```
pip install -e ".[test]"
pytest
```