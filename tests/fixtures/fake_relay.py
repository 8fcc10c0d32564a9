"""
Stand-in for the relay executable used by subprocess transport tests.

Invoked as ``fake_relay.py <endpoint> [--header "Name: value" ...]``. The
last path segment of the endpoint picks the behaviour:

- ``tools``: handshake, two tools, ``echo`` returns its ``text`` argument
- ``silent``: read input and never answer
- ``crash``: read one request, write to stderr and exit with code 3
- ``init-error``: reject ``initialize``
- ``noise``: like ``tools`` with log lines and notifications mixed in
- ``rewrite``: like ``tools`` but answers with ids the client never sent
- ``rewrite-error``: rewritten ids, and every operation is answered with an error
- ``headers``: ``tools/call`` returns the forwarded headers
"""

import json
import sys
import time

TOOLS = [
    {
        "name": "echo",
        "description": "Echo the text argument",
        "inputSchema": {
            "type": "object",
            "properties": {"text": {"type": "string"}},
            "required": ["text"],
        },
    },
    {"name": "ping"},
]


def send(message):
    print(json.dumps(message), flush=True)


def main():
    endpoint = sys.argv[1]
    mode = endpoint.rstrip("/").rsplit("/", 1)[-1]
    headers = [sys.argv[i + 1] for i, arg in enumerate(sys.argv) if arg == "--header"]

    if mode == "crash":
        sys.stdin.readline()
        print("relay: cannot reach server", file=sys.stderr, flush=True)
        sys.exit(3)

    initialized = False
    for line in sys.stdin:
        request = json.loads(line)
        method = request.get("method")
        request_id = request.get("id")
        if mode in ("rewrite", "rewrite-error"):
            request_id = 999999999999
        if mode == "silent":
            continue
        if mode == "noise":
            print("[relay] connected to remote server", flush=True)
            send({"jsonrpc": "2.0", "method": "notifications/message", "params": {"level": "info"}})

        if method == "initialize":
            if mode == "init-error":
                send({"jsonrpc": "2.0", "id": request_id, "error": {"code": -32603, "message": "Unauthorized"}})
                continue
            initialized = True
            send({
                "jsonrpc": "2.0",
                "id": request_id,
                "result": {
                    "protocolVersion": "2024-11-05",
                    "capabilities": {"tools": {}},
                    "serverInfo": {"name": "fake", "version": "0"},
                },
            })
        elif mode == "rewrite-error":
            send({"jsonrpc": "2.0", "id": request_id, "error": {"code": -32603, "message": "Upstream unavailable"}})
        elif not initialized:
            send({"jsonrpc": "2.0", "id": request_id, "error": {"code": -32002, "message": "Server not initialized"}})
        elif method == "tools/list":
            send({"jsonrpc": "2.0", "id": request_id, "result": {"tools": TOOLS}})
        elif method == "tools/call":
            params = request.get("params", {})
            if mode == "headers":
                text = "\n".join(headers)
            elif params.get("name") == "echo":
                text = params.get("arguments", {}).get("text", "")
            else:
                send({"jsonrpc": "2.0", "id": request_id, "error": {"code": -32601, "message": f"Unknown tool: {params.get('name')}"}})
                continue
            send({"jsonrpc": "2.0", "id": request_id, "result": {"content": [{"type": "text", "text": text}]}})

    # Input closed; linger like a real relay would
    time.sleep(60)


if __name__ == "__main__":
    main()
