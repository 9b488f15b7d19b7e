"""Run the MCP boilerplate server over HTTP/SSE.

Equivalent to ``MCP_TRANSPORT=http mcp-boilerplate``; an explicit
MCP_TRANSPORT in the environment still wins.
"""

import os

if __name__ == "__main__":
    os.environ.setdefault("MCP_TRANSPORT", "http")

    from mcp_boilerplate.server import main

    main()
