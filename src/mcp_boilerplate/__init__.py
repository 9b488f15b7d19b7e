"""MCP boilerplate server: example tools, a resource and a prompt over stdio or HTTP/SSE."""

__version__ = "1.0.0"
