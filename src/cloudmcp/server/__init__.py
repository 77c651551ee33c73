"""MCP-facing layer: parameter parsing, the handler harness, and the dispatcher."""
