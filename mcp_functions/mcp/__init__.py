"""
MCP protocol pieces shared by the function apps: server, transport, host adapter.
"""
