"""
Currency function app: fixed-rate PLN/EUR conversion over MCP.
"""
