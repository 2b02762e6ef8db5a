"""
Holiday function app: public holiday lookups exposed as MCP tools.
"""
