"""
Function apps exposing small tool domains over the Model Context Protocol.

Two ASGI apps are provided:
- holidays - public holiday lookups backed by the Nager.Date REST API
- currency - fixed-rate PLN/EUR conversion over MCP Streamable HTTP
"""
