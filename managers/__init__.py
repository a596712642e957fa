"""Data sources used by the MCP tools"""
