"""MCP tool registrations"""
