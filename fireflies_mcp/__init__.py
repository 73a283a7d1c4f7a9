"""Fireflies.ai MCP Server - MCP over Server-Sent Events for the Fireflies GraphQL API."""

__version__ = "2.0.0"
