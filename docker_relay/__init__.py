"""
docker-relay
Natural language Docker commands served over the Model Context Protocol
"""

__version__ = "1.0.0"
