"""
DevLog Service.

This service is responsible for:
- Building log entries from the last commit or an explicit message
- Sending entries to the remote devlog service
"""

__version__ = "1.0.0"
__description__ = "Development activity logging service"
