"""
Application Support

Key Components:
- config.py: Configuration management using Pydantic settings
- cli.py: Logging and error reporting bootstrap for command line entry points
"""
