"""Core configuration, constants, logging and errors."""
