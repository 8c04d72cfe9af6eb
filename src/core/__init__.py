"""Shared configuration, constants, errors, logging and types."""
