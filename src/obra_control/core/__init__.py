"""Core value types and helpers shared across the package."""
