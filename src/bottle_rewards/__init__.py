"""Student bottle-recycling rewards service."""
