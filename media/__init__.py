"""Media toolchain package."""
