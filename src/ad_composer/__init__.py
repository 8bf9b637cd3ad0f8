"""Ad creative composition and rendering engine."""
