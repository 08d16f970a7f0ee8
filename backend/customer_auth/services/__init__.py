"""Application services orchestrating repositories and outbound ports."""
