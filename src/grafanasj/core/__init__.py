"""Framework-free protocol translation core."""
