"""Masar career roadmap service."""
