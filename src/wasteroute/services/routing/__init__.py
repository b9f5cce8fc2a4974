"""Sequencing and optimization services for collection routes."""
