"""Folio admin console."""
