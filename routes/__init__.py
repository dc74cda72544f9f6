"""Blueprints exposing the HTTP API."""
