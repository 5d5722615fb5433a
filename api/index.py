"""Entrypoint for deploying the admin API on Vercel."""

from __future__ import annotations

from langobridge_admin.main import app as fastapi_app

# Vercel looks for a module-level ``app`` variable.
app = fastapi_app
