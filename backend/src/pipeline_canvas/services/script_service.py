"""Script dialect dispatch and generate-from-script for editing sessions."""

from __future__ import annotations

import logging
from typing import Literal

from ..pipeline import FlowGraph, FlowSession, Stage, parse_shell, parse_workflow

logger = logging.getLogger(__name__)

Dialect = Literal["yaml", "shell"]


class ScriptGenerationError(Exception):
    """Raised when generating nodes from a script fails for any reason."""


DEFAULT_YAML = """name: CI/CD Pipeline
on: [push, pull_request]
jobs:
  pipeline:
    runs-on: ubuntu-latest
    steps:
      - name: Checkout code
        uses: actions/checkout@v3
      - name: Setup Node.js
        uses: actions/setup-node@v3
        with:
          node-version: '18'
      - name: Install dependencies
        run: npm ci
      - name: Run tests
        run: npm test
      - name: Build
        run: npm run build"""

DEFAULT_SHELL = """#!/bin/bash
set -e

echo "Starting CI/CD Pipeline"

# Install dependencies
npm ci

# Run tests
npm test

# Build
npm run build

echo "Pipeline completed successfully"
"""


def default_template(dialect: Dialect) -> str:
    return DEFAULT_YAML if dialect == "yaml" else DEFAULT_SHELL


def parse_script(script: str, dialect: Dialect) -> list[Stage]:
    if dialect == "yaml":
        return parse_workflow(script)
    if dialect == "shell":
        return parse_shell(script)
    raise ValueError(f"Unknown script dialect: {dialect}")


def generate_nodes_from_script(session: FlowSession, script: str, dialect: Dialect) -> FlowGraph:
    """Parse ``script`` and bulk-load it into ``session``.

    Any failure is logged and surfaced as a single ScriptGenerationError.
    """
    try:
        stages = parse_script(script, dialect)
        return session.load_stages(stages)
    except Exception as e:
        logger.exception("Failed to generate nodes from %s script", dialect)
        raise ScriptGenerationError("Failed to parse script") from e
