"""Pytest fixtures shared by the intl_refactor tests.

This module provides:
- Extraction context, extractor and rewriter fixtures without reverse lookup
- A small Flutter project tree under tmp_path
- A Config pointing its output directory into that tree
"""

import textwrap
from pathlib import Path

import pytest
import structlog

from intl_refactor.config import Config
from intl_refactor.extraction.context import ExtractionContext
from intl_refactor.extraction.string_extractor import StringExtractor
from intl_refactor.refactoring.rewriter import Rewriter

# =============================================================================
# Sample Sources
# =============================================================================

HOME_PAGE = textwrap.dedent(
    """\
    import 'package:flutter/material.dart';

    class HomePage extends StatelessWidget {
      @override
      Widget build(BuildContext context) {
        return Column(
          children: [
            const Text('Welcome back'),
            Text("Hello World"),
            ElevatedButton(
              onPressed: () {},
              child: Text('Save changes'),
            ),
            Image.asset('assets/logo.png'),
          ],
        );
      }
    }
    """
)

FAREWELL_WIDGET = textwrap.dedent(
    """\
    import 'package:flutter/material.dart';

    Widget farewell() => Column(children: [
          Text('Hello World'),
          Text("Goodbye"),
        ]);
    """
)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop logging configuration made by CLI runs (it binds the runner's streams)."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def context() -> ExtractionContext:
    return ExtractionContext.create(reverse_lookup=False)


@pytest.fixture
def extractor(context: ExtractionContext) -> StringExtractor:
    return StringExtractor(context)


@pytest.fixture
def rewriter(context: ExtractionContext) -> Rewriter:
    return Rewriter(context)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project root with lib/main.dart and lib/widgets/farewell.dart."""
    lib = tmp_path / "lib"
    (lib / "widgets").mkdir(parents=True)
    (lib / "main.dart").write_text(HOME_PAGE, encoding="utf-8")
    (lib / "widgets" / "farewell.dart").write_text(FAREWELL_WIDGET, encoding="utf-8")
    return tmp_path


@pytest.fixture
def settings(project: Path) -> Config:
    return Config(
        key_format="snake_case",
        output_dir=str(project / "lib" / "l10n"),
        locale="en",
        merge_mode="dedupe",
        use_app_localizations=True,
        max_workers=2,
        exclude_patterns=None,
    )
