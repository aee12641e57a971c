"""Pytest fixtures for txxt engine tests."""

import pytest


@pytest.fixture
def simple_doc() -> str:
    """A formatted document with a title, metadata and numbered sections."""
    return """My Document
-----------

Author        Jane Doe
Date          2025-03-13

1. Introduction

Some intro text.

1.1. Background

Background text.

2. Design

Design text.
"""


@pytest.fixture
def mixed_dialect_doc() -> str:
    """A document using all three section dialects."""
    return """1. Overview

Text.

SCOPE AND GOALS

More text.

: Open Questions

Last text.
"""


@pytest.fixture
def doc_with_toc() -> str:
    """A document whose table of contents is out of date."""
    return """TABLE OF CONTENTS
-----------------

1. Old

1. Intro

2. Design
"""


@pytest.fixture
def target_doc() -> str:
    """A reference target with one header of each dialect."""
    return """Target
------

1. Introduction

1.2. Details

SCOPE AND GOALS

: Open Questions
"""
