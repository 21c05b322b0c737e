"""Pytest configuration and fixtures for replkit tests."""

import logging

import pytest

from programs import SampleProgram


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo logging.disable() calls and handlers installed by setup_logging()."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    logging.disable(logging.NOTSET)
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def output():
    """Collected output lines."""
    return []


@pytest.fixture
def program(output):
    """SampleProgram writing into the ``output`` list."""
    return SampleProgram(write=output.append, debug=False)


@pytest.fixture
def docs_xml(tmp_path):
    """Write an XML documentation file and return a factory for more."""

    def write(body: str, name: str = "docs.xml"):
        path = tmp_path / name
        path.write_text(
            f'<?xml version="1.0"?>\n<doc>\n  <members>\n{body}\n  </members>\n</doc>\n',
            encoding="utf-8",
        )
        return path

    return write
