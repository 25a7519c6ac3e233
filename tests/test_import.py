"""Test basic imports and setup."""


def test_import():
    """Test that the package can be imported."""
    import genbank_parser
    assert genbank_parser.__version__ == "1.0.0"
    assert callable(genbank_parser.parse)


def test_dependencies():
    """Test that core dependencies are available."""
    import click
    import Bio

    # Basic smoke test
    assert callable(click.command)
    assert Bio.__version__
