"""Tests for the package's public surface."""

import markup_builder


class TestPackage:
    """Test package metadata and exports."""

    def test_version(self) -> None:
        """Test version metadata."""
        assert markup_builder.__version__ == "0.1.0"
        assert markup_builder.__author__

    def test_public_api(self) -> None:
        """Test the documented names are exported."""
        for name in ("build_tree", "render_tree", "Node", "NodeArena", "escape",
                     "unescape", "BuilderConfig", "TreeCycleError"):
            assert name in markup_builder.__all__
            assert hasattr(markup_builder, name)

    def test_quick_start(self) -> None:
        """Test the one-call rendering path."""
        result = markup_builder.render_tree({"tag": "p", "content": "1 < 2"})
        assert result.output == "<p>1 &lt; 2</p>"
