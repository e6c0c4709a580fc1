"""Unit tests for JSON rendering."""

import json

from topquestions.renderer.json_renderer import render_items
from tests.helpers.items import make_item


class TestRenderItems:
    """Tests for render_items."""

    def test_renders_array_in_order(self) -> None:
        """Test items are serialized best first with output fields."""
        output = render_items([make_item(2, 90), make_item(1, 50)])

        data = json.loads(output)
        assert data == [
            {
                "view_count": 90,
                "creation_date": 1700000000,
                "question_id": 2,
                "link": "https://stackoverflow.com/questions/2",
            },
            {
                "view_count": 50,
                "creation_date": 1700000000,
                "question_id": 1,
                "link": "https://stackoverflow.com/questions/1",
            },
        ]

    def test_field_order(self) -> None:
        """Test keys appear in output order."""
        output = render_items([make_item(1, 5)])
        assert output.index("view_count") < output.index("question_id")
        assert output.index("question_id") < output.index("link")

    def test_is_answered_only_when_true(self) -> None:
        """Test is_answered is emitted only for answered items."""
        data = json.loads(
            render_items([make_item(1, 5), make_item(2, 4, is_answered=True)])
        )
        assert "is_answered" not in data[0]
        assert data[1]["is_answered"] is True

    def test_empty(self) -> None:
        """Test an empty result renders as an empty array."""
        assert render_items([]) == "[]"

    def test_indent(self) -> None:
        """Test pretty output."""
        assert "\n" in render_items([make_item(1, 5)], indent=2)
