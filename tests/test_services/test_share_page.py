"""Tests for the share page HTML."""

import re

from lifeweeks.services.share_page import OG_TITLE, render_share_page

PAYLOAD = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="


class TestRenderSharePage:
    def test_payload_in_og_image_meta(self):
        html = render_share_page(PAYLOAD)
        assert f'<meta property="og:image" content="{PAYLOAD}" />' in html

    def test_payload_in_visible_img(self):
        html = render_share_page(PAYLOAD)
        assert re.search(r'<img src="' + re.escape(PAYLOAD) + '"', html)

    def test_is_complete_document_without_script(self):
        html = render_share_page(PAYLOAD)
        assert html.startswith("<!DOCTYPE html>")
        assert "</html>" in html
        assert "<script" not in html.lower()

    def test_preview_metadata(self):
        html = render_share_page(PAYLOAD)
        assert f'<meta property="og:title" content="{OG_TITLE}" />' in html
        assert 'name="twitter:card" content="summary_large_image"' in html

    def test_payload_is_escaped(self):
        html = render_share_page('x" onerror="alert(1)')
        assert 'onerror="alert(1)"' not in html
        assert "x&quot; onerror=&quot;alert(1)" in html
        assert "<script" not in html.lower()
