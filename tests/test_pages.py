"""
Tests for server-rendered pages and the sitemap.
"""
import json
import re

import pytest

from app.pages import AssetInfo, base_url, embed_json, find_asset_files, generate_sitemap_xml, render_page


def embedded_data(html):
    match = re.search(r"window\.__BLOG_DATA__ = (.*?);</script>", html, re.S)
    assert match, "page has no embedded data"
    return json.loads(match.group(1))


class TestPageRoutes:
    """Test SSR routes."""

    def test_home_embeds_all_posts(self, client, make_post):
        make_post(title="First Post")
        make_post(title="Second Post")

        response = client.get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        data = embedded_data(response.text)
        assert [p["slug"] for p in data] == ["second-post", "first-post"]

    def test_blog_page_embeds_post(self, client, make_post):
        make_post(title="Readable", content="Hello **there**", meta_description="About reading")

        response = client.get("/blogs/readable")
        assert response.status_code == 200
        assert "<title>Readable</title>" in response.text
        assert 'content="About reading"' in response.text
        assert embedded_data(response.text)["content"] == "Hello **there**"

    def test_blog_page_not_found(self, client):
        response = client.get("/blogs/missing")
        assert response.status_code == 404
        assert "Page not found" in response.text

    def test_edit_page(self, client, make_post):
        make_post(title="Editable")
        response = client.get("/blogs/editable/edit")
        assert response.status_code == 200
        assert embedded_data(response.text)["title"] == "Editable"

    def test_edit_page_not_found(self, client):
        assert client.get("/blogs/missing/edit").status_code == 404

    def test_new_page(self, client):
        response = client.get("/blogs/new")
        assert response.status_code == 200
        assert "__BLOG_DATA__" not in response.text

    def test_script_breakout_is_escaped(self, client, make_post):
        make_post(title="Sneaky", content="</script><script>alert(1)</script>")

        html = client.get("/blogs/sneaky").text
        assert "</script><script>alert(1)" not in html
        assert embedded_data(html)["content"] == "</script><script>alert(1)</script>"

    def test_sitemap(self, client, make_post):
        make_post(title="Public", published=True)
        make_post(title="Hidden")

        response = client.get("/sitemap.xml")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        assert "/blogs/public</loc>" in response.text
        assert "/blogs/hidden" not in response.text


class TestRendering:
    """Test page helpers directly."""

    def test_embed_json_escapes_markup(self):
        raw = embed_json({"x": "<b>&</b>"})
        assert "<" not in raw and ">" not in raw and "&" not in raw
        assert json.loads(raw) == {"x": "<b>&</b>"}

    def test_render_page_with_assets(self):
        html = render_page("T", assets=AssetInfo(js_file="index-abc.js", css_file="index-abc.css"))
        assert '/assets/index-abc.js' in html
        assert '/assets/index-abc.css' in html

    def test_render_page_escapes_title(self):
        html = render_page('<T & "q">')
        assert "<title>&lt;T &amp; &quot;q&quot;&gt;</title>" in html

    @pytest.mark.parametrize("host, expected", [
        ("localhost:8080", "http://localhost:8080"),
        ("127.0.0.1:8080", "http://127.0.0.1:8080"),
        ("blog.example.com", "https://blog.example.com"),
    ])
    def test_base_url(self, host, expected):
        assert base_url(host) == expected

    def test_find_asset_files(self, tmp_path):
        assets = tmp_path / "assets"
        assets.mkdir()
        (assets / "index-1a2b.js").write_text("")
        (assets / "index-1a2b.css").write_text("")
        (assets / "vendor-9z.js").write_text("")

        info = find_asset_files(tmp_path)
        assert info == AssetInfo(js_file="index-1a2b.js", css_file="index-1a2b.css")

    def test_find_asset_files_missing(self, tmp_path):
        (tmp_path / "assets").mkdir()
        with pytest.raises(FileNotFoundError):
            find_asset_files(tmp_path)

    def test_sitemap_xml(self, store, make_post):
        make_post(title="Mapped", published=True)
        xml = generate_sitemap_xml(store.list_all(), "https://blog.example.com")

        assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
        assert "<loc>https://blog.example.com/</loc>" in xml
        assert "<loc>https://blog.example.com/blogs/mapped</loc>" in xml
        assert xml.count("<url>") == 2
