"""Tests for the static site builder."""

from dataclasses import replace
from pathlib import Path

import pytest
from docsite.config import Config
from docsite.core.builder import SiteBuilder
from docsite.exceptions import BuildError, ContentError, MissingPagesError


def _with_dirs(config: Config, source_dir: Path, output_dir: Path) -> Config:
    return replace(config, site=replace(config.site, source_dir=source_dir, output_dir=output_dir))


class TestSiteBuilderBuild:
    """Tests for SiteBuilder.build()."""

    def test__sample_site__writes_pages_and_index(self, test_config: Config, sample_site: Path) -> None:
        """N manifest pages produce N page files plus index.html."""
        result = SiteBuilder(test_config).build()

        output = test_config.site.output_dir
        html_files = sorted(path.relative_to(output).as_posix() for path in output.rglob("*.html"))
        assert html_files == [
            "auth/login.html",
            "auth/register.html",
            "index.html",
            "introduction.html",
        ]
        assert len(result.pages) == 3
        assert result.output_dir == output
        assert (output / "styles.css").is_file()

    def test__single_api_page__renders_heading_and_active_link(
        self, test_config: Config, make_site
    ) -> None:
        """A minimal tab/group/page manifest yields the page with an active sidebar link."""
        make_site(
            test_config.site.source_dir,
            {"tabs": [{"tab": "API", "groups": [{"group": "Auth", "pages": ["auth/login"]}]}]},
            {"auth/login.md": "# Login\n"},
        )

        SiteBuilder(test_config).build()

        html = (test_config.site.output_dir / "auth" / "login.html").read_text()
        assert '<h1 id="login">Login</h1>' in html
        assert 'href="../auth/login.html" class="active" aria-current="page"' in html

    def test__page__links_relative_assets(self, test_config: Config, sample_site: Path) -> None:
        """Nested pages reference styles.css and favicon.svg relative to the root."""
        SiteBuilder(test_config).build()

        html = (test_config.site.output_dir / "auth" / "register.html").read_text()
        assert 'href="../styles.css"' in html
        assert 'href="../favicon.svg"' in html
        assert 'rel="prev" href="login.html"' not in html
        assert 'rel="prev" href="../auth/login.html"' in html

    def test__api_page__includes_playground(self, test_config: Config, sample_site: Path) -> None:
        """Pages with an api endpoint get a playground seeded with the example body."""
        SiteBuilder(test_config).build()

        html = (test_config.site.output_dir / "auth" / "login.html").read_text()
        assert 'class="playground"' in html
        assert 'value="https://api.example.com/v1/auth/login"' in html
        assert "user@example.com" in html
        assert "curl --request POST" in html

    def test__api_page__calls_endpoint_directly_without_server(
        self, test_config: Config, sample_site: Path
    ) -> None:
        """Exported pages send the request themselves unless the preview server answers."""
        SiteBuilder(test_config).build()

        html = (test_config.site.output_dir / "auth" / "login.html").read_text()
        assert 'fetch("/api/config")' in html
        assert "fetch(request.url, options)" in html
        assert 'request.method !== "GET"' in html
        assert "useServer ? viaServer(request) : direct(request)" in html

    def test__regular_page__has_no_playground(self, test_config: Config, sample_site: Path) -> None:
        """Pages without an endpoint have no console."""
        SiteBuilder(test_config).build()

        html = (test_config.site.output_dir / "introduction.html").read_text()
        assert 'class="playground"' not in html
        assert '<meta name="description" content="Start here">' in html
        assert 'href="#authentication"' in html

    def test__stylesheet__uses_primary_color(self, test_config: Config, sample_site: Path) -> None:
        """styles.css carries the manifest color and Pygments rules."""
        SiteBuilder(test_config).build()

        css = (test_config.site.output_dir / "styles.css").read_text()
        assert "--primary: #0EA5E9;" in css
        assert ".highlight" in css

    def test__assets__copied(self, test_config: Config, sample_site: Path) -> None:
        """Configured assets end up in the output."""
        (sample_site / "images").mkdir()
        (sample_site / "images" / "logo.png").write_bytes(b"\x89PNG")
        (sample_site / "favicon.svg").write_text("<svg/>")

        result = SiteBuilder(test_config).build()

        output = test_config.site.output_dir
        assert (output / "images" / "logo.png").read_bytes() == b"\x89PNG"
        assert (output / "favicon.svg").read_text() == "<svg/>"
        assert result.assets == [output / "images", output / "favicon.svg"]

    def test__manifest_index__replaces_landing_page(self, test_config: Config, make_site) -> None:
        """An index page in the manifest is used instead of the generated one."""
        make_site(
            test_config.site.source_dir,
            {"tabs": [{"tab": "Docs", "groups": [{"group": "Start", "pages": ["index", "setup"]}]}]},
            {"index.md": "# Welcome home\n", "setup.md": "# Setup\n"},
        )

        result = SiteBuilder(test_config).build()

        assert len(result.pages) == 2
        assert "Welcome home" in (test_config.site.output_dir / "index.html").read_text()

    def test__stale_output__is_removed(self, test_config: Config, sample_site: Path) -> None:
        """The output directory is recreated on every build."""
        output = test_config.site.output_dir
        output.mkdir()
        (output / "stale.html").write_text("old")

        SiteBuilder(test_config).build()

        assert not (output / "stale.html").exists()

    def test__missing_page__aborts_build(self, test_config: Config, make_site) -> None:
        """A manifest page without content fails the build."""
        make_site(
            test_config.site.source_dir,
            {"tabs": [{"tab": "Docs", "groups": [{"group": "G", "pages": ["missing"]}]}]},
            {},
        )

        with pytest.raises(MissingPagesError):
            SiteBuilder(test_config).build()

    def test__bad_content__aborts_build(self, test_config: Config, make_site) -> None:
        """Invalid front-matter fails the build."""
        make_site(
            test_config.site.source_dir,
            {"tabs": [{"tab": "Docs", "groups": [{"group": "G", "pages": ["bad"]}]}]},
            {"bad.md": '---\napi: "FETCH /x"\n---\n# Bad'},
        )

        with pytest.raises(ContentError):
            SiteBuilder(test_config).build()

    @pytest.mark.parametrize("output_name", [".", ".."])
    def test__output_containing_source__raises_build_error(
        self, test_config: Config, sample_site: Path, output_name: str
    ) -> None:
        """Refuse to wipe a directory that holds the sources."""
        config = _with_dirs(test_config, sample_site, sample_site / output_name)

        with pytest.raises(BuildError, match="contains the source directory"):
            SiteBuilder(config).build()

        assert (sample_site / "docs.json").is_file()

    def test__live_reload__embeds_client(self, test_config: Config, sample_site: Path) -> None:
        """Pages built for the preview server connect to the reload socket."""
        SiteBuilder(test_config, live_reload=True).build()

        html = (test_config.site.output_dir / "introduction.html").read_text()
        assert "/ws/live-reload" in html
