"""Tests for sidebar navigation builder."""

from pathlib import Path

from docsite.core.navigation import NavGroup, build_navigation, page_href, relative_prefix
from docsite.core.site import SiteLoader


def _load(source_dir: Path):
    return SiteLoader(source_dir, source_dir / "docs.json").load()


class TestRelativeLinks:
    """Tests for relative_prefix() and page_href()."""

    def test__top_level_page__has_no_prefix(self) -> None:
        """Pages at the build root link without a prefix."""
        assert relative_prefix("introduction") == ""
        assert page_href("auth/login", "introduction") == "auth/login.html"

    def test__nested_page__climbs_to_root(self) -> None:
        """Nested pages climb one level per directory."""
        assert relative_prefix("api/users/create") == "../../"
        assert page_href("introduction", "auth/login") == "../introduction.html"

    def test__landing_page__has_no_prefix(self) -> None:
        """The generated landing page sits at the root."""
        assert relative_prefix(None) == ""


class TestBuildNavigation:
    """Tests for build_navigation()."""

    def test__sample_site__mirrors_manifest(self, sample_site: Path) -> None:
        """Tabs and groups follow the manifest."""
        sidebar = build_navigation(_load(sample_site))

        assert sidebar.site_name == "Acme API"
        assert [tab.title for tab in sidebar.tabs] == ["Guides", "API Reference"]
        assert [group.title for group in sidebar.tabs[1].groups] == ["Auth"]
        assert [link.title for link in sidebar.links()] == ["Introduction", "Login", "register"]

    def test__current_page__is_active(self, sample_site: Path) -> None:
        """Only the current page's link is active, and its tab with it."""
        sidebar = build_navigation(_load(sample_site), "auth/login")

        active = [link.path for link in sidebar.links() if link.active]
        assert active == ["auth/login"]
        assert sidebar.tabs[1].active
        assert not sidebar.tabs[0].active

    def test__links__are_relative_to_current_page(self, sample_site: Path) -> None:
        """Links from a nested page climb to the root."""
        sidebar = build_navigation(_load(sample_site), "auth/login")

        hrefs = {link.path: link.href for link in sidebar.links()}
        assert hrefs == {
            "introduction": "../introduction.html",
            "auth/login": "../auth/login.html",
            "auth/register": "../auth/register.html",
        }
        assert sidebar.home_href == "../index.html"

    def test__api_front_matter__sets_badge(self, sample_site: Path) -> None:
        """Pages with an api field get a badge for their method."""
        sidebar = build_navigation(_load(sample_site))

        badges = {link.path: link.badge for link in sidebar.links()}
        assert badges["auth/login"].method == "POST"
        assert badges["auth/register"].method == "POST"
        assert badges["introduction"] is None

    def test__nested_groups__are_preserved(self, tmp_path: Path, make_site) -> None:
        """Groups inside groups stay nested."""
        make_site(
            tmp_path,
            {
                "tabs": [
                    {
                        "tab": "API",
                        "groups": [
                            {
                                "group": "Users",
                                "pages": ["users/list", {"group": "Admin", "pages": ["users/remove"]}],
                            }
                        ],
                    }
                ]
            },
            {"users/list.md": "# List users", "users/remove.md": "# Remove user"},
        )

        sidebar = build_navigation(_load(tmp_path), "users/remove")

        nested = sidebar.tabs[0].groups[0].items[1]
        assert isinstance(nested, NavGroup)
        assert nested.title == "Admin"
        assert nested.active
        assert nested.items[0].badge.label == "DEL"

    def test__to_dict__serializes_tree(self, sample_site: Path) -> None:
        """The sidebar converts to a JSON-ready structure."""
        data = build_navigation(_load(sample_site), "introduction").to_dict()

        assert data["name"] == "Acme API"
        assert data["tabs"][0]["active"] is True
        assert data["tabs"][0]["groups"][0]["items"][0] == {
            "title": "Introduction",
            "path": "introduction",
            "href": "introduction.html",
            "active": True,
        }
        assert data["tabs"][1]["groups"][0]["items"][0]["method"] == "POST"
