"""Static site build.

Turns a content directory plus its navigation manifest into a directory of
HTML pages, copied assets, ``styles.css`` and ``index.html``. The build is
sequential and fails on the first error.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from docsite.assets import copy_assets
from docsite.config import Config
from docsite.core.layout import Layout
from docsite.core.renderer import PageRenderer
from docsite.core.site import Site, SiteLoader
from docsite.exceptions import BuildError

logger = logging.getLogger(__name__)

STYLESHEET_NAME = "styles.css"
INDEX_NAME = "index.html"


@dataclass
class BuildResult:
    """Files written by one build."""

    pages: list[Path]
    output_dir: Path
    assets: list[Path] = field(default_factory=list)


class SiteBuilder:
    """Builds the static site described by a configuration."""

    def __init__(self, config: Config, *, live_reload: bool = False) -> None:
        """Initialize builder.

        Args:
            config: Application configuration (site section drives the build)
            live_reload: Embed the live reload client in generated pages
        """
        self._config = config
        self._live_reload = live_reload

    @property
    def source_dir(self) -> Path:
        return self._config.site.source_dir

    @property
    def output_dir(self) -> Path:
        return self._config.site.output_dir

    def build(self) -> BuildResult:
        """Run a full build.

        Returns:
            BuildResult listing every written page and copied asset

        Raises:
            BuildError: If the output directory would overwrite the sources
            ManifestError: If the manifest is missing, malformed or
                references pages without content
            ContentError: If a content file cannot be read or parsed
            OSError: If writing the output fails
        """
        site_config = self._config.site
        source_dir = site_config.source_dir
        output_dir = site_config.output_dir
        self._check_output_dir(source_dir, output_dir)

        if output_dir.exists():
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True)

        loader = SiteLoader(source_dir, site_config.manifest_path, exclude_dirs=[output_dir])
        site = loader.load()

        renderer = PageRenderer(source_dir)
        layout = Layout(
            site,
            playground=self._config.playground,
            formatter=renderer.formatter,
            live_reload=self._live_reload,
            lang=site_config.lang,
        )

        pages = self._write_pages(site, renderer, layout, output_dir)

        assets = copy_assets(source_dir, output_dir, site_config.asset_dirs, site_config.asset_files)

        (output_dir / STYLESHEET_NAME).write_text(layout.render_stylesheet(), encoding="utf-8")
        logger.info(f"Generated: {STYLESHEET_NAME}")

        if not site.has_index_page:
            (output_dir / INDEX_NAME).write_text(layout.render_index(), encoding="utf-8")
            logger.info(f"Generated: {INDEX_NAME}")

        logger.info(f"Build complete: {len(pages)} pages written to {output_dir}")
        return BuildResult(pages=pages, output_dir=output_dir, assets=assets)

    def _write_pages(
        self,
        site: Site,
        renderer: PageRenderer,
        layout: Layout,
        output_dir: Path,
    ) -> list[Path]:
        written: list[Path] = []
        for page in site.pages:
            result = renderer.render(page.source_path, fallback_title=page.title)
            target = output_dir / page.output_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(layout.render_page(page, result), encoding="utf-8")
            logger.info(f"Generated: {page.output_path}")
            written.append(target)
        return written

    @staticmethod
    def _check_output_dir(source_dir: Path, output_dir: Path) -> None:
        source = source_dir.resolve()
        output = output_dir.resolve()
        if source == output or source.is_relative_to(output):
            raise BuildError(
                f"Output directory {output_dir} contains the source directory {source_dir}"
            )
