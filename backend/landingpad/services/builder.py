"""Site build step run by the deployment worker."""
from dataclasses import dataclass, field
from typing import Dict, List

from landingpad.config import settings
from landingpad.editor.document import Page
from landingpad.models import Website
from landingpad.services.websites import get_project_document
from landingpad.utils.exceptions import BuildError


@dataclass
class BuildResult:
    """Result of building a website for deployment."""
    deployment_url: str
    page_count: int
    element_count: int
    page_paths: Dict[str, str] = field(default_factory=dict)
    logs: List[str] = field(default_factory=list)


def _page_paths(pages: List[Page]) -> Dict[str, str]:
    """
    Map page ids to URL paths.

    The home page is served at "/". Page names can collapse to the same slug,
    so a repeated slug gets a numeric suffix ("/contact", "/contact-2").
    """
    paths = {}
    taken = {"/"}
    for page in pages:
        if page.is_home:
            paths[page.id] = "/"
            continue
        base = f"/{page.slug.strip('/') or page.id}"
        path = base
        n = 2
        while path in taken:
            path = f"{base}-{n}"
            n += 1
        taken.add(path)
        paths[page.id] = path
    return paths


def build_site(website: Website, version: str) -> BuildResult:
    """
    Validate a website's stored document and prepare its deployment.

    Args:
        website: The website being deployed
        version: Version label of the deployment

    Returns:
        BuildResult with the public URL and a page manifest for the logs

    Raises:
        BuildError: If the document has no pages or not exactly one home page
    """
    project = get_project_document(website)

    if not project.pages:
        raise BuildError("Website has no pages")

    home_pages = [p for p in project.pages if p.is_home]
    if len(home_pages) != 1:
        raise BuildError(f"Website must have exactly one home page (found {len(home_pages)})")

    logs = [f"Building {website.name} version {version}"]
    page_paths = _page_paths(project.pages)
    element_count = 0
    for page in project.pages:
        path = page_paths[page.id]
        element_count += len(page.elements)
        logs.append(f"Page '{page.name}' -> {path} ({len(page.elements)} elements)")

    return BuildResult(
        deployment_url=f"https://{website.slug}.{settings.public_base_domain}",
        page_count=len(project.pages),
        element_count=element_count,
        page_paths=page_paths,
        logs=logs,
    )
