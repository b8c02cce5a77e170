"""
Link validator/rewriter

Documentation links are rewritten to point at the Markdown rendition of the
page ('.../docs/x/' -> '.../docs/x.md') when that rendition answers a HEAD
probe. Links whose rendition does not answer are degraded to their plain
text so that no dead link reaches the output.

Only links into the documentation domain under '/docs/' or '/developer/'
are considered; everything else is left alone without touching the network.
Links are probed one at a time in document order.
"""

import asyncio
import re
from functools import lru_cache
from typing import Awaitable, Callable, List, Optional, Pattern

import requests

from ..config import appsettings
from ..models.markup import LinkMatch
from .log import LOG, WARN
from .scanner import LineScanner

MARKDOWN_SUFFIX = '.md'

Probe = Callable[[str], Awaitable[bool]]


@lru_cache(maxsize=None)
def linkPattern_compile(domain: str) -> Pattern[str]:
    """'[text](url)' links into ``domain`` under /docs/ or /developer/"""
    return re.compile(
        r'\[([^\]]+)\]\((https?://(?:www\.)?'
        + re.escape(domain)
        + r'/(?:docs|developer)/[^)\s]+?)/?\)'
    )


def links_find(line: str, domain: str) -> List[LinkMatch]:
    return [
        LinkMatch(full_match=match.group(0), link_text=match.group(1), url=match.group(2))
        for match in linkPattern_compile(domain).finditer(line)
    ]


def url_canonicalize(url: str) -> str:
    """
    Markdown rendition of a documentation URL.

    Example:
        >>> url_canonicalize("https://www.mongodb.com/docs/atlas/")
        'https://www.mongodb.com/docs/atlas.md'
        >>> url_canonicalize("https://www.mongodb.com/docs/atlas.md")
        'https://www.mongodb.com/docs/atlas.md'
    """
    url = url.rstrip('/')
    if url.endswith(MARKDOWN_SUFFIX):
        return url
    return url + MARKDOWN_SUFFIX


async def url_probe(url: str, timeout: Optional[float] = None) -> bool:
    """
    HEAD-probe a URL, following redirects.

    Returns:
        True on a success status; False on any other status, a timeout or
        a network error
    """
    if timeout is None:
        timeout = appsettings.link_probe_timeout
    try:
        response = await asyncio.to_thread(
            requests.head, url, timeout=timeout, allow_redirects=True
        )
    except requests.RequestException as e:
        LOG(f"Probe of {url} failed: {e}", level=2)
        return False
    return response.ok


async def links_validate(
    content: str,
    source_file: Optional[str] = None,
    *,
    domain: Optional[str] = None,
    timeout: Optional[float] = None,
    probe: Optional[Probe] = None,
) -> str:
    """
    Rewrite or degrade every documentation link outside fences.

    Args:
        content: Document text
        source_file: Label used in diagnostics, e.g. 'SKILL.md'
        domain: Documentation hostname; defaults to the configured one
        timeout: Per-probe timeout in seconds
        probe: Replacement for the HTTP probe, called with the canonical URL

    Returns:
        Document with reachable links rewritten and broken links reduced to
        their text
    """
    if domain is None:
        domain = appsettings.docs_domain
    if probe is None:
        async def probe(url: str) -> bool:
            return await url_probe(url, timeout)

    output: List[str] = []
    for line in LineScanner(content):
        if line.verbatim:
            output.append(line.text)
            continue

        processed = line.text
        for link in links_find(line.text, domain):
            md_url = url_canonicalize(link.url)
            if await probe(md_url):
                LOG(f"Link ok: {md_url}", level=3)
                processed = processed.replace(link.full_match, f"[{link.link_text}]({md_url})", 1)
                continue

            location = f"{source_file}:{line.number}" if source_file else f"line {line.number}"
            WARN(
                f'Broken link at {location}: {md_url} - removing link, keeping text "{link.link_text}"'
            )
            processed = processed.replace(link.full_match, link.link_text, 1)
        output.append(processed)

    return '\n'.join(output)
