# partner_extract.py  ───────────────────────────────────────────────────────
"""
Rule-based partner / investor name extraction from a page snapshot.

Everything here is a pure read of a parsed HTML tree: no browser, no network.
partner_scraper.py feeds it the HTML of whatever page the browser landed on.
"""
import re
from urllib.parse import urljoin, urlparse
from bs4 import BeautifulSoup
from bs4.element import NavigableString, CData, Script, Stylesheet


# ─── Vocabularies ─────────────────────────────────────────────────────────
CONTAINER_CLASS_TERMS = [
    "logo", "partner", "investor", "backed", "portfolio",
    "supporter", "ecosystem", "sponsor", "client",
]

INVESTOR_CONTEXT_RE = re.compile(r"invest|fund|capital|venture|backed", re.I)
PARTNER_CONTEXT_RE  = re.compile(r"partner|ecosystem|integrate|built|powered", re.I)

COMPANY_PATTERNS = [
    re.compile(r"^[A-Z][a-zA-Z0-9\s&.-]*$"),    # starts with a capital
    re.compile(r"\b(Capital|Ventures|Partners|Labs|Fund|VC|Digital|Crypto|Web3)\b", re.I),
    re.compile(r"\b(Inc|LLC|Ltd|Corp|Company|Co)\b", re.I),
]

EXCLUDE_WORDS = [
    "the", "and", "our", "your", "partners", "investors", "ecosystem",
    "about", "contact", "home", "blog", "docs", "documentation",
]

VC_INDICATORS = ["Capital", "Ventures", "Fund", "Partners", "VC"]

HOST_PREFIX_RE = re.compile(r"^(www\.|cdn\.)")
HOST_SUFFIX_RE = re.compile(
    r"\.(com|org|net|io|xyz|co|ai|fi|tech|finance|capital|ventures|fund|labs|partners).*$"
)
LOGO_WORD_RE = re.compile(r"\s*logo\s*", re.I)

WELL_KNOWN_INVESTORS = [
    "Sequoia Capital", "Andreessen Horowitz", "a16z", "Kleiner Perkins",
    "Accel", "Founders Fund", "Google Ventures", "GV", "Bessemer Venture Partners",
    "Lightspeed Venture Partners", "Insight Partners", "Tiger Global",
    "Paradigm", "Pantera Capital", "Coinbase Ventures", "Binance Labs",
    "Framework Ventures", "Variant", "Union Square Ventures", "USV",
    "Galaxy Digital", "Jump Crypto", "Kraken Ventures", "Figment Capital",
    "Delphi Ventures", "Mechanism Capital", "CMS Holdings", "Placeholder",
]

WELL_KNOWN_PARTNERS = [
    "Chainlink", "The Graph", "Polygon", "Arbitrum", "Optimism",
    "Aave", "Compound", "Uniswap", "SushiSwap", "Curve", "Balancer",
    "MakerDAO", "Synthetix", "Yearn", "1inch", "OpenSea", "Rarible",
]

# Page-analysis vocabularies
NAV_LINK_SELECTOR = 'nav a, header a, [role="navigation"] a'
SECTION_SELECTOR  = 'section, main, article, [class*="section"]'
RELEVANT_LINK_KEYWORDS = ["partner", "investor", "ecosystem", "backed", "portfolio", "about"]
MAX_SECTIONS = 10
SECTION_PREVIEW_CHARS = 200

# what a browser's textContent includes: script and style bodies count, comments do not
TEXT_CONTENT_TYPES = (NavigableString, CData, Script, Stylesheet)


def _soup(html_or_soup) -> BeautifulSoup:
    if isinstance(html_or_soup, BeautifulSoup):
        return html_or_soup
    return BeautifulSoup(html_or_soup or "", "html.parser")


def text_content(tag) -> str:
    return tag.get_text(types=TEXT_CONTENT_TYPES)


def _class_string(tag) -> str:
    cls = tag.get("class")
    if isinstance(cls, (list, tuple)):
        return " ".join(cls)
    return cls or ""


def _resolve(base: str, href: str) -> str:
    if not base or not href:
        return href or ""
    try:
        return urljoin(base, href)
    except ValueError:
        return ""


def _host(url: str) -> str:
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


# ─── Name heuristics ──────────────────────────────────────────────────────
def is_company_name(text: str) -> bool:
    """Does a bare text leaf look like an organization name?"""
    if not text or not (2 < len(text) < 50):
        return False
    if not any(p.search(text) for p in COMPANY_PATTERNS):
        return False
    return text.lower() not in EXCLUDE_WORDS


def company_name_from_url(href: str) -> str:
    """'https://www.my-cool-partner.io/x' → 'My Cool Partner'."""
    host = _host(href)
    if not host:
        return ""
    host = HOST_PREFIX_RE.sub("", host, count=1)
    host = HOST_SUFFIX_RE.sub("", host, count=1)
    words = re.split(r"[-_.]", host)
    return " ".join(w[:1].upper() + w[1:] for w in words)


def clean_company_name(name: str) -> str:
    return LOGO_WORD_RE.sub("", (name or "").strip())


def classify_context(text: str):
    """Return (is_investor_context, is_partner_context) for a container's text."""
    text = text or ""
    return bool(INVESTOR_CONTEXT_RE.search(text)), bool(PARTNER_CONTEXT_RE.search(text))


# ─── DOM scanning ─────────────────────────────────────────────────────────
def find_logo_containers(soup) -> list:
    """Every element whose class attribute contains a container term, in document order."""
    def is_container(tag):
        cls = _class_string(tag)
        return bool(cls) and any(term in cls for term in CONTAINER_CLASS_TERMS)
    return _soup(soup).find_all(is_container)


def _image_link_names(container, page_url: str, page_host: str) -> list[str]:
    names = []
    for img in container.find_all("img"):
        link = img.find_parent("a")
        if link is None:
            continue

        name = img.get("alt") or img.get("title") or link.get("aria-label") or ""

        # no label at all: fall back to the outbound link's hostname
        href = link.get("href") or ""
        if not name and href:
            target = _resolve(page_url, href)
            target_host = _host(target)
            if target_host and target_host != page_host:
                name = company_name_from_url(target)

        names.append(name)
    return names


def _text_leaf_names(container) -> list[str]:
    names = []
    for el in container.find_all(["li", "p", "span"]):
        if el.find(True) is not None:
            continue
        text = el.get_text().strip()
        if is_company_name(text):
            names.append(text)
    return names


def find_known_entities(page_text: str):
    """Verbatim allow-list hits in the page text → (partners, investors)."""
    page_text = page_text or ""
    partners  = [p for p in WELL_KNOWN_PARTNERS if p in page_text]
    investors = [v for v in WELL_KNOWN_INVESTORS if v in page_text]
    return partners, investors


def _route(name, is_investor, is_partner, partners, investors):
    name = clean_company_name(name)
    if len(name) <= 1:
        return
    # first classification wins
    if name in partners or name in investors:
        return

    if is_investor:
        investors.add(name)
    elif is_partner:
        partners.add(name)
    elif any(ind in name for ind in VC_INDICATORS):
        investors.add(name)
    else:
        partners.add(name)


# ─── Public entry-point ───────────────────────────────────────────────────
def extract_partners_investors(html_or_soup, page_url: str = "") -> dict:
    """
    Scan one page snapshot for partner and investor names.

    Returns {"partners": [...], "investors": [...], "all_names": [...]},
    every list sorted and free of duplicates. A name never lands in both
    partners and investors: inside logo containers the first classification
    sticks, and an allow-list hit moves a name to the allow-list's side.
    """
    soup = _soup(html_or_soup)
    page_host = _host(page_url)
    partners, investors = set(), set()

    for container in find_logo_containers(soup):
        is_investor, is_partner = classify_context(text_content(container))
        for name in _image_link_names(container, page_url, page_host):
            _route(name, is_investor, is_partner, partners, investors)
        for name in _text_leaf_names(container):
            _route(name, is_investor, is_partner, partners, investors)

    body = soup.body if soup.body is not None else soup
    known_partners, known_investors = find_known_entities(text_content(body))
    for name in known_partners:
        investors.discard(name)
        partners.add(name)
    for name in known_investors:
        partners.discard(name)
        investors.add(name)

    return {
        "partners":  sorted(partners),
        "investors": sorted(investors),
        "all_names": sorted(partners | investors),
    }


# ─── Page analysis ────────────────────────────────────────────────────────
def analyze_page(html_or_soup, base_url: str = "") -> dict:
    """Navigation links plus a short preview of the first few sections."""
    soup = _soup(html_or_soup)

    nav_links = []
    for a in soup.select(NAV_LINK_SELECTOR):
        href = a.get("href") or ""
        nav_links.append({
            "text": a.get_text().strip(),
            "href": _resolve(base_url, href),
        })

    sections = []
    for section in soup.select(SECTION_SELECTOR)[:MAX_SECTIONS]:
        heading = section.find(["h1", "h2", "h3", "h4"])
        sections.append({
            "heading": heading.get_text().strip() if heading else None,
            "preview": text_content(section)[:SECTION_PREVIEW_CHARS],
        })

    return {"nav_links": nav_links, "sections": sections}


def find_relevant_links(nav_links: list[dict]) -> list[dict]:
    relevant = []
    for link in nav_links:
        text = (link.get("text") or "").lower()
        if any(k in text for k in RELEVANT_LINK_KEYWORDS):
            relevant.append(link)
    return relevant
