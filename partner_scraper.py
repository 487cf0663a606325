#!/usr/bin/env python3
# partner_scraper.py  ───────────────────────────────────────────────────────
"""
Drive a remote Steel browser session (Chrome DevTools Protocol) to a website,
hop to its partners / investors page when the navigation offers one, and list
the partner and investor names found on it.

Usage:
    python partner_scraper.py <URL> [SESSION_ID]
"""
import os
import sys
import asyncio
from urllib.parse import urlparse, urlunparse, parse_qsl, urlencode
from dotenv import load_dotenv
from playwright.async_api import async_playwright

from partner_extract import extract_partners_investors, analyze_page, find_relevant_links


# ─── Config ───────────────────────────────────────────────────────────────
load_dotenv()

DEFAULT_SESSION_ID = "5af1db23-1373-45bc-be77-c023fa4d4ddf"
STEEL_CDP_URL      = os.getenv("STEEL_CDP_URL") or "ws://localhost:3000/"
STEEL_SESSION_ID   = os.getenv("STEEL_SESSION_ID") or DEFAULT_SESSION_ID

NAV_TIMEOUT_MS    = int(os.getenv("NAV_TIMEOUT_MS", "60000"))
FOLLOW_TIMEOUT_MS = int(os.getenv("FOLLOW_TIMEOUT_MS", "20000"))
SETTLE_MS         = int(os.getenv("SETTLE_MS", "3000"))
FOLLOW_SETTLE_MS  = int(os.getenv("FOLLOW_SETTLE_MS", "2000"))


def harden_console():
    """Windows CP-1252 consoles crash on emoji; re-wrap both streams as UTF-8."""
    if (
        sys.platform.startswith("win")
        and sys.stdout.encoding
        and sys.stdout.encoding.lower() != "utf-8"
    ):
        sys.stdout = open(sys.stdout.fileno(), mode="w", encoding="utf-8",
                          errors="replace", buffering=1)
        sys.stderr = open(sys.stderr.fileno(), mode="w", encoding="utf-8",
                          errors="replace", buffering=1)


# ── helpers ──────────────────────────────────────────────────────────
def is_valid_url(url: str) -> bool:
    """Absolute URL only: scheme and host must both be present."""
    if not url or not isinstance(url, str):
        return False
    try:
        p = urlparse(url)
    except ValueError:
        return False
    return bool(p.scheme) and bool(p.netloc)


def build_cdp_url(session_id: str, base: str = None) -> str:
    p = urlparse(base or STEEL_CDP_URL)
    query = dict(parse_qsl(p.query))
    if session_id:
        query["sessionId"] = session_id
    return urlunparse(p._replace(query=urlencode(query)))


# ─── Page flow ────────────────────────────────────────────────────────────
async def follow_relevant_link(page) -> dict:
    """Look at the landing page's navigation and open the first partner-ish link."""
    print("🔍 Looking for partner/investor sections...")
    analysis = analyze_page(await page.content(), page.url)
    relevant = find_relevant_links(analysis["nav_links"])
    print(f"📍 Identified {len(relevant)} relevant navigation links")

    if relevant:
        target = relevant[0]
        print(f"🖱️ Following: \"{target['text']}\"")
        try:
            await page.goto(target["href"], wait_until="domcontentloaded",
                            timeout=FOLLOW_TIMEOUT_MS)
            await page.wait_for_timeout(FOLLOW_SETTLE_MS)
        except Exception as e:
            print(f"[WARN] ⏳ Page loading slowly, continuing... ({e})")
    return analysis


async def extract_from_page(page, url: str) -> dict:
    print("📄 Navigating to website...")
    await page.goto(url, wait_until="domcontentloaded", timeout=NAV_TIMEOUT_MS)
    await page.wait_for_timeout(SETTLE_MS)

    await follow_relevant_link(page)

    print("🔎 Extracting partner/investor information...\n")
    html = await page.content()
    return extract_partners_investors(html, page.url)


async def scrape_with_session(url: str, session_id: str = None) -> dict:
    session_id = session_id or STEEL_SESSION_ID
    cdp_url = build_cdp_url(session_id)

    print("🔗 Target URL:", url)
    print("🌐 Connecting to Steel session...")

    async with async_playwright() as p:
        browser = None
        try:
            browser = await p.chromium.connect_over_cdp(cdp_url)

            contexts = browser.contexts
            context = contexts[0] if contexts else await browser.new_context()
            pages = context.pages
            page = pages[0] if pages else await context.new_page()

            return await extract_from_page(page, url)
        except Exception as e:
            print(f"[ERROR] ❌ Error during extraction: {e}", file=sys.stderr)
            raise
        finally:
            if browser is not None:
                try:
                    await browser.close()
                except Exception as e:
                    print(f"[WARN] browser close failed: {e}", file=sys.stderr)


# ─── Reporting ────────────────────────────────────────────────────────────
def _print_numbered(names):
    for i, name in enumerate(names, 1):
        print(f"{i}. {name}")


def print_results(results: dict):
    print("📊 Partner / Investor Results:")
    print("================================\n")

    if results["partners"]:
        print("🤝 Partners Found:", len(results["partners"]))
        print("-------------------")
        _print_numbered(results["partners"])
    else:
        print("🤝 Partners: None found")

    print("")

    if results["investors"]:
        print("💰 Investors Found:", len(results["investors"]))
        print("--------------------")
        _print_numbered(results["investors"])
    else:
        print("💰 Investors: None found")

    if results["all_names"]:
        print("\n📌 All Unique Organizations:", len(results["all_names"]))
        print("------------------------------")
        _print_numbered(results["all_names"])


# ─── Public entry-point ───────────────────────────────────────────────────
def scrape_partners_investors(url: str, session_id: str = None) -> dict:
    """
    (url, session_id) → {"partners": [...], "investors": [...], "all_names": [...]}
    Connection and navigation errors propagate to the caller.
    """
    results = asyncio.run(scrape_with_session(url, session_id))
    print_results(results)
    print("\n✅ Extraction complete!")
    return results


def main(argv=None) -> int:
    harden_console()
    argv = sys.argv[1:] if argv is None else argv

    if not argv or not argv[0]:
        print("Usage: python partner_scraper.py <URL> [SESSION_ID]")
        print("Example: python partner_scraper.py https://example.com")
        return 1

    url = argv[0]
    if not is_valid_url(url):
        print(f"❌ Invalid URL provided: {url}", file=sys.stderr)
        return 1

    session_id = argv[1] if len(argv) > 1 else None

    try:
        scrape_partners_investors(url, session_id)
    except Exception as e:
        print(f"Failed to complete scraping: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
