"""Browser classification of user-agent strings.

Used only to choose the response encoding (HTML for browsers, JSON for
everything else). It never gates what data is computed.
"""

NON_BROWSER_SIGNATURES: tuple[str, ...] = (
    "curl",
    "wget",
    "python",
    "httpie",
    "postman",
    "insomnia",
    "go-http-client",
    "java",
    "okhttp",
    "libwww",
    "bot",
    "crawler",
    "spider",
    "scraper",
    "slurp",
    "headless",
)

BROWSER_SIGNATURES: tuple[str, ...] = (
    "mozilla",
    "chrome",
    "safari",
    "firefox",
    "edge",
    "opera",
    "webkit",
    "gecko",
    "trident",
)


def is_browser(user_agent: str | None) -> bool:
    """Classify a user agent as browser or non-browser.

    Non-browser signatures are checked first, so "Mozilla/5.0 (compatible;
    Googlebot/2.1)" is a non-browser. Empty or unknown agents are
    non-browsers.

    Args:
        user_agent: Raw User-Agent header value.

    Returns:
        True for browsers, False otherwise.
    """
    if not user_agent:
        return False

    ua = user_agent.lower()
    if any(signature in ua for signature in NON_BROWSER_SIGNATURES):
        return False
    return any(signature in ua for signature in BROWSER_SIGNATURES)
