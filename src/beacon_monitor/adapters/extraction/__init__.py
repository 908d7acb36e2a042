"""Page extraction adapters."""

from beacon_monitor.adapters.extraction.html_extractor import HtmlPageExtractor, normalize_text

__all__ = ["HtmlPageExtractor", "normalize_text"]
