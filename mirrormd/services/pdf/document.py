from __future__ import annotations

import html

from mirrormd.services.pdf.themes import PdfTheme, PdfThemeCatalog

DEFAULT_TITLE = "Document"

# Shared stylesheet; every color comes from the theme's custom properties.
BASE_PDF_CSS = """
* { margin: 0; padding: 0; box-sizing: border-box; }

html, body { background: var(--bg); }

body {
  font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif;
  font-size: 12pt;
  line-height: 1.6;
  color: var(--text);
}

h1, h2, h3, h4, h5, h6 {
  color: var(--heading);
  margin-top: 1.5em;
  margin-bottom: 0.5em;
  font-weight: 600;
  line-height: 1.3;
}
h1 { font-size: 2em; border-bottom: 2px solid var(--accent); padding-bottom: 0.3em; }
h2 { font-size: 1.5em; border-bottom: 1px solid var(--border); padding-bottom: 0.2em; }
h3 { font-size: 1.25em; }
h4 { font-size: 1.1em; }
h1:first-child, h2:first-child { margin-top: 0; }

p { margin-bottom: 1em; }
a { color: var(--link); text-decoration: none; }
strong { font-weight: 600; color: var(--heading); }
em { font-style: italic; }

code {
  font-family: 'SF Mono', 'Fira Code', Monaco, Consolas, monospace;
  font-size: 0.9em;
  background-color: var(--code-bg);
  padding: 0.2em 0.4em;
  border-radius: 3px;
  color: var(--code-text);
}

pre, .codehilite {
  background-color: var(--code-bg) !important;
  border-radius: 6px;
  margin-bottom: 1em;
}
pre {
  padding: 1em;
  overflow-x: auto;
  border-left: 4px solid var(--accent);
}
pre code { background: transparent; padding: 0; color: inherit; }

blockquote {
  margin: 1em 0;
  padding: 0.5em 1em;
  border-left: 4px solid var(--accent);
  background-color: var(--quote-bg);
  color: var(--heading);
  font-style: italic;
}

ul, ol { margin-bottom: 1em; padding-left: 2em; }
li { margin-bottom: 0.25em; }
li.task-list-item { list-style-type: none; }

table { width: 100%; border-collapse: collapse; margin-bottom: 1em; }
th, td { padding: 0.5em 0.75em; text-align: left; border: 1px solid var(--border); }
th { background-color: var(--code-bg); font-weight: 600; color: var(--heading); }

hr { border: none; height: 1px; background-color: var(--border); margin: 2em 0; }
img { max-width: 100%; height: auto; }

@media print {
  * { -webkit-print-color-adjust: exact; print-color-adjust: exact; }
  pre, code { white-space: pre-wrap; word-wrap: break-word; overflow-wrap: anywhere; }
  pre, blockquote, table, img { break-inside: avoid; }
  h1, h2, h3, h4 { break-after: avoid-page; }
}
"""

PDF_HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="UTF-8">
<title>{title}</title>
<style>
{theme_css}{base_css}
</style>
</head>
<body class="pdf-theme-{theme_id}">
{body}
</body>
</html>
"""


def build_document(fragment: str, theme: PdfTheme, *, title: str | None = None) -> str:
    """Wrap a rendered HTML fragment in a standalone, themed document."""
    return PDF_HTML_TEMPLATE.format(
        title=html.escape((title or "").strip() or DEFAULT_TITLE),
        theme_css=PdfThemeCatalog.css_for(theme),
        base_css=BASE_PDF_CSS,
        theme_id=html.escape(theme.id, quote=True),
        body=fragment,
    )
