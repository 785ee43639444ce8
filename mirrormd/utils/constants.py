APP_ORG = "MirrorMD"
APP_NAME = "MirrorMD"

# Preview stylesheet: the body class selects the Solarized palette of the UI theme.
CSS_PREVIEW = """
body.solarized-light { --bg:#fdf6e3; --fg:#657b83; --muted:#93a1a1; --code:#eee8d5; --border:#93a1a1; --link:#268bd2; --accent:#2aa198; }
body.solarized-dark  { --bg:#002b36; --fg:#839496; --muted:#586e75; --code:#073642; --border:#586e75; --link:#268bd2; --accent:#2aa198; }
html,body { background:var(--bg); color:var(--fg); }
body { font-family: -apple-system, Segoe UI, Roboto, Helvetica, Arial, sans-serif; margin: 1.25rem; line-height: 1.6; }
h1,h2,h3,h4,h5 { margin-top: 1.2em; }
h1 { border-bottom: 2px solid var(--accent); padding-bottom: .3em; }
pre { padding:.75rem; overflow:auto; border-radius:6px; background:var(--code); }
code { background:var(--code); padding:.15rem .3rem; border-radius:3px; }
pre code { background:transparent; padding:0; }
.codehilite { border-radius:6px; }
blockquote { border-left:4px solid var(--accent); margin:1em 0; padding:.25em .75em; color:var(--muted); }
table { border-collapse: collapse; }
th, td { border:1px solid var(--border); padding:.4rem .6rem; }
a { color:var(--link); text-decoration:none; } a:hover { text-decoration:underline; }
hr { border:none; border-top:1px solid var(--border); margin:1.5rem 0; }
ul,ol { padding-left:1.5rem; }
img { max-width:100%; height:auto; }
"""

HTML_TEMPLATE = """<!doctype html>
<html>
<head>
<meta charset="utf-8" />
<meta name="viewport" content="width=device-width, initial-scale=1.0"/>
<style>{css}</style>
</head>
<body class="{body_class}">
{body}
</body>
</html>
"""

SETTINGS_GEOMETRY = "window/geometry"
SETTINGS_SPLITTER = "window/splitter"
SETTINGS_RECENTS = "file/recent"
SETTINGS_THEME = "mirrormd/theme"
MAX_RECENTS = 8

MARKDOWN_EXTENSIONS = (".md", ".markdown", ".txt")
MAX_FILE_SIZE = 5 * 1024 * 1024
MAX_EXPORT_SIZE = 10 * 1024 * 1024

DEFAULT_SERVER_URL = "http://127.0.0.1:3000"
DEFAULT_PDF_THEME = "solarized-light"
