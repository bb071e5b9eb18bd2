"""
HTML page for a query and its answer. Both strings are escaped.
"""

import html

PAGE_TITLE = "TechBay Customer Support"

_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{title}</title>
</head>
<body>
<h1>{title}</h1>
<h2>Your Query:</h2>
<p>{query}</p>
<h2>Our Response:</h2>
<p>{answer}</p>
</body>
</html>
"""


def render_page(query: str, answer: str, title: str = PAGE_TITLE) -> str:
    """Render the answer page; newlines in the answer become <br> line breaks."""
    answer_html = "<br>\n".join(html.escape(line) for line in (answer or "").splitlines())
    return _PAGE.format(title=html.escape(title), query=html.escape(query or ""), answer=answer_html)
