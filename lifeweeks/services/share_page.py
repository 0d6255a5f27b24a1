"""Share page rendering for stored Life in Weeks snapshots.

The page embeds the payload twice: as an Open Graph image meta tag for link
preview bots, which only read meta tags, and as a visible ``<img>`` for
people opening the link. No script is included.
"""

import html

SHARE_TITLE = "Life in Weeks - Shared Visualization"
OG_TITLE = "Life in Weeks Visualization"
OG_DESCRIPTION = "View my life journey visualization"
IMAGE_ALT = "Life in Weeks Visualization"

_PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
  <head>
    <title>{title}</title>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta property="og:title" content="{og_title}" />
    <meta property="og:description" content="{og_description}" />
    <meta property="og:image" content="{image}" />
    <meta name="twitter:card" content="summary_large_image" />
    <meta name="twitter:image" content="{image}" />
    <style>
      body {{
        margin: 0;
        padding: 20px;
        display: flex;
        justify-content: center;
        align-items: center;
        min-height: 100vh;
        background: #f5f5f5;
        font-family: system-ui, -apple-system, sans-serif;
      }}
      .container {{
        max-width: 1000px;
        width: 100%;
      }}
      img {{
        width: 100%;
        height: auto;
        border-radius: 12px;
        box-shadow: 0 4px 6px rgba(0, 0, 0, 0.1);
      }}
    </style>
  </head>
  <body>
    <div class="container">
      <img src="{image}" alt="{alt}" />
    </div>
  </body>
</html>
"""


def render_share_page(
    payload: str,
    title: str = SHARE_TITLE,
    description: str = OG_DESCRIPTION,
) -> str:
    """Render the HTML page served for a shared snapshot.

    Args:
        payload: Embeddable image reference, usually a ``data:`` URI.
        title: Document title.
        description: Open Graph description shown in link previews.

    Returns:
        Complete HTML document with the payload in ``og:image`` and ``<img src>``.
    """
    return _PAGE_TEMPLATE.format(
        title=html.escape(title),
        og_title=html.escape(OG_TITLE),
        og_description=html.escape(description),
        image=html.escape(payload, quote=True),
        alt=html.escape(IMAGE_ALT),
    )
