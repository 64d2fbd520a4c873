from xml.sax.saxutils import escape

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"

def sitemap_xml(entries):
    body = ['<?xml version="1.0" encoding="UTF-8"?>', f'<urlset xmlns="{SITEMAP_NS}">']
    for entry in entries:
        loc = entry.get('loc')
        if not loc:
            continue
        lastmod = entry.get('lastmod')
        lastmod_tag = f"<lastmod>{escape(lastmod)}</lastmod>" if lastmod else ''
        body.append(f"<url><loc>{escape(loc)}</loc>{lastmod_tag}</url>")
    body.append('</urlset>')
    return "\n".join(body)
