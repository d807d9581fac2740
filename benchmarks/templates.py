"""In-memory template sources used by the benchmarks."""

from __future__ import annotations

TEMPLATES = {
    "minimal.html": "Hello, {{name}}!",
    "item.html": '<li class="{{kind}}">{{name}}{{#tags}} #{{.}}{{/tags}}</li>',
    "list.html": (
        "<h1>{{title}}</h1>\n"
        "<ul>\n"
        "{{#items}}\n"
        "  {{>item}}\n"
        "{{/items}}\n"
        "</ul>\n"
        "{{^items}}<p>Nothing here</p>{{/items}}\n"
    ),
    "base.html": (
        "<html><head><title>{{*title}}Site{{/title}}</title></head>"
        "<body>{{*nav}}<nav>{{#links}}<a href=\"{{url}}\">{{label}}</a>{{/links}}</nav>{{/nav}}"
        "<main>{{*content}}{{/content}}</main>"
        "<footer>{{*footer}}(c) {{year}}{{/footer}}</footer></body></html>"
    ),
    "section.html": "{{<base}}{{*title}}{{section}} | Site{{/title}}{{*content}}{{/content}}",
    "page.html": (
        "{{<section}}{{*title}}{{heading}}{{/title}}"
        "{{*content}}<article>{{{body}}}</article>{{>list}}{{/content}}"
    ),
}
