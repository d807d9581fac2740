"""File-based templates -- the most common real-world pattern.

Loads templates from disk with FileSystemLoader, demonstrates template
inheritance ({{<base}} / {{*block}}) and partials ({{>partials/nav}}).

Run:
    python app.py
"""

from pathlib import Path

from whisker import Environment, FileSystemLoader

templates_dir = Path(__file__).parent / "templates"
env = Environment(loader=FileSystemLoader(str(templates_dir)))

site = {
    "site_name": "My Site",
    "nav_items": [
        {"url": "/", "label": "Home"},
        {"url": "/about", "label": "About"},
    ],
}

home_template = env.get_template("home.html")
about_template = env.get_template("about.html")

# Page data first, shared site data as the outer context
home_output = home_template.render(
    {
        "title": "Welcome",
        "message": "This is a whisker-powered site with template inheritance.",
    },
    site,
)

about_output = about_template.render(
    {
        "title": "About Us",
        "description": "Built with whisker, a mustache-style template engine.",
    },
    site,
)


def main() -> None:
    print("=== Home Page ===")
    print(home_output)
    print()
    print("=== About Page ===")
    print(about_output)


if __name__ == "__main__":
    main()
