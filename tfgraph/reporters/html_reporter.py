"""
Standalone HTML page with a Mermaid dependency diagram.
"""
from datetime import datetime, timezone

from jinja2 import Environment

from tfgraph import __version__
from tfgraph.models.graph import DiagramGraph
from tfgraph.reporters import markdown

_HTML_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Infrastructure Diagram - tfgraph</title>
    <script src="https://cdn.jsdelivr.net/npm/mermaid/dist/mermaid.min.js"></script>
    <style>
        body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif; line-height: 1.6; color: #333; max-width: 1200px; margin: 0 auto; padding: 2rem; background: #f9f9f9; }
        header { border-bottom: 2px solid #ddd; margin-bottom: 2rem; padding-bottom: 1rem; }
        h1 { color: #1565c0; margin-bottom: 0; }
        .meta { color: #666; font-size: 0.9rem; margin-bottom: 2rem; }
        .summary-cards { display: grid; grid-template-columns: repeat(auto-fit, minmax(130px, 1fr)); gap: 1rem; margin-bottom: 2rem; }
        .card { background: white; padding: 1rem; border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); text-align: center; border-left: 5px solid #90caf9; }
        .card-num { font-size: 2rem; font-weight: bold; margin-bottom: 0.2rem; }
        .card-label { color: #666; font-size: 0.8rem; text-transform: uppercase; }
        .mermaid-container { background: white; padding: 2rem; border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); margin-bottom: 2rem; overflow-x: auto; }
        table { width: 100%; border-collapse: collapse; background: white; border-radius: 8px; overflow: hidden; box-shadow: 0 2px 4px rgba(0,0,0,0.1); margin-bottom: 2rem; }
        th, td { padding: 0.75rem 1rem; text-align: left; border-bottom: 1px solid #eee; }
        th { background: #f5f5f5; font-weight: 600; }
        code { font-size: 0.85rem; }
        footer { margin-top: 4rem; text-align: center; color: #999; font-size: 0.8rem; }
    </style>
</head>
<body>
    <header>
        <h1>Infrastructure Diagram</h1>
        <div class="meta">Generated: {{ generated }} | Source: {{ source }} | tfgraph v{{ version }}</div>
    </header>

    <div class="summary-cards">
        <div class="card"><div class="card-num">{{ resources|length }}</div><div class="card-label">Resources</div></div>
        <div class="card"><div class="card-num">{{ dependencies|length }}</div><div class="card-label">Dependencies</div></div>
        {% for cat, n in counts.items() if n > 0 %}
        <div class="card"><div class="card-num">{{ n }}</div><div class="card-label">{{ cat }}</div></div>
        {% endfor %}
    </div>

    <h2>Dependency Diagram</h2>
    <div class="mermaid-container">
        <div class="mermaid">
{{ mermaid }}
        </div>
    </div>

    <h2>Resources</h2>
    <table>
        <thead><tr><th>Resource</th><th>Category</th><th>File</th><th>Outputs</th></tr></thead>
        <tbody>
            {% for r in resources %}
            <tr>
                <td><code>{{ r.id }}</code></td>
                <td>{{ r.category.value }}</td>
                <td>{{ r.origin }}</td>
                <td>{% for name in r.outputs %}<code>{{ name }}</code> {% endfor %}</td>
            </tr>
            {% endfor %}
        </tbody>
    </table>

    <h2>Dependencies</h2>
    <table>
        <thead><tr><th>Source</th><th>Target</th><th>References</th></tr></thead>
        <tbody>
            {% for d in dependencies %}
            <tr>
                <td><code>{{ d.source }}</code></td>
                <td><code>{{ d.target }}</code></td>
                <td>{% for ref in d.references %}<div><code>{{ ref.source_property or "?" }}</code> &rarr; <code>{{ ref.raw_expression }}</code></div>{% endfor %}</td>
            </tr>
            {% endfor %}
        </tbody>
    </table>

    <footer>tfgraph | Terraform dependency diagrams</footer>

    <script>
        mermaid.initialize({ startOnLoad: true, theme: 'neutral' });
    </script>
</body>
</html>
"""


def build_report(graph: DiagramGraph, source_path: str) -> str:
    env = Environment(autoescape=True)
    template = env.from_string(_HTML_TEMPLATE)

    return template.render(
        generated=datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC"),
        source=source_path,
        version=__version__,
        counts=markdown._count_by_category(graph.resources),
        resources=graph.resources,
        dependencies=graph.dependencies,
        mermaid=markdown.build_mermaid(graph),
    )
