"""SVG bodygraph for a computed chart."""

from html import escape

from . import mandala

# centre positions on a 400x600 canvas
_LAYOUT = {
    "HEAD": (200, 50, "triangle_up"),
    "AJNA": (200, 135, "triangle_down"),
    "THROAT": (200, 225, "square"),
    "G": (200, 320, "diamond"),
    "HEART": (285, 365, "triangle_up"),
    "SPLEEN": (75, 440, "triangle_right"),
    "SACRAL": (200, 450, "square"),
    "SOLAR_PLEXUS": (325, 440, "triangle_left"),
    "ROOT": (200, 545, "square"),
}

_FILL = {
    "HEAD": "#f4d35e",
    "AJNA": "#6ab04c",
    "THROAT": "#b5651d",
    "G": "#f4d35e",
    "HEART": "#e55039",
    "SPLEEN": "#b5651d",
    "SACRAL": "#e55039",
    "SOLAR_PLEXUS": "#b5651d",
    "ROOT": "#b5651d",
}

_STROKE = {"personality": "#222", "design": "#c0392b", "both": "#7f3f98"}


def _shape(kind, x, y, r=32):
    if kind == "square":
        return f'<rect x="{x - r}" y="{y - r}" width="{2 * r}" height="{2 * r}" rx="6"'
    if kind == "diamond":
        pts = [(x, y - r), (x + r, y), (x, y + r), (x - r, y)]
    elif kind == "triangle_up":
        pts = [(x, y - r), (x + r, y + r), (x - r, y + r)]
    elif kind == "triangle_down":
        pts = [(x - r, y - r), (x + r, y - r), (x, y + r)]
    elif kind == "triangle_right":
        pts = [(x - r, y - r), (x + r, y), (x - r, y + r)]
    else:
        pts = [(x + r, y - r), (x - r, y), (x + r, y + r)]
    return '<polygon points="' + " ".join(f"{px},{py}" for px, py in pts) + '"'


def render_bodygraph(Chart):
    defined = set(Chart.defined_centers)
    activations = Chart.gate_activations()

    lines = []
    for a, b in Chart.active_channels:
        ax, ay, _ = _LAYOUT[mandala.GATE_CENTER[a]]
        bx, by, _ = _LAYOUT[mandala.GATE_CENTER[b]]
        who = "both" if activations.get(a) != activations.get(b) else activations.get(a, "both")
        lines.append(
            f'<line x1="{ax}" y1="{ay}" x2="{bx}" y2="{by}" stroke="{_STROKE[who]}" '
            f'stroke-width="6" data-channel="{a}-{b}" />'
        )

    centers = []
    for name, (x, y, kind) in _LAYOUT.items():
        fill = _FILL[name] if name in defined else "#ffffff"
        centers.append(
            f'{_shape(kind, x, y)} fill="{fill}" stroke="#555" stroke-width="2" data-center="{name}" />'
        )

    gates = []
    for i, (gate, who) in enumerate(activations.items()):
        gates.append(
            f'<text x="{10 + (i % 13) * 30}" y="{590 - (i // 13) * 14}" font-size="10" '
            f'fill="{_STROKE[who]}" data-gate="{gate}">{gate}</text>'
        )

    title = escape(getattr(Chart.chart_type, "name", str(Chart.chart_type)))
    return f'''<svg xmlns="http://www.w3.org/2000/svg" width="400" height="600" viewBox="0 0 400 600">
      <title>{title}</title>
      {"".join(lines)}
      {"".join(centers)}
      {"".join(gates)}
    </svg>'''
