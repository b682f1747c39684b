import html
import json

LEAFLET_VERSION = "1.9.4"
BASE_TILE_URL = "https://{s}.tile.openstreetmap.org/{z}/{x}/{y}.png"
BASE_ATTRIBUTION = 'Map data &copy; <a href="https://www.openstreetmap.org/">OpenStreetMap</a> contributors'
BASE_MAX_ZOOM = 19


def _layer_js(layer) -> str:
    return (
        f"L.tileLayer({json.dumps(layer.url_template)}, "
        f"{json.dumps(layer.leaflet_options())}).addTo(map);"
    )


def map_html(view, layers, element_id: str = "radar-map", height: int = 420, caption: str = "") -> str:
    """Leaflet map centred on `view` with the OSM base layer and the given radar layers."""
    layer_lines = "\n                ".join(_layer_js(layer) for layer in layers)
    caption_html = (
        f'<div id="{element_id}-label" class="radar-label">{html.escape(caption)}</div>' if caption else ""
    )
    return f"""
            <link rel="stylesheet" href="https://unpkg.com/leaflet@{LEAFLET_VERSION}/dist/leaflet.css" />
            <div id="{element_id}" class="radar-map"></div>
            {caption_html}
            <style>
              .radar-map {{
                height: {height}px;
                width: 100%;
                border-radius: 16px;
                overflow: hidden;
              }}
              .radar-label {{
                margin-top: 6px;
                font-size: 0.85rem;
                font-family: "Space Grotesk", "Segoe UI", sans-serif;
              }}
            </style>
            <script src="https://unpkg.com/leaflet@{LEAFLET_VERSION}/dist/leaflet.js"></script>
            <script>
              (function() {{
                const map = L.map('{element_id}').setView([{view.lat:.4f}, {view.lon:.4f}], {int(view.zoom)});
                L.tileLayer({json.dumps(BASE_TILE_URL)}, {{
                  attribution: {json.dumps(BASE_ATTRIBUTION)},
                  maxZoom: {BASE_MAX_ZOOM}
                }}).addTo(map);
                {layer_lines}
              }})();
            </script>
            """


def page_html(view, layers, title: str = "Radar", caption: str = "") -> str:
    body = map_html(view, layers, height=600, caption=caption)
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8" />
  <title>{html.escape(title)}</title>
</head>
<body>
{body}
</body>
</html>
"""


def loop_html(
    view,
    frames,
    start_index: int = 0,
    playing: bool = False,
    interval_ms: int = 500,
    caption: str = "",
    element_id: str = "radar-loop",
    height: int = 420,
) -> str:
    """
    Leaflet map that owns the frame loop.

    `frames` is a list of (overlay, label) pairs. Layers are built once per path
    inside the page and the interval runs in the browser, so the map keeps its
    pan and zoom while the loop plays. Identical arguments give identical HTML.
    """
    frames_json = json.dumps(
        [
            {
                "path": overlay.path,
                "url": overlay.url_template,
                "options": overlay.leaflet_options(),
                "label": label,
            }
            for overlay, label in frames
        ]
    )
    playing_js = "true" if playing and frames else "false"
    return f"""
            <link rel="stylesheet" href="https://unpkg.com/leaflet@{LEAFLET_VERSION}/dist/leaflet.css" />
            <div id="{element_id}" class="radar-map"></div>
            <div id="{element_id}-label" class="radar-label">{html.escape(caption)}</div>
            <style>
              .radar-map {{
                height: {height}px;
                width: 100%;
                border-radius: 16px;
                overflow: hidden;
              }}
              .radar-label {{
                margin-top: 6px;
                font-size: 0.85rem;
                font-family: "Space Grotesk", "Segoe UI", sans-serif;
              }}
            </style>
            <script src="https://unpkg.com/leaflet@{LEAFLET_VERSION}/dist/leaflet.js"></script>
            <script>
              (function() {{
                const map = L.map('{element_id}').setView([{view.lat:.4f}, {view.lon:.4f}], {int(view.zoom)});
                L.tileLayer({json.dumps(BASE_TILE_URL)}, {{
                  attribution: {json.dumps(BASE_ATTRIBUTION)},
                  maxZoom: {BASE_MAX_ZOOM}
                }}).addTo(map);

                const frames = {frames_json};
                const frameIntervalMs = {int(interval_ms)};
                const playing = {playing_js};
                const label = document.getElementById('{element_id}-label');
                const radarLayers = new Map();
                let idx = {int(start_index)};

                const layerFor = (frame) => {{
                  if (!radarLayers.has(frame.path)) {{
                    radarLayers.set(frame.path, L.tileLayer(frame.url, frame.options));
                  }}
                  return radarLayers.get(frame.path);
                }};

                const showFrame = (position) => {{
                  if (!frames.length) return;
                  if (position < 0) position = frames.length - 1;
                  if (position >= frames.length) position = 0;
                  idx = position;
                  radarLayers.forEach((layer) => {{
                    if (map.hasLayer(layer)) map.removeLayer(layer);
                  }});
                  layerFor(frames[idx]).addTo(map);
                  label.textContent = frames[idx].label;
                }};

                showFrame(idx);
                if (playing) {{
                  setInterval(() => showFrame(idx + 1), frameIntervalMs);
                }}
              }})();
            </script>
            """
