"""MapLibre-based choropleth map component with hover tooltips and outlier outlines."""

import streamlit as st


# HTML template (just libraries)
COMPONENT_HTML = """
<script src="https://unpkg.com/maplibre-gl@4.7.1/dist/maplibre-gl.js"></script>
<link href="https://unpkg.com/maplibre-gl@4.7.1/dist/maplibre-gl.css" rel="stylesheet" />
"""

# CSS for component styling (height controlled here, not via parameter!)
COMPONENT_CSS = """
.map-container {
    width: 100%;
    height: 700px;
    position: relative;
}
.maplibregl-popup-content {
    background: white;
    color: #222;
    font-size: 13px;
    padding: 10px;
    max-width: 320px;
    box-shadow: 0 0 6px rgba(0,0,0,0.3);
}
.maplibregl-popup-content b {
    font-weight: 600;
}
.maplibregl-popup-content .median-note {
    color: #555;
    font-style: italic;
}
"""

# JavaScript component logic
COMPONENT_JS = """
export default function(component) {
    const { parentElement, data, setStateValue } = component;

    console.log('Data received, features:', data.geojson ? data.geojson.features.length : 'none');

    const strokes = data.strokes || {
        default: { strokeColor: '#333333', weight: 1, opacity: 0.6 },
        hover: { strokeColor: '#000000', weight: 3, opacity: 0.9 }
    };

    let map = null;
    let mapContainer = null;
    let loadingOverlay = null;
    let hoveredId = null;

    function createElementsAndInit() {
        mapContainer = document.createElement('div');
        mapContainer.className = 'map-container';

        loadingOverlay = document.createElement('div');
        loadingOverlay.style.cssText = 'position: absolute; top: 0; left: 0; right: 0; bottom: 0; background: rgba(255,255,255,0.95); display: flex; align-items: center; justify-content: center; z-index: 9999;';
        loadingOverlay.innerHTML = `
            <div style="text-align: center;">
                <div style="font-size: 18px; font-weight: bold; color: #333; margin-bottom: 10px;">Loading map...</div>
                <div style="font-size: 14px; color: #666;">Rendering regions</div>
            </div>
        `;

        mapContainer.appendChild(loadingOverlay);
        parentElement.appendChild(mapContainer);

        initMap();
    }

    function tooltipHtml(props) {
        let shares = props.tooltip_class_shares || [];
        if (typeof shares === 'string') {
            shares = JSON.parse(shares);
        }
        const shareLines = shares.map(
            ([label, share]) => `<b>${label}:</b> ${share}<br/>`
        ).join('');
        const note = props.tooltip_median_note
            ? `<div class="median-note">${props.tooltip_median_note}</div>`
            : '';
        const outlier = props.outlier_rank > 0
            ? `<b>Outlier rank:</b> #${props.outlier_rank}<br/>`
            : '';

        if (shareLines) {
            return `
                <b>${props.tooltip_title}</b><br/>
                <b>${props.tooltip_metric_label}:</b> ${props.tooltip_value}<br/>
                <hr style="margin: 5px 0; border: none; border-top: 1px solid #ddd;"/>
                ${shareLines}
                <b>Parcels:</b> ${props.tooltip_sample_size}
            `;
        }

        return `
            <b>${props.tooltip_title}</b><br/>
            <b>${props.tooltip_metric_label}:</b> ${props.tooltip_value}<br/>
            ${outlier}
            <hr style="margin: 5px 0; border: none; border-top: 1px solid #ddd;"/>
            <b>${props.tooltip_prior_label}:</b> ${props.tooltip_prior_value}<br/>
            <b>${props.tooltip_current_label}:</b> ${props.tooltip_current_value}<br/>
            <b>Parcels:</b> ${props.tooltip_sample_size}
            ${note}
        `;
    }

    function initMap() {
        if (typeof maplibregl === 'undefined') {
            setTimeout(initMap, 50);
            return;
        }

        map = new maplibregl.Map({
            container: mapContainer,
            style: {
                version: 8,
                sources: {
                    'carto-light': {
                        type: 'raster',
                        tiles: [
                            'https://a.basemaps.cartocdn.com/light_all/{z}/{x}/{y}.png',
                            'https://b.basemaps.cartocdn.com/light_all/{z}/{x}/{y}.png',
                            'https://c.basemaps.cartocdn.com/light_all/{z}/{x}/{y}.png'
                        ],
                        tileSize: 256,
                        attribution: '&copy; <a href="https://www.openstreetmap.org/copyright">OpenStreetMap</a> contributors &copy; <a href="https://carto.com/attributions">CARTO</a>'
                    }
                },
                layers: [
                    {
                        id: 'carto-light-layer',
                        type: 'raster',
                        source: 'carto-light',
                        minzoom: 0,
                        maxzoom: 22
                    }
                ]
            },
            center: [data.center.lon, data.center.lat],
            zoom: data.zoom
        });

    map.addControl(new maplibregl.NavigationControl(), 'top-right');

    const popup = new maplibregl.Popup({
        closeButton: false,
        closeOnClick: false,
        maxWidth: '320px'
    });

    map.on('load', () => {
        map.addSource('regions', {
            type: 'geojson',
            data: data.geojson
        });

        map.addLayer({
            id: 'regions-fill',
            type: 'fill',
            source: 'regions',
            paint: {
                'fill-color': ['get', 'fillColor'],
                'fill-opacity': 0.7
            }
        });

        map.addLayer({
            id: 'regions-line',
            type: 'line',
            source: 'regions',
            paint: {
                'line-color': [
                    'case',
                    ['boolean', ['feature-state', 'hover'], false],
                    strokes.hover.strokeColor,
                    strokes.default.strokeColor
                ],
                'line-width': [
                    'case',
                    ['boolean', ['feature-state', 'hover'], false],
                    strokes.hover.weight,
                    strokes.default.weight
                ],
                'line-opacity': [
                    'case',
                    ['boolean', ['feature-state', 'hover'], false],
                    strokes.hover.opacity,
                    strokes.default.opacity
                ]
            }
        });

        // Outliers get a dashed outline
        map.addLayer({
            id: 'regions-outliers',
            type: 'line',
            source: 'regions',
            filter: ['>', ['get', 'outlier_rank'], 0],
            paint: {
                'line-color': '#000000',
                'line-width': 2,
                'line-dasharray': [2, 1]
            }
        });

        map.on('mousemove', 'regions-fill', (e) => {
            if (!e.features || e.features.length === 0) return;
            const feature = e.features[0];

            map.getCanvas().style.cursor = 'pointer';
            if (hoveredId !== null && hoveredId !== feature.id) {
                map.setFeatureState({ source: 'regions', id: hoveredId }, { hover: false });
            }
            hoveredId = feature.id;
            map.setFeatureState({ source: 'regions', id: hoveredId }, { hover: true });

            popup.setLngLat(e.lngLat).setHTML(tooltipHtml(feature.properties)).addTo(map);
        });

        map.on('mouseleave', 'regions-fill', () => {
            map.getCanvas().style.cursor = '';
            if (hoveredId !== null) {
                map.setFeatureState({ source: 'regions', id: hoveredId }, { hover: false });
            }
            hoveredId = null;
            popup.remove();
        });

        map.on('click', 'regions-fill', (e) => {
            if (!e.features || e.features.length === 0) return;
            setStateValue('selected_region', e.features[0].properties.GEOID);
        });

        if (loadingOverlay) {
            loadingOverlay.remove();
        }
    });

    map.on('error', (e) => {
        console.error('MapLibre error:', e);
    });
    }

    createElementsAndInit();

    return () => {
        if (map) {
            map.remove();
        }
    };
}
"""

# Register the component (v2: name, html, css, js - NO height parameter!)
choropleth_map = st.components.v2.component(
    "choropleth_map",
    html=COMPONENT_HTML,
    css=COMPONENT_CSS,
    js=COMPONENT_JS
)


def render_choropleth_map(geojson_data: dict, center: list, zoom: int, strokes: dict):
    """
    Render the choropleth map.

    Args:
        geojson_data: FeatureCollection with fillColor and tooltip_* properties
        center: [lat, lon] for map center
        zoom: Initial zoom level
        strokes: Default and hover stroke styles

    Returns:
        dict: Component value with selected_region (GEOID)
    """
    return choropleth_map(
        data={
            "geojson": geojson_data,
            "center": {"lat": center[0], "lon": center[1]},
            "zoom": zoom,
            "strokes": strokes,
        },
        on_selected_region_change=lambda: None  # Required for v2 state capture
    )
