"""Glossary term definitions for the Delaware Tax Change Map."""

GLOSSARY_TERMS = {
    "layers": {
        "label": "Map Layers",
        "icon": "📊",
        "terms": {
            "Tax Change": {
                "definition": "Percent change in property tax between the 2024 and 2025 tax years for the area.",
                "formula": r"$$\Large \frac{\text{Tax}_{2025} - \text{Tax}_{2024}}{\text{Tax}_{2024}} \times 100$$",
                "note": "Where a published percent change is missing it is computed from the two tax amounts."
            },
            "Assessment Change": {
                "definition": "Percent change in assessed value following the statewide reassessment."
            },
            "Tax Burden Change": {
                "definition": "Change in taxes as a share of assessed value, in percentage points.",
                "note": "Sources report this either as a percentage or as a fraction; fractions are multiplied by 100."
            },
            "Property Class": {
                "definition": "Share of parcels in each property class. Areas are colored by their largest class."
            }
        }
    },
    "classification": {
        "label": "Colors and Ranking",
        "icon": "🎨",
        "terms": {
            "Median-Centered Buckets": {
                "definition": "Seven color buckets centered on the median of the areas shown: three below, a near-median band, and three above.",
                "interpretation": "**Blue**: below the median\n\n**Light gray**: near the median\n\n**Red**: above the median"
            },
            "Fixed Thresholds": {
                "definition": "Calibrated thresholds used for some county and layer combinations instead of median-centered buckets."
            },
            "Outliers": {
                "definition": "The ten areas with the largest absolute change. They are outlined on the map and listed below it."
            },
            "No Data": {
                "definition": "Areas shown in gray have no usable value for the selected layer."
            }
        }
    },
    "scopes": {
        "label": "Geography",
        "icon": "🗺️",
        "terms": {
            "County": {
                "definition": "New Castle, Kent or Sussex County. Medians and buckets are computed within the county."
            },
            "All Counties": {
                "definition": "All three counties together. Medians and buckets are computed statewide."
            }
        }
    }
}
