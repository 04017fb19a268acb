"""DuckDB connection management and county data loading."""

import json
import logging

import duckdb
import streamlit as st

from core.config import DEFAULT_DATA_BASE_PATH, DEFAULT_FILE_PATTERN
from core.errors import DataUnavailable

logger = logging.getLogger(__name__)

REMOTE_PREFIXES = ("http://", "https://", "s3://", "gs://", "gcs://")

# GeoJSON files can be a single large object
MAX_OBJECT_SIZE = 512 * 1024 * 1024


def is_remote(path: str) -> bool:
    return path.startswith(REMOTE_PREFIXES)


def create_connection(base_path: str, gcs_settings: dict | None = None) -> duckdb.DuckDBPyConnection:
    """
    Create an in-memory DuckDB connection able to read from base_path.

    Remote bases load httpfs; a GCS secret is created when settings are given.
    """
    conn = duckdb.connect()  # In-memory database

    if is_remote(base_path):
        conn.execute("""
            INSTALL httpfs;
            LOAD httpfs;
        """)

    if gcs_settings:
        conn.execute(f"""
            CREATE SECRET gcs_secret (
                TYPE gcs,
                KEY_ID '{gcs_settings["key_id"]}',
                SECRET '{gcs_settings["secret"]}'
            );
        """)

    return conn


def get_data_settings() -> dict:
    """
    Read data location settings from Streamlit secrets.

    Returns:
        dict with base_path, file_pattern and gcs (dict or None)
    """
    try:
        data = dict(st.secrets.get("data", {}))
        gcs = st.secrets.get("gcs")
    except FileNotFoundError:
        data, gcs = {}, None

    return {
        "base_path": data.get("base_path", DEFAULT_DATA_BASE_PATH),
        "file_pattern": data.get("file_pattern", DEFAULT_FILE_PATTERN),
        "gcs": dict(gcs) if gcs else None,
    }


@st.cache_resource
def get_duckdb_connection():
    """
    Get or create a shared DuckDB connection (app-wide singleton).

    This connection is shared across all user sessions and persists
    for the lifetime of the Streamlit app.

    Returns:
        duckdb.DuckDBPyConnection: Shared DuckDB connection
    """
    settings = get_data_settings()
    return create_connection(settings["base_path"], settings["gcs"])


class DuckDBCountySource:
    """
    Reads one GeoJSON FeatureCollection per county (or per county and layer).

    Args:
        conn: DuckDB connection
        base_path: Directory or URL prefix holding the files
        file_pattern: File name pattern with {county} and optional {layer}
    """

    def __init__(self, conn, base_path: str = DEFAULT_DATA_BASE_PATH,
                 file_pattern: str = DEFAULT_FILE_PATTERN):
        self.conn = conn
        self.base_path = base_path.rstrip("/")
        self.file_pattern = file_pattern

    def path_for(self, county: str, layer) -> str:
        layer_name = getattr(layer, "value", layer)
        file_name = self.file_pattern.format(county=county, layer=layer_name)
        return f"{self.base_path}/{file_name}"

    def fetch(self, county: str, layer) -> list[dict]:
        """
        Load the features for a county.

        Returns:
            List of {"properties": dict, "geometry": dict | None}

        Raises:
            DataUnavailable: the file is missing or unreadable
        """
        path = self.path_for(county, layer).replace("'", "''")
        query = f"""
        SELECT
            to_json(feature['properties']) AS properties_json,
            to_json(feature['geometry']) AS geometry_json
        FROM (
            SELECT unnest(features) AS feature
            FROM read_json_auto('{path}', maximum_object_size = {MAX_OBJECT_SIZE})
        )
        """

        # DuckDB connections are not safe to share across threads; use a cursor
        cursor = self.conn.cursor()
        try:
            rows = cursor.execute(query).fetchall()
        except duckdb.Error as e:
            logger.error("Failed to read %s: %s", path, e)
            raise DataUnavailable(f"Could not load data for {county}: {e}", county=county) from e
        finally:
            cursor.close()

        features = []
        for properties_json, geometry_json in rows:
            features.append({
                "properties": json.loads(properties_json) if properties_json else None,
                "geometry": json.loads(geometry_json) if geometry_json else None,
            })

        logger.info("Loaded %d features for %s from %s", len(features), county, path)
        return features
